from datetime import datetime
from typing import List
from core.entities import ActionLog
from core.state import CareHomeState
from utils.logger import logger


def append_log(state: CareHomeState, now: datetime, staff_id: str, action: str) -> ActionLog:
    """
    Append an entry to the action trail. A clock that steps backwards is
    clamped to the previous entry's time so the trail never goes back in time.
    """
    if state.logs and now < state.logs[-1].time:
        now = state.logs[-1].time
    entry = ActionLog(now, staff_id, action)
    state.logs.append(entry)
    logger.info("[AUDIT] %s: %s", staff_id, action)
    return entry


def logs_by(state: CareHomeState, staff_id: str) -> List[ActionLog]:
    return [entry for entry in state.logs if entry.staff_id == staff_id]
