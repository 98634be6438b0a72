from datetime import datetime
from typing import List
from core.constraint_manager import ConstraintManager
from core.entities import Shift
from core.shift_rules import rules_for
from core.state import CareHomeState
from exceptions.custom_errors import NotRosteredError, ValidationError
from facility.roster import require_staff
from utils.validate import validate_timestamp


def validate_shift(state: CareHomeState, shift: Shift):
    """
    Run the legality rules for the assignee's role in order:
    same calendar day, role legality, then self-overlap. The first failure
    raises ShiftRuleError and nothing is recorded.
    """
    assignee = require_staff(state, shift.staff_id)
    manager = ConstraintManager(state)
    for rule in rules_for(assignee.role):
        manager.add_rule(rule)
    manager.apply_all(shift)


def add_shift(state: CareHomeState, shift: Shift):
    state.shifts.append(shift)


def shifts_for(state: CareHomeState, staff_id: str) -> List[Shift]:
    return [s for s in state.shifts if s.staff_id == staff_id]


def is_rostered(state: CareHomeState, staff_id: str, at: datetime) -> bool:
    return any(s.staff_id == staff_id and s.covers(at) for s in state.shifts)


def require_naive(at: datetime):
    errors = validate_timestamp(at, "Action time")
    if errors:
        raise ValidationError("".join(errors).strip())


def require_rostered(state: CareHomeState, staff_id: str, at: datetime):
    require_naive(at)
    if not is_rostered(state, staff_id, at):
        raise NotRosteredError(f"Actor {staff_id} not rostered at {at}")
