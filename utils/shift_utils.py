import pandas as pd
from datetime import datetime, date as dt_date
from typing import Dict, Iterable, List, Optional
from core.entities import Shift
from utils.constants import NURSE_WINDOWS


def normalise_datetime(value) -> datetime:
    """
    Convert input to a naive datetime.datetime object.
    Supports datetime, pd.Timestamp and ISO-like strings such as '2025-07-07 08:00' or '2025-07-07T08:00:00'.
    """
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    elif isinstance(value, datetime):
        return value
    elif isinstance(value, str):
        try:
            # pandas handles all common formats using dateutil.parser under the hood
            return pd.to_datetime(value, errors="raise").to_pydatetime()
        except Exception as e:
            raise ValueError(f"Could not parse datetime string '{value}': {e}")
    raise ValueError(f"Unsupported datetime type: {type(value)}")


def shift_date(shift: Shift) -> dt_date:
    """Calendar date a shift is booked against (the date it starts on)."""
    return shift.start.date()


def is_same_day(shift: Shift) -> bool:
    return shift.start.date() == shift.end.date()


def matching_window(shift: Shift) -> Optional[str]:
    """
    Return the label of the canonical nurse window the shift sits exactly on
    (e.g. "MORNING" for 08:00-16:00), or None if it matches no window.
    """
    if not is_same_day(shift):
        return None
    for label, (start, end) in NURSE_WINDOWS.items():
        if shift.start.time() == start and shift.end.time() == end:
            return label
    return None


def describe_window(label: str) -> str:
    start, end = NURSE_WINDOWS[label]
    return f"{start:%H:%M}-{end:%H:%M}"


def group_by_staff_and_date(
    shifts: Iterable[Shift],
) -> Dict[str, Dict[dt_date, List[Shift]]]:
    """staff_id -> { date: [shifts starting on that date] }"""
    grouped: Dict[str, Dict[dt_date, List[Shift]]] = {}
    for s in shifts:
        grouped.setdefault(s.staff_id, {}).setdefault(shift_date(s), []).append(s)
    return grouped
