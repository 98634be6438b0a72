from typing import Callable, Dict, List, Optional
from core.entities import Role, Shift
from core.state import CareHomeState
from utils.constants import DOCTOR_SHIFT_HOURS, NURSE_SHIFT_HOURS, NURSE_WINDOWS
from utils.shift_utils import describe_window, is_same_day, matching_window, shift_date

"""
Shift legality rules. Each rule is a pure function of the candidate shift and
the current state: it returns a message describing the violation, or None if
the shift passes. Rules never mutate the state.
"""

ShiftRule = Callable[[Shift, CareHomeState], Optional[str]]


def same_calendar_day(shift: Shift, state: CareHomeState) -> Optional[str]:
    if not is_same_day(shift):
        return "Shift must start and end on the same day."
    return None


def doctor_exact_length(shift: Shift, state: CareHomeState) -> Optional[str]:
    if shift.hours != DOCTOR_SHIFT_HOURS:
        return f"Doctor shift must be exactly {DOCTOR_SHIFT_HOURS} hour."
    return None


def nurse_canonical_window(shift: Shift, state: CareHomeState) -> Optional[str]:
    if matching_window(shift) is None:
        windows = " or ".join(describe_window(w) for w in NURSE_WINDOWS)
        return f"Nurse shifts must be {windows}."
    return None


def nurse_exact_length(shift: Shift, state: CareHomeState) -> Optional[str]:
    if shift.hours != NURSE_SHIFT_HOURS:
        return f"Nurse shift must be exactly {NURSE_SHIFT_HOURS} hours."
    return None


def nurse_one_shift_per_day(shift: Shift, state: CareHomeState) -> Optional[str]:
    day = shift_date(shift)
    if any(s.staff_id == shift.staff_id and shift_date(s) == day for s in state.shifts):
        return f"Nurse {shift.staff_id} already has a shift on {day} (one shift per nurse per day)."
    return None


def nurse_window_free(shift: Shift, state: CareHomeState) -> Optional[str]:
    """At most one staff member per canonical window per day."""
    day = shift_date(shift)
    window = matching_window(shift)
    for s in state.shifts:
        if (
            state.role_of(s.staff_id) == Role.NURSE
            and shift_date(s) == day
            and matching_window(s) == window
        ):
            return (
                f"Nurse slot already assigned: {day} {describe_window(window)} "
                f"is held by {s.staff_id}."
            )
    return None


def no_self_overlap(shift: Shift, state: CareHomeState) -> Optional[str]:
    for s in state.shifts:
        if s.overlaps(shift):
            return (
                f"Overlapping shift for {shift.staff_id}: "
                f"{s.start:%Y-%m-%d %H:%M}-{s.end:%H:%M}."
            )
    return None


# Per-role legality, checked after the same-day rule and before the overlap rule
ROLE_RULES: Dict[Role, List[ShiftRule]] = {
    Role.MANAGER: [],
    Role.DOCTOR: [doctor_exact_length],
    Role.NURSE: [
        nurse_exact_length,
        nurse_canonical_window,
        nurse_one_shift_per_day,
        nurse_window_free,
    ],
}


def rules_for(role: Role) -> List[ShiftRule]:
    """Full ordered rule list for a shift assigned to a staff member with `role`."""
    return [same_calendar_day, *ROLE_RULES[role], no_self_overlap]
