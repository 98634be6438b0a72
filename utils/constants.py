import json
from datetime import time
from config.paths import CONSTANTS_PATH

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)


def _parse_window(bounds):
    start, end = (time.fromisoformat(t) for t in bounds)
    return start, end


# Expose constants as variables
SYSTEM_ACTOR = _constants["SYSTEM_ACTOR"]

# Canonical nurse windows, e.g. {"MORNING": (time(8), time(16)), ...}
NURSE_WINDOWS = {
    label: _parse_window(bounds)
    for label, bounds in _constants["NURSE_WINDOWS"].items()
}
NURSE_SHIFT_HOURS = _constants["NURSE_SHIFT_HOURS"]
DOCTOR_SHIFT_HOURS = _constants["DOCTOR_SHIFT_HOURS"]
NURSE_MAX_DAILY_HOURS = _constants["NURSE_MAX_DAILY_HOURS"]
DOCTOR_MIN_DAILY_HOURS = _constants["DOCTOR_MIN_DAILY_HOURS"]

MIN_RESIDENT_AGE = _constants["MIN_RESIDENT_AGE"]
MAX_RESIDENT_AGE = _constants["MAX_RESIDENT_AGE"]
RESIDENT_ID_PREFIX = _constants["RESIDENT_ID_PREFIX"]
PRESCRIPTION_ID_PREFIX = _constants["PRESCRIPTION_ID_PREFIX"]

DEFAULT_WARDS = _constants["DEFAULT_WARDS"]
DEFAULT_BEDS_PER_ROOM = _constants["DEFAULT_BEDS_PER_ROOM"]
MAX_BEDS_PER_ROOM = _constants["MAX_BEDS_PER_ROOM"]
