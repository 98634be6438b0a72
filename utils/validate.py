import re
from typing import List, Optional
from core.entities import Resident, Staff
from utils.bed_utils import is_valid_bed_id
from utils.constants import MAX_RESIDENT_AGE, MIN_RESIDENT_AGE


def validate_staff(staff: Staff) -> List[str]:
    """Validate the fields of a staff record before it is upserted."""
    errors = []
    if not staff.id or not staff.id.strip():
        errors.append(" • Staff id must not be blank.\n")
    if not staff.name or not staff.name.strip():
        errors.append(" • Staff name must not be blank.\n")
    return errors


def validate_resident(resident: Resident) -> List[str]:
    """
    Validate the fields of a resident before admission.

    Returns:
        List[str]: One message per problem found, empty if the resident is valid.
    """
    errors = []
    if not resident.name or not resident.name.strip():
        errors.append(" • Resident name must not be blank.\n")
    if not (MIN_RESIDENT_AGE <= resident.age <= MAX_RESIDENT_AGE):
        errors.append(
            f" • Resident age must be between {MIN_RESIDENT_AGE} and {MAX_RESIDENT_AGE} (got {resident.age}).\n"
        )
    if resident.id is not None and resident.id.strip() and resident.id.strip() != resident.id:
        errors.append(f" • Resident id {resident.id!r} has surrounding whitespace.\n")
    return errors


def validate_bed_id(bed_id: str) -> List[str]:
    if not is_valid_bed_id(bed_id):
        return [f" • Bed id {bed_id!r} must look like '<ward>-R<room>-B<n>'.\n"]
    return []


def normalise_id(value: Optional[str]) -> str:
    """Trimmed, upper-cased form used when comparing resident ids."""
    return (value or "").strip().upper()


def numeric_suffix(value: Optional[str], prefix: str) -> Optional[int]:
    """Return n for ids shaped like '<prefix><n>' (case-insensitive), else None."""
    m = re.fullmatch(rf"{re.escape(prefix)}(\d+)", (value or "").strip(), re.IGNORECASE)
    return int(m.group(1)) if m else None


def validate_timestamp(value, label: str = "Timestamp") -> List[str]:
    """Ledger times are naive local datetimes; aware values cannot be compared against them."""
    if value is not None and value.tzinfo is not None:
        return [f" • {label} {value.isoformat()} must not carry a timezone.\n"]
    return []
