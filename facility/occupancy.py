from dataclasses import replace
from typing import Optional
from core.entities import Bed, Gender, Resident
from core.state import CareHomeState
from exceptions.custom_errors import (
    BedOccupiedError,
    NotFoundError,
    RoomGenderConflictError,
    ValidationError,
)
from utils.bed_utils import default_layout, room_key_of
from utils.constants import RESIDENT_ID_PREFIX
from utils.validate import normalise_id, numeric_suffix, validate_bed_id, validate_resident


def require_bed(state: CareHomeState, bed_id: str) -> Bed:
    b = state.beds.get(bed_id)
    if b is None:
        raise NotFoundError(f"Bed {bed_id} does not exist")
    return b


def bed_or_new(state: CareHomeState, bed_id: str) -> Bed:
    """
    The bed if it exists, otherwise a vacant bed that will be created on
    assignment. Only well-formed ids ("<ward>-R<room>-B<n>") may be created.
    """
    b = state.beds.get(bed_id)
    if b is not None:
        return b
    errors = validate_bed_id(bed_id)
    if errors:
        raise ValidationError("".join(errors).strip())
    return Bed(bed_id)


def require_occupant(state: CareHomeState, bed_id: str) -> Resident:
    b = require_bed(state, bed_id)
    if b.is_vacant:
        raise NotFoundError(f"Bed {bed_id} is vacant")
    return b.occupant


def room_gender(state: CareHomeState, room_key: str) -> Optional[Gender]:
    """
    Gender currently housed in a room, or None if every bed in it is vacant.
    A room that already holds mixed genders can only come from a raw restore
    and is reported as a conflict.
    """
    found = None
    for bed in state.beds.values():
        if bed.is_vacant or room_key_of(bed.id) != room_key:
            continue
        g = bed.occupant.gender
        if found is None:
            found = g
        elif found != g:
            raise RoomGenderConflictError(
                f"Data integrity: room {room_key} contains mixed genders."
            )
    return found


def enforce_room_gender(state: CareHomeState, bed_id: str, gender: Gender):
    room_key = room_key_of(bed_id)
    found = room_gender(state, room_key)
    if found is not None and found != gender:
        raise RoomGenderConflictError(
            f"Room {room_key} already has residents of gender {found.value}; "
            f"cannot assign/move a {gender.value} resident."
        )


def is_resident_id_active(state: CareHomeState, resident_id: Optional[str]) -> bool:
    wanted = normalise_id(resident_id)
    if not wanted:
        return False
    return any(
        not b.is_vacant and normalise_id(b.occupant.id) == wanted
        for b in state.beds.values()
    )


def next_resident_id(state: CareHomeState) -> str:
    """One more than the highest R<n> id seen among active and archived residents."""
    ids = [b.occupant.id for b in state.beds.values() if not b.is_vacant]
    ids += [a.resident_id for a in state.archives]
    numbers = [numeric_suffix(rid, RESIDENT_ID_PREFIX) for rid in ids]
    highest = max((n for n in numbers if n is not None), default=0)
    return f"{RESIDENT_ID_PREFIX}{highest + 1}"


def prepare_admission(state: CareHomeState, bed_id: str, resident: Resident) -> Resident:
    """
    Validate an admission without touching the state and return the resident
    to place (with an id assigned if none was given).
    """
    bed = bed_or_new(state, bed_id)

    errors = validate_resident(resident)
    if errors:
        raise ValidationError("".join(errors).strip())

    if resident.id is None or not resident.id.strip():
        resident = replace(resident, id=next_resident_id(state))
    elif is_resident_id_active(state, resident.id):
        raise ValidationError(f"Resident ID already in use: {resident.id}")

    enforce_room_gender(state, bed_id, resident.gender)

    if not bed.is_vacant:
        raise BedOccupiedError(
            f"Bed {bed_id} is already occupied by {bed.occupant.name}"
        )
    return resident


def check_move(state: CareHomeState, from_bed_id: str, to_bed_id: str) -> Resident:
    """Validate a transfer and return the resident that would move."""
    source = state.beds.get(from_bed_id)
    if source is None or source.is_vacant:
        raise NotFoundError(f"No resident in bed {from_bed_id}")
    target = bed_or_new(state, to_bed_id)
    if not target.is_vacant:
        raise BedOccupiedError(
            f"Bed {to_bed_id} already occupied by {target.occupant.name}"
        )
    moving = source.occupant
    enforce_room_gender(state, to_bed_id, moving.gender)
    return moving


def assign(state: CareHomeState, bed_id: str, resident: Optional[Resident]):
    state.beds[bed_id] = Bed(bed_id, resident)


def vacate(state: CareHomeState, bed_id: str):
    assign(state, bed_id, None)


def check_new_bed(state: CareHomeState, bed_id: str):
    errors = validate_bed_id(bed_id)
    if errors:
        raise ValidationError("".join(errors).strip())
    if bed_id in state.beds:
        raise ValidationError(f"Bed {bed_id} already exists")


def seed_default_layout(state: CareHomeState) -> int:
    """Create the default ward layout; existing beds are left untouched."""
    created = 0
    for bed_id in default_layout():
        if bed_id not in state.beds:
            state.beds[bed_id] = Bed(bed_id)
            created += 1
    return created
