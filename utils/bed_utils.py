import re
from typing import Iterable, List
from utils.constants import DEFAULT_BEDS_PER_ROOM, DEFAULT_WARDS, MAX_BEDS_PER_ROOM

BED_SUFFIX = re.compile(r"-B\d+$")


def room_key_of(bed_id: str) -> str:
    """
    Room a bed belongs to: the bed id up to (excluding) its trailing "-B<n>".
    Falls back to the first two dash separated segments, then to the whole id.
    """
    i = bed_id.rfind("-B")
    if i > 0 and BED_SUFFIX.search(bed_id):
        return bed_id[:i]
    parts = bed_id.split("-")
    if len(parts) >= 2:
        return f"{parts[0]}-{parts[1]}"
    return bed_id


def is_valid_bed_id(bed_id: str) -> bool:
    return bool(bed_id) and bed_id.strip() == bed_id and bool(BED_SUFFIX.search(bed_id))


def ward_bed_ids(ward_id: str, beds_per_room: Iterable[int]) -> List[str]:
    """Generate bed ids "<ward>-R<room>-B<bed>" for one ward."""
    bed_ids = []
    for room, count in enumerate(beds_per_room, start=1):
        if count < 1 or count > MAX_BEDS_PER_ROOM:
            raise ValueError(f"Room bed count must be 1..{MAX_BEDS_PER_ROOM}, got {count}")
        for bed in range(1, count + 1):
            bed_ids.append(f"{ward_id}-R{room}-B{bed}")
    return bed_ids


def default_layout() -> List[str]:
    bed_ids = []
    for ward in DEFAULT_WARDS:
        bed_ids.extend(ward_bed_ids(ward, DEFAULT_BEDS_PER_ROOM))
    return bed_ids
