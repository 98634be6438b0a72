from datetime import datetime
from typing import List, Sequence
from core.entities import Administration, ArchivedStay, Prescription, Resident
from core.state import CareHomeState


def archive_stay(
    state: CareHomeState,
    resident: Resident,
    bed_id: str,
    discharged_at: datetime,
    prescriptions: Sequence[Prescription],
    administrations: Sequence[Administration],
) -> ArchivedStay:
    stay = ArchivedStay(
        resident_id=resident.id,
        resident_name=resident.name,
        gender=resident.gender,
        age=resident.age,
        last_bed_id=bed_id,
        discharged_at=discharged_at,
        prescriptions=tuple(prescriptions),
        administrations=tuple(administrations),
    )
    state.archives.append(stay)
    return stay


def archives_for(state: CareHomeState, resident_id: str) -> List[ArchivedStay]:
    return [a for a in state.archives if a.resident_id == resident_id]
