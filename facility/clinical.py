from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Tuple
from core.entities import Administration, MedicationDose, Prescription
from core.state import CareHomeState
from exceptions.custom_errors import NotFoundError, ValidationError
from utils.constants import PRESCRIPTION_ID_PREFIX
from utils.validate import numeric_suffix, validate_timestamp

"""
Live clinical records. Prescriptions are kept per resident; administrations
sit in one flat list and are resolved to a resident through the ids of that
resident's prescriptions. Discharge moves both into the archive.
"""


def prescriptions_for(state: CareHomeState, resident_id: str) -> List[Prescription]:
    return list(state.prescriptions_by_resident.get(resident_id, []))


def administrations_for(state: CareHomeState, resident_id: str) -> List[Administration]:
    pres_ids = {p.id for p in prescriptions_for(state, resident_id)}
    return [a for a in state.administrations if a.prescription_id in pres_ids]


def find_prescription(state: CareHomeState, prescription_id: str) -> Optional[Prescription]:
    for plist in state.prescriptions_by_resident.values():
        for p in plist:
            if p.id == prescription_id:
                return p
    return None


def next_prescription_id(state: CareHomeState) -> str:
    ids = [p.id for plist in state.prescriptions_by_resident.values() for p in plist]
    ids += [p.id for stay in state.archives for p in stay.prescriptions]
    numbers = [numeric_suffix(pid, PRESCRIPTION_ID_PREFIX) for pid in ids]
    highest = max((n for n in numbers if n is not None), default=0)
    return f"{PRESCRIPTION_ID_PREFIX}{highest + 1}"


def prepare_prescription(
    state: CareHomeState,
    prescription: Prescription,
    doctor_id: str,
    resident_id: str,
    at: datetime,
) -> Prescription:
    """Bind a new prescription to the prescribing doctor and the occupant."""
    if not prescription.doses:
        raise ValidationError("Prescription must list at least one medication dose")
    errors = validate_timestamp(prescription.created_at, "created_at")
    if errors:
        raise ValidationError("".join(errors).strip())

    pid = prescription.id
    if pid is None or not pid.strip():
        pid = next_prescription_id(state)
    elif find_prescription(state, pid) is not None:
        raise ValidationError(f"Prescription ID already in use: {pid}")

    return replace(
        prescription,
        id=pid,
        doctor_id=doctor_id,
        resident_id=resident_id,
        created_at=prescription.created_at or at,
        doses=tuple(prescription.doses),
    )


def add_prescription(state: CareHomeState, prescription: Prescription):
    state.prescriptions_by_resident.setdefault(prescription.resident_id, []).append(
        prescription
    )


def append_dose(state: CareHomeState, prescription_id: str, dose: MedicationDose) -> Prescription:
    current = find_prescription(state, prescription_id)
    if current is None:
        raise NotFoundError(f"No such prescription: {prescription_id}")
    updated = replace(current, doses=current.doses + (dose,))
    plist = state.prescriptions_by_resident[current.resident_id]
    plist[plist.index(current)] = updated
    return updated


def prepare_administration(
    state: CareHomeState,
    administration: Administration,
    nurse_id: str,
    resident_id: str,
    at: datetime,
) -> Administration:
    """The referenced prescription must be a live prescription of the occupant."""
    errors = validate_timestamp(administration.administered_at, "administered_at")
    if errors:
        raise ValidationError("".join(errors).strip())
    if administration.prescription_id not in {
        p.id for p in prescriptions_for(state, resident_id)
    }:
        raise NotFoundError(
            f"No such prescription for resident {resident_id}: {administration.prescription_id}"
        )
    return replace(
        administration,
        nurse_id=nurse_id,
        administered_at=administration.administered_at or at,
    )


def add_administration(state: CareHomeState, administration: Administration):
    state.administrations.append(administration)


def purge_resident(
    state: CareHomeState, resident_id: str
) -> Tuple[List[Prescription], List[Administration]]:
    """Remove and return every live clinical record of a resident."""
    pres = state.prescriptions_by_resident.pop(resident_id, [])
    pres_ids = {p.id for p in pres}
    admin = [a for a in state.administrations if a.prescription_id in pres_ids]
    state.administrations[:] = [
        a for a in state.administrations if a.prescription_id not in pres_ids
    ]
    return list(pres), admin
