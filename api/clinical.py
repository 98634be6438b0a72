from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from api.deps import get_home
from exceptions.custom_errors import *
from facility.carehome import CareHome
from schemas.clinical import AdministrationRequest, DoseRequest, PrescriptionRequest

router = APIRouter(tags=["Clinical"])


@router.post("/beds/{bed_id}/prescriptions", summary="Add Prescription")
def add_prescription(
    bed_id: str, request: PrescriptionRequest, home: CareHome = Depends(get_home)
):
    try:
        p = home.add_prescription(request.doctorId, bed_id, request.to_entity(), request.at)
        return asdict(p)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.post("/prescriptions/{prescription_id}/doses", summary="Add Dose")
def add_dose(prescription_id: str, request: DoseRequest, home: CareHome = Depends(get_home)):
    try:
        p = home.add_dose(request.doctorId, prescription_id, request.dose.to_entity(), request.at)
        return asdict(p)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.post("/beds/{bed_id}/administrations", summary="Administer Medication")
def administer(
    bed_id: str, request: AdministrationRequest, home: CareHome = Depends(get_home)
):
    try:
        a = home.administer_medication(request.nurseId, bed_id, request.to_entity(), request.at)
        return asdict(a)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.get("/residents/{resident_id}/prescriptions", summary="Resident Prescriptions")
def resident_prescriptions(resident_id: str, home: CareHome = Depends(get_home)):
    return [asdict(p) for p in home.get_prescriptions_for_resident(resident_id)]


@router.get("/residents/{resident_id}/administrations", summary="Resident Administrations")
def resident_administrations(resident_id: str, home: CareHome = Depends(get_home)):
    return [asdict(a) for a in home.get_administrations_for_resident(resident_id)]
