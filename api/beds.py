from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import NaiveDatetime
from api.deps import get_home
from exceptions.custom_errors import *
from facility.carehome import CareHome
from schemas.beds import (
    AdmitRequest,
    BedRequest,
    DischargeRequest,
    MoveRequest,
    bed_out,
    resident_out,
)
from dataclasses import asdict

router = APIRouter(prefix="/beds", tags=["Beds"])


@router.get("", summary="List Beds")
def list_beds(home: CareHome = Depends(get_home)):
    return [bed_out(b) for b in sorted(home.get_beds().values(), key=lambda b: b.id)]


@router.post("", summary="Add Bed")
def add_bed(request: BedRequest, home: CareHome = Depends(get_home)):
    try:
        return bed_out(home.add_bed(request.actorId, request.bedId))
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.get("/{bed_id}/resident", summary="Check Resident in Bed")
def check_resident(
    bed_id: str,
    actorId: str,
    at: Optional[NaiveDatetime] = None,
    home: CareHome = Depends(get_home),
):
    try:
        return resident_out(home.get_resident_in_bed(actorId, bed_id, at))
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.post("/{bed_id}/admit", summary="Admit Resident")
def admit(bed_id: str, request: AdmitRequest, home: CareHome = Depends(get_home)):
    try:
        return resident_out(home.admit(request.actorId, bed_id, request.to_entity()))
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.post("/{bed_id}/move", summary="Move Resident")
def move(bed_id: str, request: MoveRequest, home: CareHome = Depends(get_home)):
    try:
        moved = home.move_resident(request.nurseId, bed_id, request.toBedId, request.at)
        return {"resident": resident_out(moved), "fromBedId": bed_id, "toBedId": request.toBedId}
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.post("/{bed_id}/discharge", summary="Discharge Resident")
def discharge(bed_id: str, request: DischargeRequest, home: CareHome = Depends(get_home)):
    try:
        stay = home.discharge_resident(request.actorId, bed_id, request.at)
        return asdict(stay)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
