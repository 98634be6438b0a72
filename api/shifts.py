from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from api.deps import get_home
from exceptions.custom_errors import *
from facility.carehome import CareHome
from schemas.shifts import ShiftRequest

router = APIRouter(prefix="/shifts", tags=["Roster"])


@router.post("", summary="Allocate Shift")
def allocate_shift(request: ShiftRequest, home: CareHome = Depends(get_home)):
    try:
        shift = home.allocate_shift(request.actorId, request.to_entity())
        return asdict(shift)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.get("", summary="List Shifts")
def list_shifts(staffId: Optional[str] = None, home: CareHome = Depends(get_home)):
    shifts = home.get_shifts_for(staffId) if staffId else home.get_shifts()
    return [asdict(s) for s in shifts]
