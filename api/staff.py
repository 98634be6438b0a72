from fastapi import APIRouter, Depends, HTTPException
from api.deps import get_home
from exceptions.custom_errors import *
from facility.carehome import CareHome
from schemas.staff import LoginRequest, StaffRequest, staff_out

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.post("", summary="Add or Update Staff")
def upsert_staff(request: StaffRequest, home: CareHome = Depends(get_home)):
    try:
        staff = home.upsert_staff(
            request.actorId, request.to_entity(), request.username, request.password
        )
        return staff_out(staff)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))


@router.get("", summary="List Staff")
def list_staff(home: CareHome = Depends(get_home)):
    return {
        "managerId": home.get_manager_id(),
        "doctorIds": list(home.get_doctor_ids()),
        "nurseIds": list(home.get_nurse_ids()),
        "staff": [staff_out(s) for s in home.get_staff().values()],
    }


@router.post("/login", summary="Authenticate")
def login(request: LoginRequest, home: CareHome = Depends(get_home)):
    try:
        if request.id:
            staff = home.authenticate(request.id, request.password)
        else:
            staff = home.authenticate_username(request.username, request.password)
        return staff_out(staff)
    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
