from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from api.deps import get_home
from docs.compliance import compliance_description
from exceptions.custom_errors import ComplianceError
from facility.carehome import CareHome

router = APIRouter(tags=["Audit"])


@router.get(
    "/compliance",
    description=compliance_description,
    summary="Check Staffing Compliance",
)
def check_compliance(home: CareHome = Depends(get_home)):
    try:
        report = home.check_compliance()
        return {"passed": True, "datesChecked": report.dates_checked, "violations": []}
    except ComplianceError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "passed": False,
                "message": str(e),
                "datesChecked": [d.isoformat() for d in e.report.dates_checked],
                "violations": [
                    {"date": v.date.isoformat(), "rule": v.rule, "detail": v.detail}
                    for v in e.report.violations
                ],
            },
        )


@router.get("/logs", summary="Action Log")
def get_logs(staffId: Optional[str] = None, home: CareHome = Depends(get_home)):
    entries = home.get_logs_by(staffId) if staffId else home.get_logs()
    return [asdict(entry) for entry in entries]


@router.get("/archives", summary="Archived Stays")
def get_archives(residentId: Optional[str] = None, home: CareHome = Depends(get_home)):
    stays = home.get_archives_for_resident(residentId) if residentId else home.get_archives()
    return [asdict(s) for s in stays]
