from dataclasses import dataclass, field
from typing import Dict, List, Optional
from core.entities import (
    ActionLog,
    Administration,
    ArchivedStay,
    Bed,
    Prescription,
    Shift,
    Staff,
)


@dataclass
class CareHomeState:
    """
    A dataclass to hold all the mutable registries of one care home. Only the
    facade touches it directly; every other caller goes through
    `facility.carehome.CareHome`.
    """

    # roster
    staff_by_id: Dict[str, Staff] = field(default_factory=dict)
    """A dictionary mapping staff ids to their current record."""
    doctor_ids: List[str] = field(default_factory=list)
    """Ids of staff whose current role is DOCTOR, in first-upsert order."""
    nurse_ids: List[str] = field(default_factory=list)
    """Ids of staff whose current role is NURSE, in first-upsert order."""
    manager_id: Optional[str] = None
    """The designated manager. The latest MANAGER upsert wins."""

    # shift ledger
    shifts: List[Shift] = field(default_factory=list)
    """Every allocated shift, in insertion order."""

    # occupancy
    beds: Dict[str, Bed] = field(default_factory=dict)
    """A dictionary mapping bed ids to the bed and its occupant."""

    # clinical records
    prescriptions_by_resident: Dict[str, List[Prescription]] = field(default_factory=dict)
    """Live prescriptions keyed by the resident they were written for."""
    administrations: List[Administration] = field(default_factory=list)
    """A flat list of live administrations; resolved to residents via prescription ids."""

    # history
    archives: List[ArchivedStay] = field(default_factory=list)
    """Stays closed by discharge, oldest first."""
    logs: List[ActionLog] = field(default_factory=list)
    """The append-only action trail."""

    def role_of(self, staff_id: str):
        s = self.staff_by_id.get(staff_id)
        return s.role if s is not None else None
