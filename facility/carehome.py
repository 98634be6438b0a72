import functools
import threading
from dataclasses import replace
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple
from core.entities import (
    ActionLog,
    Administration,
    ArchivedStay,
    Bed,
    MedicationDose,
    Prescription,
    Resident,
    Role,
    Shift,
    Staff,
)
from core.state import CareHomeState
from exceptions.custom_errors import CareHomeError, ComplianceError
from facility import archive, audit, clinical, occupancy, roster, shifts
from facility.compliance import ComplianceReport, audit_compliance
from utils.constants import SYSTEM_ACTOR
from utils.logger import logger


def synchronized(method):
    """Run a facade method under the home's lock and log rejections before they propagate."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            except CareHomeError as e:
                logger.warning("%s rejected: %s", method.__name__, e)
                raise

    return wrapper


class CareHome:
    """
    Facade over one care home. Owns every registry, serializes all access
    through a single re-entrant lock, and checks authorization and roster
    coverage before any mutation. Each operation validates completely before
    it changes anything, so a rejected call leaves no trace except a warning
    in the application log.

    :param clock: Zero-argument callable returning the current time, used for
        audit entries and for checks that default to "now".
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._state = CareHomeState()
        self._clock = clock or datetime.now
        self._lock = threading.RLock()

    @contextmanager
    def exclusive(self):
        """Hold the write lock for the duration of a bulk save or restore."""
        with self._lock:
            yield self

    def _log(self, staff_id: str, action: str) -> ActionLog:
        return audit.append_log(self._state, self._clock(), staff_id, action)

    def _require_clinician(self, actor_id: str, at: datetime, *roles: Role) -> Staff:
        actor = roster.require_role(self._state, actor_id, *roles)
        shifts.require_rostered(self._state, actor_id, at)
        return actor

    # --- staff ---------------------------------------------------------

    @synchronized
    def upsert_staff(
        self,
        actor_id: Optional[str],
        staff: Staff,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Staff:
        bootstrap = roster.is_bootstrap(self._state, staff)
        if not bootstrap:
            roster.require_manager(self._state, actor_id)

        record = roster.prepare_staff(self._state, staff, username, password)
        roster.put_staff(self._state, record)
        self._log(SYSTEM_ACTOR if bootstrap else actor_id, f"ADD/UPDATE STAFF {record}")
        return record

    @synchronized
    def authenticate(self, staff_id: str, password: str) -> Staff:
        return roster.authenticate(self._state, staff_id, password)

    @synchronized
    def authenticate_username(self, username: str, password: str) -> Staff:
        return roster.authenticate_username(self._state, username, password)

    @synchronized
    def get_staff(self) -> Dict[str, Staff]:
        return dict(self._state.staff_by_id)

    @synchronized
    def get_staff_by_id(self, staff_id: str) -> Staff:
        return roster.require_staff(self._state, staff_id)

    @synchronized
    def get_doctor_ids(self) -> Tuple[str, ...]:
        return tuple(self._state.doctor_ids)

    @synchronized
    def get_nurse_ids(self) -> Tuple[str, ...]:
        return tuple(self._state.nurse_ids)

    @synchronized
    def get_manager_id(self) -> Optional[str]:
        return self._state.manager_id

    # --- shifts --------------------------------------------------------

    @synchronized
    def allocate_shift(self, actor_id: str, shift: Shift) -> Shift:
        roster.require_manager(self._state, actor_id)
        shifts.validate_shift(self._state, shift)

        shifts.add_shift(self._state, shift)
        self._log(
            actor_id,
            f"ALLOCATE SHIFT {shift.staff_id} {shift.start.isoformat()} -> {shift.end.isoformat()}",
        )
        return shift

    @synchronized
    def get_shifts(self) -> Tuple[Shift, ...]:
        return tuple(self._state.shifts)

    @synchronized
    def get_shifts_for(self, staff_id: str) -> Tuple[Shift, ...]:
        return tuple(shifts.shifts_for(self._state, staff_id))

    # --- occupancy -----------------------------------------------------

    @synchronized
    def add_bed(self, actor_id: str, bed_id: str) -> Bed:
        roster.require_manager(self._state, actor_id)
        occupancy.check_new_bed(self._state, bed_id)

        occupancy.assign(self._state, bed_id, None)
        self._log(actor_id, f"ADD BED {bed_id}")
        return self._state.beds[bed_id]

    @synchronized
    def seed_default_layout(self) -> int:
        created = occupancy.seed_default_layout(self._state)
        if created:
            self._log(SYSTEM_ACTOR, f"SEED LAYOUT {created} beds")
        return created

    @synchronized
    def admit(self, actor_id: str, bed_id: str, resident: Resident) -> Resident:
        roster.require_manager(self._state, actor_id)
        resident = occupancy.prepare_admission(self._state, bed_id, resident)

        occupancy.assign(self._state, bed_id, resident)
        self._log(actor_id, f"ADD RESIDENT {resident} to bed {bed_id}")
        return resident

    @synchronized
    def get_resident_in_bed(
        self, actor_id: str, bed_id: str, at: Optional[datetime] = None
    ) -> Resident:
        actor = roster.require_actor(self._state, actor_id)
        if actor.role != Role.MANAGER:
            shifts.require_rostered(self._state, actor_id, at or self._clock())
        resident = occupancy.require_occupant(self._state, bed_id)

        self._log(actor_id, f"CHECK RESIDENT in bed {bed_id}")
        return resident

    @synchronized
    def move_resident(
        self, nurse_id: str, from_bed_id: str, to_bed_id: str, at: datetime
    ) -> Resident:
        self._require_clinician(nurse_id, at, Role.NURSE)
        moving = occupancy.check_move(self._state, from_bed_id, to_bed_id)

        occupancy.vacate(self._state, from_bed_id)
        occupancy.assign(self._state, to_bed_id, moving)
        self._log(nurse_id, f"MOVE RESIDENT {moving.name} from {from_bed_id} to {to_bed_id}")
        return moving

    @synchronized
    def discharge_resident(self, actor_id: str, bed_id: str, at: datetime) -> ArchivedStay:
        self._require_clinician(actor_id, at, Role.DOCTOR, Role.NURSE)
        resident = occupancy.require_occupant(self._state, bed_id)

        pres, admin = clinical.purge_resident(self._state, resident.id)
        stay = archive.archive_stay(self._state, resident, bed_id, at, pres, admin)
        occupancy.vacate(self._state, bed_id)
        self._log(actor_id, f"DISCHARGE {resident.name} from {bed_id} (archived)")
        return stay

    @synchronized
    def get_beds(self) -> Dict[str, Bed]:
        return dict(self._state.beds)

    @synchronized
    def has_any_beds(self) -> bool:
        return bool(self._state.beds)

    # --- clinical ------------------------------------------------------

    @synchronized
    def add_prescription(
        self, doctor_id: str, bed_id: str, prescription: Prescription, at: datetime
    ) -> Prescription:
        self._require_clinician(doctor_id, at, Role.DOCTOR)
        resident = occupancy.require_occupant(self._state, bed_id)
        p = clinical.prepare_prescription(self._state, prescription, doctor_id, resident.id, at)

        clinical.add_prescription(self._state, p)
        self._log(doctor_id, f"ADD PRESCRIPTION {p.id} for {resident.name} in {bed_id}")
        return p

    @synchronized
    def add_dose(
        self, doctor_id: str, prescription_id: str, dose: MedicationDose, at: datetime
    ) -> Prescription:
        self._require_clinician(doctor_id, at, Role.DOCTOR)

        p = clinical.append_dose(self._state, prescription_id, dose)
        self._log(doctor_id, f"ADD DOSE {dose} to {prescription_id}")
        return p

    @synchronized
    def administer_medication(
        self, nurse_id: str, bed_id: str, administration: Administration, at: datetime
    ) -> Administration:
        self._require_clinician(nurse_id, at, Role.NURSE)
        resident = occupancy.require_occupant(self._state, bed_id)
        a = clinical.prepare_administration(self._state, administration, nurse_id, resident.id, at)

        clinical.add_administration(self._state, a)
        self._log(nurse_id, f"ADMINISTER {a.medicine} to {resident.name} ({bed_id})")
        return a

    @synchronized
    def get_prescriptions_for_resident(self, resident_id: str) -> Tuple[Prescription, ...]:
        return tuple(clinical.prescriptions_for(self._state, resident_id))

    @synchronized
    def get_administrations_for_resident(self, resident_id: str) -> Tuple[Administration, ...]:
        return tuple(clinical.administrations_for(self._state, resident_id))

    # --- compliance, audit, archive ------------------------------------

    @synchronized
    def check_compliance(self) -> ComplianceReport:
        """Audit the whole ledger; raises ComplianceError listing every violation."""
        report = audit_compliance(self._state)
        if not report.passed:
            raise ComplianceError(report)
        return report

    @synchronized
    def get_logs(self) -> Tuple[ActionLog, ...]:
        return tuple(self._state.logs)

    @synchronized
    def get_logs_by(self, staff_id: str) -> Tuple[ActionLog, ...]:
        return tuple(audit.logs_by(self._state, staff_id))

    @synchronized
    def get_archives(self) -> Tuple[ArchivedStay, ...]:
        return tuple(self._state.archives)

    @synchronized
    def get_archives_for_resident(self, resident_id: str) -> Tuple[ArchivedStay, ...]:
        return tuple(archive.archives_for(self._state, resident_id))

    # --- snapshot I/O (persistence collaborator only) ------------------

    @synchronized
    def raw_put_staff(self, staff: Staff):
        roster.put_staff(self._state, staff)

    @synchronized
    def raw_add_bed(self, bed_id: str):
        if bed_id not in self._state.beds:
            occupancy.assign(self._state, bed_id, None)

    @synchronized
    def raw_add_shift(self, shift: Shift):
        shifts.add_shift(self._state, shift)

    @synchronized
    def raw_set_resident_in_bed(self, bed_id: str, resident: Optional[Resident]):
        occupancy.assign(self._state, bed_id, resident)

    @synchronized
    def raw_add_prescription(self, resident_id: str, prescription: Prescription):
        if prescription.resident_id != resident_id:
            prescription = replace(prescription, resident_id=resident_id)
        clinical.add_prescription(self._state, prescription)

    @synchronized
    def raw_add_administration(self, administration: Administration):
        clinical.add_administration(self._state, administration)

    @synchronized
    def raw_add_archive(self, stay: ArchivedStay):
        self._state.archives.append(stay)

    @synchronized
    def raw_add_log(self, entry: ActionLog):
        self._state.logs.append(entry)

    @synchronized
    def snapshot(self) -> CareHomeState:
        """Shallow copy of every registry, for the persistence collaborator."""
        s = self._state
        return CareHomeState(
            staff_by_id=dict(s.staff_by_id),
            doctor_ids=list(s.doctor_ids),
            nurse_ids=list(s.nurse_ids),
            manager_id=s.manager_id,
            shifts=list(s.shifts),
            beds=dict(s.beds),
            prescriptions_by_resident={k: list(v) for k, v in s.prescriptions_by_resident.items()},
            administrations=list(s.administrations),
            archives=list(s.archives),
            logs=list(s.logs),
        )
