from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Tuple

from exceptions.custom_errors import ValidationError


class Role(str, Enum):
    MANAGER = "MANAGER"
    DOCTOR = "DOCTOR"
    NURSE = "NURSE"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


@dataclass(frozen=True)
class Staff:
    id: str
    name: str
    role: Role
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def __str__(self):
        return f"{self.id}({self.role.value}) {self.name}"


@dataclass(frozen=True)
class Shift:
    """A single rostered interval for one staff member, treated as half-open [start, end)."""

    staff_id: str
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is not None or self.end.tzinfo is not None:
            raise ValidationError(
                f"Shift times must be naive local times ({self.start} -> {self.end})"
            )
        if not self.end > self.start:
            raise ValidationError(
                f"Shift end must be after start ({self.start} -> {self.end})"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def hours(self) -> float:
        return self.duration.total_seconds() / 3600

    def covers(self, at: datetime) -> bool:
        return self.start <= at < self.end

    def overlaps(self, other: "Shift") -> bool:
        """Half-open overlap against another shift of the same staff member."""
        return (
            self.staff_id == other.staff_id
            and self.start < other.end
            and other.start < self.end
        )


@dataclass(frozen=True)
class Resident:
    id: Optional[str]
    name: str
    gender: Gender
    age: int

    def __str__(self):
        return f"{self.id} - {self.name} ({self.gender.value}, {self.age})"


@dataclass(frozen=True)
class Bed:
    id: str
    occupant: Optional[Resident] = None

    @property
    def is_vacant(self) -> bool:
        return self.occupant is None


@dataclass(frozen=True)
class MedicationDose:
    medicine: str
    dosage: str
    frequency: str

    def __str__(self):
        return f"{self.medicine} ({self.dosage}, {self.frequency})"


@dataclass(frozen=True)
class Prescription:
    id: Optional[str]
    doctor_id: Optional[str]
    resident_id: Optional[str]
    created_at: Optional[datetime]
    doses: Tuple[MedicationDose, ...] = ()


@dataclass(frozen=True)
class Administration:
    nurse_id: Optional[str]
    prescription_id: str
    medicine: str
    administered_at: Optional[datetime]
    notes: str = ""


@dataclass(frozen=True)
class ArchivedStay:
    """Frozen record of one completed stay, written once at discharge."""

    resident_id: str
    resident_name: str
    gender: Gender
    age: int
    last_bed_id: str
    discharged_at: datetime
    prescriptions: Tuple[Prescription, ...] = ()
    administrations: Tuple[Administration, ...] = ()


@dataclass(frozen=True)
class ActionLog:
    time: datetime
    staff_id: str
    action: str

    def __str__(self):
        return f"[{self.time.isoformat()}] {self.staff_id}: {self.action}"
