from pydantic import BaseModel, ConfigDict, Field, model_validator, NaiveDatetime
from typing import Optional
from core.entities import Bed, Gender, Resident


class BedRequest(BaseModel):
    actorId: str
    bedId: str


class AdmitRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    actorId: str
    residentId: Optional[str] = None  # auto-assigned when omitted
    name: str = Field(..., min_length=1)
    gender: Gender
    age: int

    @model_validator(mode="before")
    @classmethod
    def normalise_gender(cls, values):
        if isinstance(values, dict) and isinstance(values.get("gender"), str):
            values["gender"] = values["gender"].strip().upper()
        return values

    def to_entity(self) -> Resident:
        return Resident(id=self.residentId, name=self.name, gender=self.gender, age=self.age)


class MoveRequest(BaseModel):
    nurseId: str
    toBedId: str
    at: NaiveDatetime


class DischargeRequest(BaseModel):
    actorId: str
    at: NaiveDatetime


def resident_out(resident: Optional[Resident]) -> Optional[dict]:
    if resident is None:
        return None
    return {
        "id": resident.id,
        "name": resident.name,
        "gender": resident.gender.value,
        "age": resident.age,
    }


def bed_out(bed: Bed) -> dict:
    return {"id": bed.id, "vacant": bed.is_vacant, "occupant": resident_out(bed.occupant)}
