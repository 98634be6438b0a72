from pydantic import BaseModel, ConfigDict, Field, NaiveDatetime
from typing import List, Optional
from core.entities import Administration, MedicationDose, Prescription


class DoseSchema(BaseModel):
    medicine: str = Field(..., min_length=1)
    dosage: str
    frequency: str

    def to_entity(self) -> MedicationDose:
        return MedicationDose(self.medicine, self.dosage, self.frequency)


class PrescriptionRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    doctorId: str
    prescriptionId: Optional[str] = None  # auto-assigned when omitted
    doses: List[DoseSchema] = Field(..., min_length=1)
    at: NaiveDatetime

    def to_entity(self) -> Prescription:
        return Prescription(
            id=self.prescriptionId,
            doctor_id=self.doctorId,
            resident_id=None,
            created_at=self.at,
            doses=tuple(d.to_entity() for d in self.doses),
        )


class DoseRequest(BaseModel):
    doctorId: str
    dose: DoseSchema
    at: NaiveDatetime


class AdministrationRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    nurseId: str
    prescriptionId: str
    medicine: str = Field(..., min_length=1)
    notes: str = ""
    at: NaiveDatetime

    def to_entity(self) -> Administration:
        return Administration(
            nurse_id=self.nurseId,
            prescription_id=self.prescriptionId,
            medicine=self.medicine,
            administered_at=self.at,
            notes=self.notes,
        )
