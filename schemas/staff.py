from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
from core.entities import Role, Staff


class StaffRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    actorId: Optional[str] = None  # may be omitted only when bootstrapping the first manager
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: Role
    username: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalise_role(cls, values):
        """Accept role names in any case, e.g. "nurse" or "Nurse"."""
        if isinstance(values, dict) and isinstance(values.get("role"), str):
            values["role"] = values["role"].strip().upper()
        return values

    def to_entity(self) -> Staff:
        return Staff(id=self.id, name=self.name, role=self.role)


class LoginRequest(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    password: str

    @model_validator(mode="after")
    def check_identity(self) -> "LoginRequest":
        if not self.id and not self.username:
            raise ValueError("Either id or username is required.")
        return self


def staff_out(staff: Staff) -> dict:
    """Public view of a staff record; credentials are never returned."""
    return {
        "id": staff.id,
        "name": staff.name,
        "role": staff.role.value,
        "username": staff.username,
    }
