from pydantic import BaseModel, ConfigDict, model_validator, NaiveDatetime
from core.entities import Shift


class ShiftRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    actorId: str
    staffId: str
    start: NaiveDatetime
    end: NaiveDatetime

    @model_validator(mode="after")
    def check_order(self) -> "ShiftRequest":
        if self.end <= self.start:
            raise ValueError("Shift end must be after start.")
        return self

    def to_entity(self) -> Shift:
        return Shift(self.staffId, self.start, self.end)
