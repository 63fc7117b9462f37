from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class EntryBase(BaseModel):
    date: Optional[str] = None
    client: Optional[str] = None
    property_address: Optional[str] = Field(default=None, alias="propertyAddress")
    service: Optional[str] = None
    employees: List[str] = Field(default_factory=list)
    time_in: Optional[str] = Field(default=None, alias="timeIn")
    time_out: Optional[str] = Field(default=None, alias="timeOut")
    total_hours: Optional[str] = Field(default=None, alias="totalHours")

    @field_validator('total_hours', mode='before')
    @classmethod
    def hours_as_text(cls, v):
        # Hours are kept as text; clients often send a number
        if v is None or isinstance(v, str):
            return v
        return str(v)

    class Config:
        populate_by_name = True


class EntryCreate(EntryBase):
    pass


class EntryResponse(EntryBase):
    id: int
