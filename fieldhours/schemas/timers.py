from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class TimerBase(BaseModel):
    start_time: Optional[str] = Field(default=None, alias="startTime")
    date: Optional[str] = None
    client: Optional[str] = None
    property_address: Optional[str] = Field(default=None, alias="propertyAddress")
    service: Optional[str] = None
    employees: List[str] = Field(default_factory=list)

    @field_validator('employees', mode='before')
    @classmethod
    def null_to_empty(cls, v):
        return [] if v is None else v

    class Config:
        populate_by_name = True


class TimerCreate(TimerBase):
    pass


class TimerResponse(TimerBase):
    id: str

    class Config:
        from_attributes = True
        populate_by_name = True
