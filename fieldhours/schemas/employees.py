from typing import Optional
from pydantic import BaseModel, field_validator


class EmployeeCreate(BaseModel):
    name: str


class EmployeeContactUpdate(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator('phone', 'email', mode='before')
    @classmethod
    def empty_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class EmployeeResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True
