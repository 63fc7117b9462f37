from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator


class PropertyBase(BaseModel):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    address: str
    services: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('services', mode='before')
    @classmethod
    def null_to_empty(cls, v):
        return {} if v is None else v

    class Config:
        populate_by_name = True


class PropertyCreate(PropertyBase):
    pass


class PropertyResponse(PropertyBase):
    id: int
    address: Optional[str] = None

    class Config:
        from_attributes = True
        populate_by_name = True
