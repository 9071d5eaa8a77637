from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime


class ProfileUpsert(BaseModel):
    full_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    date_of_birth: date
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    emergency_contact: str = Field(min_length=1)
    emergency_phone: str = Field(min_length=1)
    id_number: str = Field(min_length=1)


class ProfileResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str
    date_of_birth: date
    address: str
    city: str
    state: str
    postal_code: str
    emergency_contact: str
    emergency_phone: str
    id_number: str
    id_document_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
