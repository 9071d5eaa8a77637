from pydantic import BaseModel, Field, model_validator
from typing import Optional, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum


class MembershipTier(str, Enum):
    BASIC = "basic"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StatusFilter(str, Enum):
    ALL = "all"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    def to_status(self) -> Optional[ApplicationStatus]:
        if self is StatusFilter.ALL:
            return None
        return ApplicationStatus(self.value)


class ApplicationCreate(BaseModel):
    membership_type: MembershipTier
    amount: Decimal = Field(gt=0)
    payment_reference: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    admin_notes: Optional[str] = None


class ApplicantProfile(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


def _flatten_profile(data: Any) -> Any:
    # PostgREST returns the embedded profile as an object or a one-item list
    if isinstance(data, dict) and "profiles" in data:
        data = dict(data)
        profile = data.pop("profiles")
        if isinstance(profile, list):
            profile = profile[0] if profile else None
        data["profile"] = profile
    return data


class ApplicationResponse(BaseModel):
    id: str
    user_id: str
    membership_type: MembershipTier
    amount: Decimal
    payment_reference: Optional[str] = None
    status: Optional[ApplicationStatus] = ApplicationStatus.PENDING
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profile: Optional[ApplicantProfile] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_profile(cls, data: Any) -> Any:
        return _flatten_profile(data)

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    id: str
    user_id: str
    membership_type: MembershipTier
    amount: Decimal
    created_at: Optional[datetime] = None
    profile: Optional[ApplicantProfile] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_profile(cls, data: Any) -> Any:
        return _flatten_profile(data)

    class Config:
        from_attributes = True
