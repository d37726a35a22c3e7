from datetime import datetime
from typing import List, Optional, Union

from pydantic import ConfigDict, EmailStr, Field, HttpUrl
from pydantic.alias_generators import to_camel

from .auth import CamelModel


class Step2Schema(CamelModel):
    industry: str = Field(min_length=1, max_length=100)
    size: str = Field(min_length=1, max_length=50)
    website: Optional[HttpUrl] = None
    description: str = Field(min_length=1, max_length=500)
    headquarters: str = Field(min_length=1, max_length=200)


class Step3Schema(CamelModel):
    contact_person_name: str = Field(min_length=1, max_length=255)
    contact_person_title: str = Field(min_length=1, max_length=255)
    contact_person_email: EmailStr
    contact_person_phone: str = Field(min_length=1, max_length=20)


class RejectSchema(CamelModel):
    reason: str = Field(min_length=1, max_length=500)


class CompanyOut(CamelModel):
    id: str
    company_name: str
    email: str
    industry: Optional[str] = None
    size: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    headquarters: Optional[str] = None
    founded_year: Optional[int] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    contact_person_name: Optional[str] = None
    contact_person_title: Optional[str] = None
    contact_person_email: Optional[str] = None
    contact_person_phone: Optional[str] = None
    is_verified: bool
    is_blocked: bool
    profile_completed: bool
    rejection_reason: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ProfileStepOut(CamelModel):
    basic_info_completed: bool
    company_details_completed: bool
    contact_info_completed: bool
    current_step: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CompanyResponse(CamelModel):
    company: CompanyOut
    message: Optional[str] = None


class CompanyListResponse(CamelModel):
    companies: List[CompanyOut]


class CompanyPageResponse(CamelModel):
    companies: List[CompanyOut]
    total: int
    page: int
    limit: int
    total_pages: int


class ProfileResponse(CamelModel):
    company: CompanyOut
    profile_step: ProfileStepOut


class ProfileStepResponse(CamelModel):
    profile_step: Union[int, str]


class DashboardResponse(CamelModel):
    company: CompanyOut
    profile_step: Union[int, str]
    job_count: int
