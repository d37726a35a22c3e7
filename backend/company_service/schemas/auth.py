from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from company_service.utils.auth_utils import MAX_PASSWORD_BYTES, password_fits


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterSchema(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    company_name: str = Field(min_length=2, max_length=255)

    @field_validator("password")
    @classmethod
    def password_within_bcrypt_limit(cls, v: str) -> str:
        if not password_fits(v):
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return v


class LoginSchema(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class GenerateOtpSchema(CamelModel):
    email: EmailStr


class VerifyOtpSchema(CamelModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class MessageResponse(CamelModel):
    message: str


class MeResponse(CamelModel):
    id: str
    company_name: str
    email: str
