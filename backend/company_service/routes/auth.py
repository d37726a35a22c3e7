import logging

from fastapi import APIRouter, Depends, Request, Response, status

from company_service.config import Settings
from company_service.container import ServiceContainer, get_container
from company_service.errors import InvalidRefreshToken, NotFound
from company_service.schemas.auth import (
    GenerateOtpSchema,
    LoginSchema,
    MeResponse,
    MessageResponse,
    RegisterSchema,
    VerifyOtpSchema,
)
from company_service.schemas.company import CompanyOut, CompanyResponse
from company_service.utils.identity import AuthenticatedIdentity, require_role

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_cookie(response: Response, settings: Settings, name: str, value: str, max_age: int):
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
    )


@router.post("/register", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterSchema, container: ServiceContainer = Depends(get_container)):
    company = await container.credentials.register(payload.email, payload.password, payload.company_name)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Company registered successfully")


@router.post("/login", response_model=CompanyResponse)
async def login(payload: LoginSchema, response: Response, container: ServiceContainer = Depends(get_container)):
    company = await container.credentials.verify_credentials(payload.email, payload.password)
    tokens = container.tokens.issue(company)
    settings = container.settings
    _set_cookie(response, settings, settings.access_cookie_name, tokens.access_token,
                int(container.tokens.access_ttl.total_seconds()))
    _set_cookie(response, settings, settings.refresh_cookie_name, tokens.refresh_token,
                int(container.tokens.refresh_ttl.total_seconds()))
    logger.info("Company %s logged in", company.id)
    return CompanyResponse(company=CompanyOut.model_validate(company), message="Login successful")


@router.post("/refresh-token", response_model=MessageResponse)
async def refresh_token(request: Request, response: Response, container: ServiceContainer = Depends(get_container)):
    settings = container.settings
    token = request.cookies.get(settings.refresh_cookie_name)
    if not token:
        raise InvalidRefreshToken("Refresh token required")
    access_token = container.tokens.refresh(token)
    _set_cookie(response, settings, settings.access_cookie_name, access_token,
                int(container.tokens.access_ttl.total_seconds()))
    return MessageResponse(message="Token refreshed successfully")


@router.post("/generate-otp", response_model=MessageResponse)
async def generate_otp(payload: GenerateOtpSchema, container: ServiceContainer = Depends(get_container)):
    await container.otps.generate(payload.email)
    return MessageResponse(message="OTP sent successfully. Please check your email.")


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(payload: VerifyOtpSchema, container: ServiceContainer = Depends(get_container)):
    await container.otps.verify(payload.email, payload.otp)
    return MessageResponse(message="OTP verified successfully")


@router.post("/resend-otp", response_model=MessageResponse)
async def resend_otp(payload: GenerateOtpSchema, container: ServiceContainer = Depends(get_container)):
    await container.otps.resend(payload.email)
    return MessageResponse(message="OTP resent successfully. Please check your email.")


@router.get("/me", response_model=MeResponse)
async def me(
    identity: AuthenticatedIdentity = Depends(require_role("company")),
    container: ServiceContainer = Depends(get_container),
):
    company = await container.credentials.get(identity.subject_id)
    if not company:
        raise NotFound()
    return MeResponse(id=company.id, company_name=company.company_name, email=company.email)


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response, container: ServiceContainer = Depends(get_container)):
    settings = container.settings
    token = request.cookies.get(settings.refresh_cookie_name)
    if token:
        try:
            claims = container.tokens.verify_refresh(token)
            logger.info("Company %s logged out", claims.email)
        except InvalidRefreshToken:
            logger.info("Invalid company refresh token during logout")
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(name, httponly=True, secure=not settings.is_development, samesite="lax")
    return MessageResponse(message="Logged out successfully")
