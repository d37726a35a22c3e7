class CompanyServiceError(Exception):
    """Base for domain failures that map onto a client-facing status."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(CompanyServiceError):
    status_code = 400
    message = "Invalid input"


class DuplicateIdentity(CompanyServiceError):
    status_code = 409
    message = "Email already in use"


class IdentityAlreadyExists(CompanyServiceError):
    status_code = 409
    message = "Email already registered"


class InvalidCredentials(CompanyServiceError):
    status_code = 401
    message = "Invalid email or password"


class OtpNotFound(CompanyServiceError):
    status_code = 400
    message = "No OTP found for this email or OTP has expired"


class OtpMismatch(CompanyServiceError):
    status_code = 400
    message = "Invalid OTP"


class OtpDeliveryFailed(CompanyServiceError):
    status_code = 503
    message = "Unable to send OTP. Please try again later."


class InvalidRefreshToken(CompanyServiceError):
    status_code = 401
    message = "Invalid refresh token"


class InvalidAccessToken(CompanyServiceError):
    status_code = 401
    message = "Invalid or expired token"


class AdminNotAuthenticated(CompanyServiceError):
    status_code = 401
    message = "Admin not authenticated"


class CompanyNotAuthenticated(CompanyServiceError):
    status_code = 401
    message = "Company not authenticated"


class NotFound(CompanyServiceError):
    status_code = 404
    message = "Company not found"


class InvalidProfileTransition(CompanyServiceError):
    status_code = 409
    message = "Profile step cannot be completed in the current state"
