import re
import secrets
from typing import Optional

OTP_LENGTH = 6
OTP_KEY_PREFIX = "company_otp:"
OTP_REGEX = re.compile(r'^\d{6}$')


def generate_otp() -> str:
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def is_valid_otp(code: Optional[str]) -> bool:
    if not code:
        return False
    return bool(OTP_REGEX.match(code.strip()))


def normalize_email(email: Optional[str]) -> str:
    return (email or '').strip().lower()


def otp_key(email: str) -> str:
    return f"{OTP_KEY_PREFIX}{normalize_email(email)}"
