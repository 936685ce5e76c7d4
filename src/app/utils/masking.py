"""
Masking helpers for user-facing messages and logs.
"""

import re

from src.domain.entities import VerificationType

_CODE_PATTERN = re.compile(
    r"\b(otp|code|verification code|security code)(\s*:?\s*|\s+is\s+)(\d{4,8})\b",
    re.IGNORECASE,
)
_LONG_TOKEN_PATTERN = re.compile(r"\b([a-zA-Z0-9_-]{20,})\b")


def mask_email(email: str) -> str:
    """Keep first 2 and last 2 characters of the local part; domain unmasked"""
    if "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    if len(local) <= 4:
        return f"{local[:1]}***@{domain}"
    return f"{local[:2]}***{local[-2:]}@{domain}"


def mask_phone(phone: str) -> str:
    """Keep first 4 and last 2 characters; middle replaced"""
    if len(phone) <= 6:
        return "*" * len(phone)
    return f"{phone[:4]}******{phone[-2:]}"


def mask_destination(destination: str, verification_type: VerificationType) -> str:
    if verification_type == VerificationType.PHONE:
        return mask_phone(destination)
    return mask_email(destination)


def mask_sensitive_data(text: str) -> str:
    """Mask OTP codes and long token-like strings inside free text"""
    if not text:
        return text
    masked = _CODE_PATTERN.sub(
        lambda m: f"{m.group(1)}{m.group(2)}{'*' * len(m.group(3))}", text
    )
    return _LONG_TOKEN_PATTERN.sub(
        lambda m: f"{m.group(1)[:4]}{'*' * (len(m.group(1)) - 8)}{m.group(1)[-4:]}",
        masked,
    )
