"""Custom validators and sanitizers"""

import os
import re
from typing import Optional
import bleach
from email_validator import validate_email, EmailNotValidError

# Digits with an optional leading +, after separators are stripped
MOBILE_PATTERN = re.compile(r"^\+?\d{7,15}$")

def normalize_mobile_number(mobile: str) -> Optional[str]:
    """Return the mobile number without separators, or None if malformed"""
    if not mobile:
        return None
    cleaned = re.sub(r"[\s\-()]", "", mobile.strip())
    if not MOBILE_PATTERN.match(cleaned):
        return None
    return cleaned

def validate_email_address(email: str) -> str:
    """Validate email address and return its normalized form"""
    try:
        valid = validate_email(email, check_deliverability=False)
        return valid.normalized
    except EmailNotValidError as e:
        raise ValueError(str(e))

def sanitize_text(text: Optional[str]) -> str:
    """Strip all markup from user-submitted text"""
    if not text:
        return ""
    return bleach.clean(text, tags=[], attributes={}, strip=True).strip()

def validate_file_extension(filename: str, allowed: list) -> bool:
    """Check the file extension against an allow-list"""
    ext = os.path.splitext(filename or "")[1].lower()
    return ext in allowed
