import re

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URL_RE = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch((email or "").strip()))

def is_valid_url(url: str) -> bool:
    return bool(_URL_RE.fullmatch((url or "").strip()))

def is_strong_password(password: str, min_length: int = 6) -> bool:
    return len(password or "") >= min_length

def sanitize_input(text: str, max_length: int = 2_000) -> str:
    if text is None:
        return ""
    t = str(text).strip()
    if len(t) > max_length:
        return t[:max_length]
    return t
