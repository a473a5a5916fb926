import re
import html
from typing import Optional


def sanitize_input(text: str) -> str:
    """Basic input sanitization to prevent XSS."""
    if not isinstance(text, str):
        return text
    # Remove script blocks first, then escape whatever markup is left
    sanitized = re.sub(r'<script.*?>.*?</script>', '', text, flags=re.DOTALL | re.IGNORECASE)
    return html.escape(sanitized.strip())


def sanitize_optional(text: Optional[str]) -> Optional[str]:
    """Sanitize free text; blank input becomes None."""
    if text is None:
        return None
    cleaned = sanitize_input(text)
    return cleaned or None
