"""Content-Security-Policy nonce handling for the landing page."""

import re
import secrets

_INLINE_TAG_RE = re.compile(r"<(script|style)\b(?![^>]*\bnonce=)([^>]*)>", re.IGNORECASE)

STATIC_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def generate_nonce() -> str:
    """Random per-request nonce, base64url encoded."""
    return secrets.token_urlsafe(16)


def build_csp(nonce: str) -> str:
    return "; ".join(
        [
            "default-src 'self'",
            f"script-src 'self' 'nonce-{nonce}'",
            f"style-src 'self' 'nonce-{nonce}'",
            "media-src 'self'",
            "object-src 'none'",
            "base-uri 'self'",
            "frame-ancestors 'self'",
        ]
    )


def apply_nonce(html: str, nonce: str) -> str:
    """Add ``nonce="..."`` to every inline script and style tag."""
    return _INLINE_TAG_RE.sub(
        lambda m: f'<{m.group(1)} nonce="{nonce}"{m.group(2)}>', html
    )
