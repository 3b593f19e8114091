"""Share codec: generated code <-> URL-fragment token.

Tokens are zlib-compressed UTF-8, base64url-encoded without padding, so
they only ever contain ``[A-Za-z0-9_-]``. Sharing carries the displayed
code only, never chat history.
"""

import base64
import binascii
import logging
import re
import zlib
from typing import Optional
from urllib.parse import urldefrag

from .errors import DecodeError

logger = logging.getLogger(__name__)

SHARE_PREFIX = "#/share/"
MAX_DECODED_BYTES = 5 * 1024 * 1024

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def encode(source: str) -> str:
    compressed = zlib.compress(source.encode("utf-8"), 9)
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def decode_strict(token: str) -> str:
    """Decode a token, raising DecodeError if it was not produced by encode()."""
    if not token or not _TOKEN_RE.match(token):
        raise DecodeError("Share token is empty or contains invalid characters")
    try:
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
        inflater = zlib.decompressobj()
        data = inflater.decompress(raw, MAX_DECODED_BYTES)
        if inflater.unconsumed_tail:
            raise DecodeError("Shared code is too large")
        if not inflater.eof:
            raise DecodeError("Share token is truncated")
        return data.decode("utf-8")
    except (binascii.Error, ValueError, zlib.error) as e:
        raise DecodeError(f"Invalid share token: {e}") from e


def decode(token: str) -> Optional[str]:
    """Decode a token, or return None if it is not a valid share token."""
    try:
        return decode_strict(token)
    except DecodeError as e:
        logger.debug("Ignoring share token: %s", e.message)
        return None


def parse_fragment(fragment: str | None) -> Optional[str]:
    """Return the token from a ``#/share/<token>`` fragment (or a URL ending in one)."""
    if not fragment:
        return None
    if not fragment.startswith("#"):
        _, frag = urldefrag(fragment)
        fragment = f"#{frag}" if frag else ""
    if not fragment.startswith(SHARE_PREFIX):
        return None
    return fragment[len(SHARE_PREFIX):] or None


def share_url(page_url: str, source: str) -> str:
    base, _ = urldefrag(page_url)
    return f"{base}{SHARE_PREFIX}{encode(source)}"
