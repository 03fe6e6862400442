"""
Image payload parsing.

Turns the base64 string (optionally a data URL) or uploaded bytes of a scan
request into a ParsedImage ready to be embedded in a vision prompt. The
image itself is never decoded; only its container type is sniffed from the
leading magic bytes.

Dependencies: base64, binascii, binder_scan.core.exceptions
System role: Input validation for the scan endpoints
"""

import base64
import binascii
import re
from dataclasses import dataclass

from binder_scan.core.exceptions import ImageTooLargeError, InvalidImageError

DEFAULT_MIME_TYPE = "image/jpeg"
DEFAULT_MAX_BYTES = 12 * 1024 * 1024

_DATA_URL = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w.+-]+=[\w.+-]+)*;base64,(?P<data>.*)$",
    re.IGNORECASE | re.DOTALL,
)
_WHITESPACE = re.compile(r"\s+")
_MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}
_GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})
_HEIF_BRANDS = frozenset({b"heic", b"heix", b"heif", b"mif1", b"msf1"})


@dataclass(frozen=True)
class ParsedImage:
    """Validated image ready for the vision prompt."""

    mime_type: str
    base64_data: str
    size_bytes: int

    @property
    def data_url(self) -> str:
        """data: URL embedding the image."""
        return f"data:{self.mime_type};base64,{self.base64_data}"


def sniff_mime_type(data: bytes) -> str | None:
    """
    Detect the image container from its magic bytes.

    Args:
        data: Raw image bytes

    Returns:
        str | None: MIME type, or None when not recognized
    """
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:8] == b"ftyp" and data[8:12] in _HEIF_BRANDS:
        return "image/heic"
    return None


def _clean_mime_type(mime_type: str | None) -> str:
    cleaned = (mime_type or "").split(";", 1)[0].strip().lower()
    return _MIME_ALIASES.get(cleaned, cleaned)


def parse_image_bytes(
    data: bytes,
    mime_type: str | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> ParsedImage:
    """
    Validate raw image bytes.

    The sniffed type wins over the declared one; an unrecognized payload
    keeps its declared image type, or image/jpeg when none was declared.

    Args:
        data: Raw image bytes
        mime_type: Declared content type
        max_bytes: Size limit

    Returns:
        ParsedImage: Validated image

    Raises:
        InvalidImageError: If the payload is empty or not an image type
        ImageTooLargeError: If the payload exceeds max_bytes
    """
    if not data:
        raise InvalidImageError("Image is empty", field="image")
    if len(data) > max_bytes:
        raise ImageTooLargeError(len(data), max_bytes)

    declared = _clean_mime_type(mime_type)
    resolved = sniff_mime_type(data)
    if resolved is None:
        resolved = DEFAULT_MIME_TYPE if declared in _GENERIC_MIME_TYPES else declared
    if not resolved.startswith("image/"):
        raise InvalidImageError(
            f"Unsupported content type: {resolved}",
            field="mimeType",
        )

    return ParsedImage(
        mime_type=resolved,
        base64_data=base64.b64encode(data).decode("ascii"),
        size_bytes=len(data),
    )


def parse_image_payload(
    raw: str | None,
    mime_type: str | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> ParsedImage:
    """
    Validate a base64 image payload.

    Accepts plain base64, URL-safe base64, missing padding, embedded
    whitespace and data: URLs (whose MIME type is used when mime_type is
    not given).

    Args:
        raw: Base64 string or data URL
        mime_type: Declared content type
        max_bytes: Size limit on the decoded image

    Returns:
        ParsedImage: Validated image

    Raises:
        InvalidImageError: If the payload is missing or not valid base64
        ImageTooLargeError: If the decoded image exceeds max_bytes
    """
    if raw is None or not raw.strip():
        raise InvalidImageError("Missing imageBase64", field="imageBase64")

    text = raw.strip()
    data_url = _DATA_URL.match(text)
    if data_url:
        mime_type = mime_type or data_url.group("mime")
        text = data_url.group("data")

    text = _WHITESPACE.sub("", text).replace("-", "+").replace("_", "/")
    text += "=" * (-len(text) % 4)

    estimated_size = len(text) * 3 // 4
    if estimated_size > max_bytes + 2:
        raise ImageTooLargeError(estimated_size, max_bytes)

    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(
            "imageBase64 is not valid base64",
            field="imageBase64",
        ) from e

    return parse_image_bytes(data, mime_type, max_bytes)
