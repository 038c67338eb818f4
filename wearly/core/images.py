"""Image loading and normalisation for the try-on pipeline."""
import base64
import binascii
import io
import logging
from typing import Tuple

import httpx
from PIL import Image

from wearly.config import settings

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class ImageSourceError(Exception):
    """Raised when an image URL cannot be decoded or downloaded"""


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split a base64 data URL into (mime_type, bytes)."""
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not payload:
        raise ImageSourceError("Invalid data URL format")
    mime_type = header[len("data:"):].split(";")[0] or "application/octet-stream"
    try:
        return mime_type, base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ImageSourceError(f"Invalid base64 payload: {e}")


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def fetch_image_bytes(url: str, timeout: float = None) -> bytes:
    """Download an image over http(s) with a browser User-Agent"""
    timeout = timeout if timeout is not None else settings.image_fetch_timeout
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            response = client.get(url, headers={"User-Agent": BROWSER_USER_AGENT})
    except httpx.HTTPError as e:
        raise ImageSourceError(f"Failed to fetch image: {e}")
    if response.status_code >= 400:
        raise ImageSourceError(
            f"Failed to fetch image: {response.status_code} {response.reason_phrase}"
        )
    logger.debug("Downloaded %s (%d bytes)", url, len(response.content))
    return response.content


def load_image(source: str) -> bytes:
    """Bytes behind a data URL or a remote image URL"""
    if source.startswith("data:"):
        return parse_data_url(source)[1]
    return fetch_image_bytes(source)


def optimize_jpeg(data: bytes, max_side: int, quality: int = 90) -> bytes:
    """Fit inside max_side x max_side without enlarging, re-encoded as JPEG."""
    with Image.open(io.BytesIO(data)) as img:
        logger.debug("Image info: %s %sx%s", img.format, img.width, img.height)
        img = img.convert("RGB")
        img.thumbnail((max_side, max_side), Image.LANCZOS)
        out = io.BytesIO()
        img.save(out, format="JPEG", quality=quality)
    return out.getvalue()
