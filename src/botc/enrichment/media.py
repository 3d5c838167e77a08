"""
Media helpers for enrichment: byte downloads and vision-friendly resizing.

Images whose long side exceeds :data:`MAX_LONG_SIDE` or whose short side
exceeds :data:`MAX_SHORT_SIDE` are scaled down and re-encoded as a PNG data
URL; anything smaller is passed to the vision model by its original URL.
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging

import aiohttp
from PIL import Image

from botc.formatter.model import ImageAttachment

logger = logging.getLogger(__name__)

MAX_LONG_SIDE = 2000
MAX_SHORT_SIDE = 768


async def fetch_bytes(url: str, max_mb: int) -> bytes:
    async with aiohttp.ClientSession() as s, s.get(url) as r:
        r.raise_for_status()
        data = await r.read()
        if len(data) > max_mb * 1024 * 1024:
            raise ValueError(f"media at {url} exceeds {max_mb} MB")
        return data


def needs_resize(width: int, height: int) -> bool:
    return max(width, height) > MAX_LONG_SIDE or min(width, height) > MAX_SHORT_SIDE


def target_size(width: int, height: int) -> tuple[int, int]:
    """Largest size with the same aspect ratio that fits both side limits."""
    scale = min(MAX_LONG_SIDE / max(width, height), MAX_SHORT_SIDE / min(width, height), 1.0)
    return max(1, round(width * scale)), max(1, round(height * scale))


def _resize_to_data_url(blob: bytes) -> str | None:
    with Image.open(io.BytesIO(blob)) as img:
        if not needs_resize(*img.size):
            return None
        img.seek(0)
        frame = img.convert("RGBA").resize(target_size(*img.size), Image.Resampling.LANCZOS)
    out = io.BytesIO()
    frame.save(out, format="PNG")
    return "data:image/png;base64," + base64.b64encode(out.getvalue()).decode()


class ImagePreparer:
    """Callable that maps an image attachment to the URL handed to the vision model."""

    def __init__(self, max_mb: int) -> None:
        self.max_mb = max_mb

    async def __call__(self, image: ImageAttachment) -> str:
        if image.width and image.height and not needs_resize(image.width, image.height):
            return image.url

        blob = await fetch_bytes(image.url, self.max_mb)
        resized = await asyncio.to_thread(_resize_to_data_url, blob)
        if resized is None:
            return image.url
        logger.debug("Resized %s for vision input", image.url)
        return resized


class AudioFetcher:
    def __init__(self, max_mb: int) -> None:
        self.max_mb = max_mb

    async def __call__(self, url: str) -> bytes:
        return await fetch_bytes(url, self.max_mb)


__all__ = ["AudioFetcher", "ImagePreparer", "fetch_bytes", "needs_resize", "target_size"]
