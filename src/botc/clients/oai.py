"""Helpers for interacting with OpenAI API"""

from __future__ import annotations

import base64
import logging
from typing import Sequence

import aiohttp
from openai import AsyncOpenAI, OpenAIError

from botc.config import core, prompt

logger = logging.getLogger(__name__)


class OpenAIClient:
    """
    One async OpenAI client serving every model-backed capability.

    Provider rejections are logged and reported as an empty result so that
    callers can treat "no output" uniformly.
    """

    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self.aoai = client or AsyncOpenAI(
            api_key=core.OPENAI_API_KEY,
            timeout=core.OPENAI_TIMEOUT,
            max_retries=core.OPENAI_MAX_RETRIES,
        )

    # ==============================================
    # Text utilities
    # ==============================================
    async def complete(self, messages: list[dict], model: str | None = None) -> str:
        """
        Send a chat completion request and return the response text.

        Example message format:
        .. code-block:: python
            [
                {"role": "system", "content": "You are a helpful assistant."},
                {"role": "user", "name": "alice", "content": "Hello, how are you?"},
            ]
        """
        try:
            resp = await self.aoai.chat.completions.create(
                model=model or core.MSG_MODEL_ID,
                messages=messages,
            )
        except OpenAIError as exc:
            logger.error("Chat completion failed: %s", exc)
            return ""
        if not resp.choices:
            logger.warning("Chat completion returned no choices")
            return ""
        return (resp.choices[0].message.content or "").strip()

    # ==============================================
    # Image utilities
    # ==============================================
    async def describe_image(self, image_url: str) -> str:
        """Return a plain-text description of the image at ``image_url`` (http or data URL)."""
        try:
            resp = await self.aoai.chat.completions.create(
                model=core.IMG_MODEL_ID,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt.DESCRIBE_IMAGE_PROMPT},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
            )
        except OpenAIError as exc:
            logger.error("Image description failed: %s", exc)
            return ""
        if not resp.choices:
            logger.warning("Image description returned no choices")
            return ""
        return (resp.choices[0].message.content or "").strip()

    async def generate_image(self, prompt_text: str, reference_urls: Sequence[str] = ()) -> bytes:
        """
        Generate a PNG from ``prompt_text``; with reference images the request
        becomes an edit of those images.
        """
        try:
            if reference_urls:
                references = [
                    (f"reference-{i}.png", await _download(url), "image/png")
                    for i, url in enumerate(reference_urls)
                ]
                resp = await self.aoai.images.edit(
                    model=core.IMAGE_GEN_MODEL_ID,
                    image=references,
                    prompt=prompt_text,
                )
            else:
                resp = await self.aoai.images.generate(
                    model=core.IMAGE_GEN_MODEL_ID,
                    prompt=prompt_text,
                )
        except (OpenAIError, aiohttp.ClientError) as exc:
            logger.error("Image generation failed: %s", exc)
            return b""

        b64 = resp.data[0].b64_json if resp.data else None
        return base64.b64decode(b64) if b64 else b""

    # ==============================================
    # Audio utilities
    # ==============================================
    async def transcribe_audio(self, audio: bytes, filename: str = "audio.ogg") -> str:
        try:
            resp = await self.aoai.audio.transcriptions.create(
                model=core.TRANSCRIPTION_MODEL_ID,
                file=(filename, audio),
            )
        except OpenAIError as exc:
            logger.error("Transcription failed: %s", exc)
            return ""
        return (resp.text or "").strip()

    async def synthesize(self, text: str) -> bytes:
        try:
            resp = await self.aoai.audio.speech.create(
                model=core.SPEECH_MODEL_ID,
                voice=core.SPEECH_VOICE,
                input=text,
                response_format="mp3",
            )
        except OpenAIError as exc:
            logger.error("Speech synthesis failed: %s", exc)
            return b""
        return resp.content


async def _download(url: str) -> bytes:
    async with aiohttp.ClientSession() as s, s.get(url) as r:
        r.raise_for_status()
        return await r.read()


__all__ = ["OpenAIClient"]
