"""Expiring caches for enrichment results and personas."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .expiring import CacheEntry, ExpiringCache


@dataclass(slots=True)
class CacheSet:
    """The three cache namespaces, each with its own TTL."""

    image_descriptions: ExpiringCache
    personas: ExpiringCache
    transcriptions: ExpiringCache

    def __iter__(self):
        return iter((self.image_descriptions, self.personas, self.transcriptions))

    def start(self) -> None:
        for cache in self:
            cache.start()

    async def stop(self) -> None:
        await asyncio.gather(*(cache.stop() for cache in self))


def build_caches(settings=None) -> CacheSet:
    """Build the cache set from the ``cache`` config section."""
    if settings is None:
        from botc.config import cache as settings

    def make(name: str, ttl_hours: float) -> ExpiringCache:
        return ExpiringCache(
            name,
            ttl_hours,
            log_entries=settings.LOG_CACHE_ENTRIES,
            log_hits=settings.LOG_CACHE_HITS,
            log_misses=settings.LOG_CACHE_MISSES,
            log_purges=settings.LOG_CACHE_PURGES,
            sweep_interval=settings.CACHE_SWEEP_INTERVAL,
        )

    return CacheSet(
        image_descriptions=make("image-descriptions", settings.DESCRIBE_IMAGE_CACHE_TTL_HOURS),
        personas=make("personas", settings.PERSONA_CACHE_TTL_HOURS),
        transcriptions=make("transcriptions", settings.VOICE_TRANSCRIPT_CACHE_TTL_HOURS),
    )


__all__ = ["CacheEntry", "CacheSet", "ExpiringCache", "build_caches"]
