import os

from .loader import as_bool


class Cache:
    def __init__(self, config: dict | None = None) -> None:
        cache_cfg = (config or {}).get("botc", {}).get("cache", {})
        self.DESCRIBE_IMAGE_CACHE_TTL_HOURS: float = float(
            cache_cfg.get("describe_image_ttl_hours", os.getenv("DESCRIBE_IMAGE_CACHE_TTL_HOURS", "24"))
        )
        self.PERSONA_CACHE_TTL_HOURS: float = float(
            cache_cfg.get("persona_ttl_hours", os.getenv("PERSONA_CACHE_TTL_HOURS", "24"))
        )
        self.VOICE_TRANSCRIPT_CACHE_TTL_HOURS: float = float(
            cache_cfg.get("voice_transcript_ttl_hours", os.getenv("VOICE_TRANSCRIPT_CACHE_TTL_HOURS", "24"))
        )
        self.CACHE_SWEEP_INTERVAL: float = float(
            cache_cfg.get("sweep_interval", os.getenv("CACHE_SWEEP_INTERVAL", "60"))
        )

        self.LOG_CACHE_ENTRIES: bool = as_bool(cache_cfg.get("log_entries", os.getenv("LOG_CACHE_ENTRIES", "0")))
        self.LOG_CACHE_HITS: bool = as_bool(cache_cfg.get("log_hits", os.getenv("LOG_CACHE_HITS", "0")))
        self.LOG_CACHE_MISSES: bool = as_bool(cache_cfg.get("log_misses", os.getenv("LOG_CACHE_MISSES", "0")))
        self.LOG_CACHE_PURGES: bool = as_bool(cache_cfg.get("log_purges", os.getenv("LOG_CACHE_PURGES", "0")))
