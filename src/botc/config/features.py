import os

from .loader import as_bool


class Features:
    def __init__(self, config: dict | None = None) -> None:
        feat_cfg = (config or {}).get("botc", {}).get("features", {})
        self.ENABLE_AUTO_RESPOND: bool = as_bool(
            feat_cfg.get("auto_respond", os.getenv("ENABLE_AUTO_RESPOND", "1"))
        )
        self.ENABLE_VOICE_RESPONSE: bool = as_bool(
            feat_cfg.get("voice_response", os.getenv("ENABLE_VOICE_RESPONSE", "0"))
        )
        self.ENABLE_AI_GROUNDING: bool = as_bool(
            feat_cfg.get("ai_grounding", os.getenv("ENABLE_AI_GROUNDING", "0"))
        )
        self.ENABLE_DEBUG_LOGGING: bool = as_bool(
            feat_cfg.get("debug_logging", os.getenv("ENABLE_DEBUG_LOGGING", "0"))
        )
