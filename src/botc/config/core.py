import logging
import os

logger = logging.getLogger(__name__)


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = (config or {}).get("botc", {})
        discord_cfg = cfg.get("discord", {})
        models_cfg = cfg.get("models", {})
        limits_cfg = cfg.get("limits", {})

        token_env = str(discord_cfg.get("token_env", "DISCORD_BOT_TOKEN"))
        openai_env = str(discord_cfg.get("openai_key_env", "OPENAI_API_KEY"))
        brave_env = str(discord_cfg.get("brave_key_env", "BRAVE_API_KEY"))

        self.DISCORD_BOT_TOKEN: str | None = os.getenv(token_env)
        self.OPENAI_API_KEY: str | None = os.getenv(openai_env)
        self.BRAVE_API_KEY: str | None = os.getenv(brave_env)

        self.BOT_NAME: str = str(discord_cfg.get("bot_name", os.getenv("BOT_NAME", "botc")))
        self.CHANNEL_HISTORY_HOURS: float = float(
            discord_cfg.get("channel_history_hours", os.getenv("CHANNEL_HISTORY_HOURS", "24"))
        )
        self.CHANNEL_HISTORY_MESSAGES: int = int(
            discord_cfg.get("channel_history_messages", os.getenv("CHANNEL_HISTORY_MESSAGES", "100"))
        )
        self.MAX_DISCORD_RETRIES: int = int(
            discord_cfg.get("max_discord_retries", os.getenv("MAX_DISCORD_RETRIES", "3"))
        )
        self.DISCORD_RETRY_DELAY: float = float(
            discord_cfg.get("retry_delay", os.getenv("DISCORD_RETRY_DELAY", "1.0"))
        )
        self.TYPING_INTERVAL: float = float(
            discord_cfg.get("typing_interval", os.getenv("TYPING_INTERVAL", "9.0"))
        )

        self.MSG_MODEL_ID: str = models_cfg.get("message_model") or os.getenv("MSG_MODEL_ID") or "gpt-4o-mini"
        self.IMG_MODEL_ID: str = models_cfg.get("image_model") or os.getenv("IMG_MODEL_ID") or self.MSG_MODEL_ID
        self.TRANSCRIPTION_MODEL_ID: str = (
            models_cfg.get("transcription_model") or os.getenv("TRANSCRIPTION_MODEL_ID") or "whisper-1"
        )
        self.IMAGE_GEN_MODEL_ID: str = (
            models_cfg.get("image_generation_model") or os.getenv("IMAGE_GEN_MODEL_ID") or "gpt-image-1"
        )
        self.SPEECH_MODEL_ID: str = models_cfg.get("speech_model") or os.getenv("SPEECH_MODEL_ID") or "tts-1"
        self.SPEECH_VOICE: str = models_cfg.get("speech_voice") or os.getenv("SPEECH_VOICE") or "alloy"

        self.OPENAI_TIMEOUT: float = float(limits_cfg.get("openai_timeout", os.getenv("OPENAI_TIMEOUT", "15")))
        self.OPENAI_MAX_RETRIES: int = int(limits_cfg.get("openai_max_retries", os.getenv("OPENAI_MAX_RETRIES", "3")))
        self.GROUNDING_TIMEOUT: float = float(limits_cfg.get("grounding_timeout", os.getenv("GROUNDING_TIMEOUT", "10")))
        self.MAX_IMAGE_MB: int = int(limits_cfg.get("max_image_mb", os.getenv("MAX_IMAGE_MB", "20")))
        self.MAX_AUDIO_MB: int = int(limits_cfg.get("max_audio_mb", os.getenv("MAX_AUDIO_MB", "25")))

        required = [
            ("DISCORD_BOT_TOKEN", self.DISCORD_BOT_TOKEN),
            ("OPENAI_API_KEY", self.OPENAI_API_KEY),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

        if self.MAX_DISCORD_RETRIES < 1:
            logger.warning("MAX_DISCORD_RETRIES=%s is below 1; using a single attempt", self.MAX_DISCORD_RETRIES)
            self.MAX_DISCORD_RETRIES = 1
