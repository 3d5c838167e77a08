"""Application configuration"""

import logging
from pathlib import Path

from dotenv import load_dotenv

from .loader import load_raw_config
from .core import Core
from .cache import Cache
from .features import Features
from .prompt import Prompt
from .local_llm import LocalLLM

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Dropping an empty DEBUG file into the working directory turns on debug logs
DEBUG_FLAG_FILE = Path("DEBUG")

_RAW_CONFIG = load_raw_config()

core = Core(_RAW_CONFIG)
cache = Cache(_RAW_CONFIG)
features = Features(_RAW_CONFIG)
prompt = Prompt(_RAW_CONFIG, bot_name=core.BOT_NAME)
local_llm = LocalLLM(_RAW_CONFIG)

_debug = features.ENABLE_DEBUG_LOGGING or DEBUG_FLAG_FILE.exists()

logging.basicConfig(
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    level=logging.DEBUG if _debug else logging.INFO,
)
logging.getLogger("httpx").setLevel(logging.WARNING)


class Config:
    core = core
    cache = cache
    features = features
    prompt = prompt
    local_llm = local_llm


__all__ = ["core", "cache", "features", "prompt", "local_llm", "Config"]
