import pytest

from botc.config.cache import Cache
from botc.config.core import Core
from botc.config.features import Features
from botc.config.loader import load_raw_config
from botc.config.prompt import Prompt


def test_core_defaults():
    core = Core({})

    assert core.BOT_NAME == "botc"
    assert core.CHANNEL_HISTORY_HOURS == 24
    assert core.MAX_DISCORD_RETRIES == 3
    assert core.TYPING_INTERVAL < 10
    assert core.OPENAI_TIMEOUT == 15


def test_core_reads_toml_sections():
    core = Core({"botc": {"discord": {"channel_history_hours": 12, "max_discord_retries": 5}}})

    assert core.CHANNEL_HISTORY_HOURS == 12
    assert core.MAX_DISCORD_RETRIES == 5


def test_core_requires_credentials(monkeypatch):
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(ValueError, match="DISCORD_BOT_TOKEN"):
        Core({})


def test_cache_and_feature_defaults(monkeypatch):
    for name in ("ENABLE_AUTO_RESPOND", "ENABLE_VOICE_RESPONSE", "LOG_CACHE_HITS"):
        monkeypatch.delenv(name, raising=False)

    cache = Cache({})
    features = Features({})

    assert cache.DESCRIBE_IMAGE_CACHE_TTL_HOURS == 24
    assert cache.LOG_CACHE_HITS is False
    assert features.ENABLE_AUTO_RESPOND is True
    assert features.ENABLE_VOICE_RESPONSE is False


def test_feature_gates_from_env(monkeypatch):
    monkeypatch.setenv("ENABLE_AI_GROUNDING", "true")
    monkeypatch.setenv("ENABLE_AUTO_RESPOND", "0")

    features = Features({})

    assert features.ENABLE_AI_GROUNDING is True
    assert features.ENABLE_AUTO_RESPOND is False


def test_prompts_carry_bot_name(monkeypatch):
    monkeypatch.delenv("SYSTEM_PROMPT", raising=False)
    monkeypatch.delenv("REPLY_DECISION_PROMPT", raising=False)

    prompt = Prompt({}, bot_name="robo")

    assert prompt.SYSTEM_PROMPT.startswith("You are `robo`")
    assert '"will_respond"' in prompt.REPLY_DECISION_PROMPT
    assert prompt.persona_instruction("Alice") == (
        "Summarize the following messages to build a persona for the user Alice."
    )


def test_load_raw_config(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[botc.cache]\npersona_ttl_hours = 6\n', encoding="utf-8")

    raw = load_raw_config(path)

    assert Cache(raw).PERSONA_CACHE_TTL_HOURS == 6
    assert load_raw_config(tmp_path / "missing.toml") == {}
