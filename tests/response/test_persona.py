from unittest.mock import AsyncMock, MagicMock

import pytest

from botc.formatter.model import EnrichedMessage
from botc.response.persona import PersonaSynthesizer, persona_key


@pytest.fixture
def enricher():
    enricher = MagicMock()
    enricher.enrich = AsyncMock(side_effect=lambda msgs: [EnrichedMessage(m) for m in msgs])
    return enricher


@pytest.fixture
def completion():
    completion = MagicMock()
    completion.complete = AsyncMock(return_value="Alice is cheerful and loves cars.")
    return completion


def _synth(caches, enricher, completion):
    return PersonaSynthesizer(
        caches.personas,
        enricher,
        completion,
        lambda name: f"Summarize the following messages to build a persona for the user {name}.",
    )


@pytest.mark.asyncio
async def test_miss_synthesizes_and_caches(caches, enricher, completion, make_message):
    synth = _synth(caches, enricher, completion)
    history = [make_message(content="vroom"), make_message(content="I love cars")]

    persona = await synth.get_persona(500, 1, history)

    assert persona == "Alice is cheerful and loves cars."
    enricher.enrich.assert_awaited_once()
    payload = completion.complete.await_args.args[0]
    assert payload[0] == {
        "role": "system",
        "content": "Summarize the following messages to build a persona for the user Alice.",
    }
    assert len(payload) == 3
    assert caches.personas.get(persona_key(500, 1)) == persona


@pytest.mark.asyncio
async def test_hit_makes_no_provider_calls(caches, enricher, completion):
    caches.personas.put("500:1", "cached persona")
    loader = AsyncMock(return_value=[])
    synth = _synth(caches, enricher, completion)

    assert await synth.get_persona(500, 1, loader) == "cached persona"
    loader.assert_not_awaited()
    enricher.enrich.assert_not_awaited()
    completion.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_loader_is_awaited_on_miss(caches, enricher, completion, make_message):
    loader = AsyncMock(return_value=[make_message()])
    synth = _synth(caches, enricher, completion)

    await synth.get_persona(500, 1, loader)

    loader.assert_awaited_once()


@pytest.mark.asyncio
async def test_empty_history_is_rejected(caches, enricher, completion):
    synth = _synth(caches, enricher, completion)

    with pytest.raises(ValueError):
        await synth.get_persona(500, 1, [])
    completion.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_completion_is_not_cached(caches, enricher, completion, make_message):
    completion.complete.return_value = ""
    synth = _synth(caches, enricher, completion)

    assert await synth.get_persona(500, 1, [make_message()]) == ""
    assert not caches.personas.contains("500:1")
