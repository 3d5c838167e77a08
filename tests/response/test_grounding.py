from unittest.mock import AsyncMock, MagicMock

import pytest

from botc.formatter.model import EnrichedMessage
from botc.response.grounding import GroundingAdvisor, parse_ground_decision


def _advisor(replies, answer="Sunny, 24C", enabled=True):
    completion = MagicMock()
    completion.complete = AsyncMock(side_effect=list(replies))
    provider = MagicMock()
    provider.grounded_answer = AsyncMock(return_value=answer)
    advisor = GroundingAdvisor(
        completion,
        provider,
        enabled=enabled,
        decision_prompt="ground?",
        query_prompt="query?",
    )
    return advisor, completion, provider


@pytest.mark.asyncio
async def test_disabled_grounding_makes_no_calls(make_message):
    advisor, completion, provider = _advisor([], enabled=False)

    assert await advisor.context_for([EnrichedMessage(make_message())]) == ""
    completion.complete.assert_not_awaited()
    provider.grounded_answer.assert_not_awaited()


@pytest.mark.asyncio
async def test_grounding_queries_provider_when_needed(make_message):
    advisor, completion, provider = _advisor(['{"willGround": true}', "weather in Austin today"])

    assert await advisor.context_for([EnrichedMessage(make_message(content="weather?"))]) == "Sunny, 24C"
    provider.grounded_answer.assert_awaited_once_with("weather in Austin today")
    assert completion.complete.await_args_list[1].args[0][0]["content"] == "query?"


@pytest.mark.asyncio
async def test_grounding_skipped_when_model_declines(make_message):
    advisor, completion, provider = _advisor(['{"willGround": false}'])

    assert await advisor.context_for([EnrichedMessage(make_message())]) == ""
    assert completion.complete.await_count == 1
    provider.grounded_answer.assert_not_awaited()


def test_ground_decision_fallback():
    assert parse_ground_decision('{"willGround": true}') is True
    assert parse_ground_decision('{"willGround": "true"}') is False
    assert parse_ground_decision('willGround: "true"') is True
    assert parse_ground_decision("no idea") is False


def test_missing_provider_disables_grounding():
    advisor = GroundingAdvisor(MagicMock(), None, enabled=True, decision_prompt="", query_prompt="")
    assert advisor.enabled is False
