"""
Reply decision: should the bot answer the latest message?

Cheap rules over the latest message settle most cases without a model call.
Everything else goes to the completion provider, whose answer is untrusted
JSON and is parsed into a tagged outcome.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Sequence, Union

from botc.clients import CompletionProvider
from botc.formatter.model import ChatMessage, EnrichedMessage
from botc.response.history import build_payload

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ReplyDecision:
    will_respond: bool
    reason: str = ""
    addressed_target: str = ""
    bot_is_addressed: bool = False


@dataclass(frozen=True, slots=True)
class ParsedDecision:
    decision: ReplyDecision


@dataclass(frozen=True, slots=True)
class UnparsedDecision:
    raw_text: str


DecisionOutcome = Union[ParsedDecision, UnparsedDecision]


def _flag(value: object) -> bool:
    return str(value).strip().lower() in ("true", "yes")


def parse_decision(raw: str) -> DecisionOutcome:
    """Parse a model decision; anything that is not a JSON object with ``will_respond`` is unparsed."""
    try:
        data = json.loads(_FENCE_RE.sub("", raw.strip()))
    except (json.JSONDecodeError, TypeError):
        return UnparsedDecision(raw)

    if not isinstance(data, dict) or "will_respond" not in data:
        return UnparsedDecision(raw)

    return ParsedDecision(
        ReplyDecision(
            will_respond=str(data["will_respond"]).strip().lower() == "yes",
            reason=str(data.get("reason", "")),
            addressed_target=str(data.get("addressed_target", "")),
            bot_is_addressed=_flag(data.get("bot_is_addressed", False)),
        )
    )


def outcome_says_yes(outcome: DecisionOutcome) -> bool:
    if isinstance(outcome, ParsedDecision):
        return outcome.decision.will_respond
    # Degraded path: the model ignored the JSON format
    logger.warning("Reply decision was not valid JSON; falling back to substring check: %r", outcome.raw_text)
    return '"yes"' in outcome.raw_text.lower()


class ReplyDecider:
    def __init__(self, completion: CompletionProvider, *, auto_respond: bool, decision_prompt: str) -> None:
        self.completion = completion
        self.auto_respond = auto_respond
        self.decision_prompt = decision_prompt

    def quick_decision(self, latest: ChatMessage) -> bool | None:
        """Rule-based verdict for ``latest``, or ``None`` when the model must decide."""
        if latest.is_own:
            return False
        if latest.is_direct or latest.mentions_bot or latest.is_voice:
            return True
        if latest.author_is_bot or not self.auto_respond:
            return False
        return None

    async def should_reply(self, history: Sequence[EnrichedMessage]) -> bool:
        if not history:
            return False

        verdict = self.quick_decision(history[-1].message)
        if verdict is not None:
            logger.debug("Reply decision for message %s settled by rules: %s", history[-1].id, verdict)
            return verdict

        payload = build_payload(self.decision_prompt, history)
        logger.debug("Reply decision payload: %s", json.dumps(payload, ensure_ascii=False))
        raw = await self.completion.complete(payload)
        logger.debug("Reply decision response: %s", raw)

        outcome = parse_decision(raw)
        if isinstance(outcome, ParsedDecision):
            logger.info(
                "Reply decision for message %s: respond=%s target=%s reason=%s",
                history[-1].id,
                outcome.decision.will_respond,
                outcome.decision.addressed_target,
                outcome.decision.reason,
            )
        return outcome_says_yes(outcome)


__all__ = [
    "DecisionOutcome",
    "ParsedDecision",
    "ReplyDecider",
    "ReplyDecision",
    "UnparsedDecision",
    "outcome_says_yes",
    "parse_decision",
]
