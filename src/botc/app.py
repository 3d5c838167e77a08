"""Wire clients, caches and response components together."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import discord

from botc.clients import CompletionProvider, GroundingProvider
from botc.clients.brave import BraveClient
from botc.clients.oai import OpenAIClient
from botc.clients.ollama import OllamaClient
from botc.clients.platform import DiscordPlatform
from botc.config import core, features, local_llm, prompt
from botc.enrichment import AudioFetcher, Enricher, ImagePreparer
from botc.memory.cache import CacheSet, build_caches
from botc.response.decision import ReplyDecider
from botc.response.dispatch import Dispatcher
from botc.response.engine import ResponsePipeline
from botc.response.grounding import GroundingAdvisor
from botc.response.orchestrator import Orchestrator
from botc.response.persona import PersonaSynthesizer
from botc.response.steps import (
    GenerationStep,
    GroundingStep,
    ImageRequestStep,
    PersonaStep,
    VoiceStep,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Runtime:
    platform: DiscordPlatform
    caches: CacheSet
    enricher: Enricher
    orchestrator: Orchestrator
    prefetched: bool = False


def build_runtime(client: discord.Client) -> Runtime:
    platform = DiscordPlatform(
        client,
        history_hours=core.CHANNEL_HISTORY_HOURS,
        history_limit=core.CHANNEL_HISTORY_MESSAGES,
    )
    caches = build_caches()
    openai_client = OpenAIClient()

    completion: CompletionProvider = openai_client
    if local_llm.USE_LOCAL:
        logger.info("Using local model %s for completions", local_llm.LOCAL_MODEL_ID)
        completion = OllamaClient()

    grounding_provider: GroundingProvider | None = None
    if features.ENABLE_AI_GROUNDING:
        if core.BRAVE_API_KEY:
            grounding_provider = BraveClient()
        else:
            logger.warning("ENABLE_AI_GROUNDING is set but BRAVE_API_KEY is missing; grounding disabled")

    enricher = Enricher(
        caches,
        vision=openai_client,
        transcriber=openai_client,
        prepare_image=ImagePreparer(core.MAX_IMAGE_MB),
        fetch_audio=AudioFetcher(core.MAX_AUDIO_MB),
    )
    personas = PersonaSynthesizer(caches.personas, enricher, completion, prompt.persona_instruction)
    decider = ReplyDecider(
        completion,
        auto_respond=features.ENABLE_AUTO_RESPOND,
        decision_prompt=prompt.REPLY_DECISION_PROMPT,
    )
    advisor = GroundingAdvisor(
        completion,
        grounding_provider,
        enabled=features.ENABLE_AI_GROUNDING,
        decision_prompt=prompt.GROUND_DECISION_PROMPT,
        query_prompt=prompt.GROUNDING_QUERY_PROMPT,
    )
    pipeline = ResponsePipeline(
        [
            ImageRequestStep(
                completion,
                openai_client,
                classifier_prompt=prompt.IMAGE_REQUEST_PROMPT,
                voice_replies=features.ENABLE_VOICE_RESPONSE,
            ),
            PersonaStep(personas, platform),
            GroundingStep(advisor),
            GenerationStep(completion, prompt.SYSTEM_PROMPT),
            VoiceStep(openai_client, enabled=features.ENABLE_VOICE_RESPONSE),
        ]
    )
    dispatcher = Dispatcher(
        platform,
        max_attempts=core.MAX_DISCORD_RETRIES,
        retry_delay=core.DISCORD_RETRY_DELAY,
        typing_interval=core.TYPING_INTERVAL,
    )
    orchestrator = Orchestrator(
        platform,
        enricher,
        decider,
        dispatcher,
        pipeline,
        history_hours=core.CHANNEL_HISTORY_HOURS,
        history_limit=core.CHANNEL_HISTORY_MESSAGES,
    )
    return Runtime(platform=platform, caches=caches, enricher=enricher, orchestrator=orchestrator)


__all__ = ["Runtime", "build_runtime"]
