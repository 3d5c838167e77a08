"""Reply pipeline steps, in the order the orchestrator runs them."""

from .generation import GenerationStep
from .grounding import GroundingStep
from .image import ImageRequestStep
from .persona import PersonaStep
from .voice import VoiceStep

__all__ = ["GenerationStep", "GroundingStep", "ImageRequestStep", "PersonaStep", "VoiceStep"]
