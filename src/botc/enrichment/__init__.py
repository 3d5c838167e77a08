"""Image and voice enrichment for chat history."""

from .coordinator import Enricher, MessageLike
from .media import AudioFetcher, ImagePreparer

__all__ = ["AudioFetcher", "Enricher", "ImagePreparer", "MessageLike"]
