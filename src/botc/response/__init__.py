"""Reply decision, generation and delivery."""

from .dispatch import DispatchResult, Dispatcher, Reply, ReplyAttachment
from .orchestrator import ERROR_REPLY, Orchestrator

__all__ = ["DispatchResult", "Dispatcher", "ERROR_REPLY", "Orchestrator", "Reply", "ReplyAttachment"]
