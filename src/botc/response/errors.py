"""Exceptions raised while preparing a reply."""


class ResponseError(Exception):
    """Base class for reply preparation failures."""


class EmptyCompletionError(ResponseError):
    """The completion provider returned no usable text."""


class MissingGuildContextError(ResponseError, ValueError):
    """A guild-only operation was asked to run without a guild."""
