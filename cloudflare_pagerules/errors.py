"""
Exceptions raised by the Page Rules client.
"""

from typing import Optional


class PageRuleError(Exception):
    """Base class for Page Rules client errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        if cause is not None:
            super().__init__(f"{message}: {cause}")
        else:
            super().__init__(message)


class TransportError(PageRuleError):
    """The HTTP call to the Cloudflare API could not be completed."""


class DecodeError(PageRuleError, ValueError):
    """
    A response (or a single value inside it) did not match the expected shape.

    Also a ValueError so that pydantic validators can raise it directly.
    """
