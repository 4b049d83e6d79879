# ============================================================================
# mms_parser/providers/registry.py - Provider detection and dispatch
# ============================================================================

import logging
from typing import Iterable, List, Optional

from ..errors import MmsParserError, ProviderFailure, ProviderNotFound, StructuralFailure, ValidationFailure
from ..models import CanonicalMessage, ParsedMessage
from .base import Provider
from .default import DefaultProvider

_DEFAULT_FALLBACK = object()


class ProviderRegistry:
    """Ordered set of carrier providers plus one fallback provider."""

    def __init__(self, logger: logging.Logger, providers: Optional[Iterable[Provider]] = None,
                 fallback=_DEFAULT_FALLBACK, trace_logger: Optional[logging.Logger] = None):
        self.logger = logger
        self.trace_logger = trace_logger
        self.providers: List[Provider] = list(providers or [])
        self.fallback: Optional[Provider] = DefaultProvider(logger) if fallback is _DEFAULT_FALLBACK else fallback

    def register(self, provider: Provider) -> None:
        """Add a provider after the ones already registered."""
        self.providers.append(provider)

    def detect(self, message: CanonicalMessage) -> Provider:
        """First registered provider matching the message, else the fallback."""
        for provider in self.providers:
            if provider.matches(message):
                if self.trace_logger is not None:
                    self.trace_logger.debug(f"{provider.name} message type detected")
                return provider

        if self.fallback is None:
            raise ProviderNotFound(f"No provider matched sender {message.header_from!r} and no fallback is registered")
        if self.trace_logger is not None:
            self.trace_logger.debug("No message type detected using fallback provider")
        return self.fallback

    def dispatch(self, message: Optional[CanonicalMessage], override: Optional[Provider] = None) -> ParsedMessage:
        """Select a provider (``override`` wins) and run it on the message."""
        if message is None:
            raise StructuralFailure("No MMS mail message supplied")

        provider = override if override is not None else self.detect(message)
        self.logger.info(f"Parsing message from {message.header_from!r} with provider {provider.name}")

        try:
            parsed = provider.parse(message)
        except MmsParserError as e:
            if isinstance(e, ProviderFailure):
                raise
            raise ProviderFailure(f"{provider.name}: {e}", provider.name) from e
        except Exception as e:
            raise ProviderFailure(f"{provider.name} raised {type(e).__name__}: {e}", provider.name) from e

        if parsed is None:
            raise ProviderFailure(f"Failed to parse message with provider {provider.name}", provider.name)

        if not parsed.is_valid():
            parsed.release()
            raise ValidationFailure(f"Message parsed by {provider.name} has no sender")

        return parsed
