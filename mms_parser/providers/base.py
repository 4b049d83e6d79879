# ============================================================================
# mms_parser/providers/base.py
# ============================================================================
"""
Provider interface and shared helpers.

A provider decides whether it understands a canonical message (``matches``)
and turns it into a carrier-normalized :class:`ParsedMessage` (``parse``).
"""

import logging
import re
from abc import ABC, abstractmethod
from email.utils import parseaddr
from typing import Optional, Pattern, Union

from ..models import CanonicalMessage, ParsedMessage

PHONE_NUMBER_PATTERN = re.compile(r"^\+?\d{6,15}$")


def sender_address(header_from: Optional[str]) -> str:
    """Bare, lower-cased address from a From header value."""
    if not header_from:
        return ""
    _, address = parseaddr(header_from)
    return (address or header_from).strip().lower()


def phone_number_from(header_from: Optional[str]) -> Optional[str]:
    local_part = sender_address(header_from).split("@", 1)[0]
    if PHONE_NUMBER_PATTERN.match(local_part):
        return local_part
    return None


class Provider(ABC):
    """Interface for carrier-specific message interpretation."""

    name = "provider"

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def matches(self, message: CanonicalMessage) -> bool:
        """Check whether this provider handles the message."""
        pass

    @abstractmethod
    def parse(self, message: CanonicalMessage) -> Optional[ParsedMessage]:
        """Build a ParsedMessage. May raise ProviderFailure or return None."""
        pass

    def copy_message(self, message: CanonicalMessage) -> ParsedMessage:
        """Carrier-agnostic copy of a canonical message with cloned attachments."""
        return ParsedMessage(
            header_from=message.header_from,
            header_to=message.header_to,
            header_subject=message.header_subject,
            header_datetime=message.header_datetime,
            body_text=message.body_text,
            attachments=[attachment.clone() for attachment in message.attachments],
            phone_number=phone_number_from(message.header_from),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class AddressPatternProvider(Provider):
    """Provider selected by a regular expression on the sender address."""

    pattern: Union[str, Pattern, None] = None

    def __init__(self, logger: Optional[logging.Logger] = None, pattern: Union[str, Pattern, None] = None,
                 name: Optional[str] = None):
        super().__init__(logger)
        pattern = pattern if pattern is not None else self.pattern
        if pattern is None:
            raise ValueError(f"{type(self).__name__} requires an address pattern")
        self.regex = re.compile(pattern, re.IGNORECASE) if isinstance(pattern, str) else pattern
        if name:
            self.name = name

    def matches(self, message: CanonicalMessage) -> bool:
        return bool(self.regex.search(sender_address(message.header_from)))

    def parse(self, message: CanonicalMessage) -> Optional[ParsedMessage]:
        return self.copy_message(message)
