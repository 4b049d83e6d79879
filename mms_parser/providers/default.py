from typing import Optional

from ..models import CanonicalMessage, ParsedMessage
from .base import Provider


class DefaultProvider(Provider):
    """Fallback provider; matches every message."""

    name = "default"

    def matches(self, message: CanonicalMessage) -> bool:
        return True

    def parse(self, message: CanonicalMessage) -> Optional[ParsedMessage]:
        return self.copy_message(message)
