"""
Carrier providers for parsed MMS messages.

- AddressPatternProvider: base for providers keyed on the sender address
- DefaultProvider: fallback, always matches
- UKVodafoneProvider: Vodafone UK MMS gateway
"""

import logging
from typing import List, Optional

from .base import AddressPatternProvider, Provider
from .default import DefaultProvider
from .registry import ProviderRegistry
from .uk_vodafone import UKVodafoneProvider


def default_providers(logger: Optional[logging.Logger] = None) -> List[Provider]:
    """Carrier providers registered when none are supplied, in detection order."""
    return [UKVodafoneProvider(logger)]


__all__ = [
    'AddressPatternProvider',
    'DefaultProvider',
    'Provider',
    'ProviderRegistry',
    'UKVodafoneProvider',
    'default_providers',
]
