# ============================================================================
# mms_parser/__init__.py - Factory and DI setup
# ============================================================================

import logging
import sys

from .cleanser import Cleanser, Field, RegexSubstitution
from .config import ParserConfig
from .errors import (
    AdapterFailure,
    ErrorSink,
    MmsParserError,
    ProviderFailure,
    ProviderNotFound,
    StructuralFailure,
    ValidationFailure,
)
from .mime_adapter import EmailMimeAdapter
from .models import Attachment, CanonicalMessage, ParsedMessage
from .parser import MmsParser
from .providers import (
    AddressPatternProvider,
    DefaultProvider,
    Provider,
    ProviderRegistry,
    UKVodafoneProvider,
    default_providers,
)

__version__ = "0.1.0"


def create_mms_parser(log_level: int = logging.INFO, **options) -> MmsParser:
    """Factory function to create a configured MmsParser.

    Keyword options are those of :class:`ParserConfig`. With ``debug`` on,
    trace lines are written to stderr.
    """
    config = ParserConfig(**options)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logger = logging.getLogger(__name__)

    if config.mime_parser is None:
        config.mime_parser = EmailMimeAdapter(logger, config.output_dir)

    return MmsParser(config, logger=logger)


__all__ = [
    'AdapterFailure',
    'AddressPatternProvider',
    'Attachment',
    'CanonicalMessage',
    'Cleanser',
    'DefaultProvider',
    'EmailMimeAdapter',
    'ErrorSink',
    'Field',
    'MmsParser',
    'MmsParserError',
    'ParsedMessage',
    'ParserConfig',
    'Provider',
    'ProviderFailure',
    'ProviderNotFound',
    'ProviderRegistry',
    'RegexSubstitution',
    'StructuralFailure',
    'UKVodafoneProvider',
    'ValidationFailure',
    'create_mms_parser',
    'default_providers',
]
