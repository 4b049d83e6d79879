"""
Configuration for the MMS parser.
Defaults can be overridden with MMS_* environment variables.
"""

import os
from typing import Any, Dict, Iterable, Mapping, Optional

from .cleanser import normalize_cleanse_map
from .interfaces import MimeAdapter
from .providers.base import Provider


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class ParserConfig:
    """Options for an MmsParser.

    A config object is read-only by convention so one instance can be shared
    by any number of parsers.
    """

    def __init__(
        self,
        mime_parser: Optional[MimeAdapter] = None,
        debug: Optional[bool] = None,
        output_dir: Optional[str] = None,
        provider: Optional[Provider] = None,
        strip_characters: Optional[str] = None,
        cleanse_map: Optional[Mapping] = None,
        providers: Optional[Iterable[Provider]] = None,
        fallback_provider: Optional[Provider] = None,
        first_multipart_only: Optional[bool] = None,
    ):
        # Adapter and providers
        self.mime_parser = mime_parser
        self.provider = provider
        self.providers = list(providers) if providers is not None else None
        self.fallback_provider = fallback_provider

        # Environment-overridable defaults
        self.debug = debug if debug is not None else _env_flag('MMS_DEBUG')
        if isinstance(output_dir, os.PathLike):
            output_dir = os.fspath(output_dir)
        self.output_dir = output_dir if output_dir is not None else (os.getenv('MMS_OUTPUT_DIR') or None)
        self.strip_characters = (
            strip_characters if strip_characters is not None else (os.getenv('MMS_STRIP_CHARACTERS') or None)
        )
        self.first_multipart_only = (
            first_multipart_only if first_multipart_only is not None else _env_flag('MMS_FIRST_MULTIPART_ONLY')
        )

        # Cleansing
        self.cleanse_map = normalize_cleanse_map(cleanse_map)

        self.validate()

    def validate(self) -> None:
        """Raise ValueError for option values the parser cannot use."""
        if self.mime_parser is not None and not isinstance(self.mime_parser, MimeAdapter):
            raise ValueError("mime_parser must be a MimeAdapter instance")
        if self.provider is not None and not isinstance(self.provider, Provider):
            raise ValueError("provider must be a Provider instance")
        if self.fallback_provider is not None and not isinstance(self.fallback_provider, Provider):
            raise ValueError("fallback_provider must be a Provider instance")
        for provider in self.providers or []:
            if not isinstance(provider, Provider):
                raise ValueError(f"providers must contain Provider instances, got {type(provider).__name__}")
        if self.strip_characters is not None and not isinstance(self.strip_characters, str):
            raise ValueError("strip_characters must be a string")
        if self.output_dir is not None and not isinstance(self.output_dir, (str, os.PathLike)):
            raise ValueError("output_dir must be a path")

    def get_config_dict(self) -> Dict[str, Any]:
        """Get all configuration values as a dictionary"""
        return {
            'mime_parser': self.mime_parser,
            'debug': self.debug,
            'output_dir': self.output_dir,
            'provider': self.provider,
            'strip_characters': self.strip_characters,
            'cleanse_map': {field.value: transform for field, transform in self.cleanse_map.items()},
            'providers': self.providers,
            'fallback_provider': self.fallback_provider,
            'first_multipart_only': self.first_multipart_only,
        }
