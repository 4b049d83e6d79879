# ============================================================================
# mms_parser/cleanser.py - Per-field text cleansing
# ============================================================================

import logging
import re
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Union

from .errors import ValidationFailure

Transform = Callable[[str], str]


class Field(str, Enum):
    """Message fields the cleanser operates on."""

    HEADER_FROM = "header_from"
    HEADER_TO = "header_to"
    HEADER_SUBJECT = "header_subject"
    HEADER_DATETIME = "header_datetime"
    BODY_TEXT = "body_text"


class RegexSubstitution:
    """Transform applying ``re.sub(pattern, replacement, value)``."""

    def __init__(self, pattern: Union[str, "re.Pattern"], replacement: str = "", count: int = 0, flags: int = 0):
        self.regex = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
        self.replacement = replacement
        self.count = count

    def __call__(self, value: str) -> str:
        return self.regex.sub(self.replacement, value, count=self.count)

    def __repr__(self) -> str:
        return f"RegexSubstitution({self.regex.pattern!r}, {self.replacement!r})"


def normalize_cleanse_map(cleanse_map: Optional[Mapping]) -> Dict[Field, Transform]:
    """Validate a cleanse map, keying it by :class:`Field`."""
    if not cleanse_map:
        return {}
    normalized: Dict[Field, Transform] = {}
    for key, transform in cleanse_map.items():
        try:
            field = Field(key)
        except ValueError:
            raise ValueError(f"Unknown cleanse_map field: {key!r}") from None
        if not callable(transform):
            raise ValueError(f"cleanse_map transform for {field.value} must be callable")
        normalized[field] = transform
    return normalized


class Cleanser:
    """Strips configured characters from every field, then runs mapped transforms."""

    def __init__(self, logger: logging.Logger, strip_characters: Optional[str] = None,
                 cleanse_map: Optional[Mapping] = None):
        self.logger = logger
        self.strip_characters = strip_characters
        self.cleanse_map = normalize_cleanse_map(cleanse_map)

    @property
    def active(self) -> bool:
        return bool(self.strip_characters) or bool(self.cleanse_map)

    def cleanse(self, message):
        """Cleanse ``message`` in place and return it."""
        if not self.active:
            return message
        table = str.maketrans("", "", self.strip_characters) if self.strip_characters else None
        for field in Field:
            value = getattr(message, field.value, None)
            if value is None:
                continue
            if table is not None:
                value = value.translate(table)
            transform = self.cleanse_map.get(field)
            if transform is not None:
                try:
                    value = transform(value)
                except Exception as e:
                    raise ValidationFailure(f"cleanse_map transform for {field.value} failed: {e}") from e
            setattr(message, field.value, value)
        self.logger.debug(f"Cleansed {type(message).__name__}")
        return message
