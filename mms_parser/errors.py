"""Failure taxonomy and error stack for the MMS parser."""

import logging
from typing import List, Optional


class MmsParserError(Exception):
    """Base class for failures raised inside the parser pipeline."""

    def diagnostic(self) -> str:
        """Render the failure the way it is stored on the error stack."""
        return f"{type(self).__name__}: {self}"


class AdapterFailure(MmsParserError):
    """The underlying MIME decode failed outright."""


class StructuralFailure(MmsParserError):
    """The part tree was absent or malformed during reduction."""


class ValidationFailure(MmsParserError):
    """A resulting message failed its validity check (empty sender)."""


class ProviderNotFound(MmsParserError):
    """No provider matched and no fallback provider is registered."""


class ProviderFailure(MmsParserError):
    """The selected provider could not produce a parsed message."""

    def __init__(self, message: str, provider_name: Optional[str] = None):
        super().__init__(message)
        self.provider_name = provider_name


class ErrorSink:
    """Ordered stack of diagnostic strings, most recent last.

    Errors accumulate for the lifetime of the owner and are only removed by
    ``last()`` or ``clear()``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._errors: List[str] = []

    def push(self, error) -> bool:
        """Push a diagnostic. Exceptions are rendered via ``diagnostic()``."""
        if error is None:
            return False
        if isinstance(error, MmsParserError):
            message = error.diagnostic()
        else:
            message = str(error)
        self._errors.append(message)
        self.logger.warning(message)
        return True

    def all(self) -> List[str]:
        return list(self._errors)

    def last(self) -> Optional[str]:
        """Remove and return the most recently pushed diagnostic."""
        if self._errors:
            return self._errors.pop()
        return None

    def clear(self) -> None:
        self._errors.clear()

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)
