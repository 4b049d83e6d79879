# ============================================================================
# mms_parser/parser.py - Main MMS parser
# ============================================================================

from __future__ import annotations

import logging
import os
import sys
from typing import BinaryIO, Callable, Iterable, Optional, Union

from .cleanser import Cleanser, normalize_cleanse_map
from .config import ParserConfig
from .errors import AdapterFailure, ErrorSink, MmsParserError, ValidationFailure
from .interfaces import MimeAdapter
from .mime_adapter import EmailMimeAdapter, MimePart
from .models import CanonicalMessage, ParsedMessage
from .providers import ProviderRegistry, default_providers
from .providers.base import Provider
from .reducer import MessageReducer

Source = Union[str, bytes, os.PathLike, BinaryIO]

TRACE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class _StderrHandler(logging.StreamHandler):
    """StreamHandler writing to whatever sys.stderr is when a record is emitted."""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def get_trace_logger(logger: logging.Logger) -> logging.Logger:
    """Child of ``logger`` that writes debug trace lines to stderr."""
    trace_logger = logging.getLogger(f"{logger.name}.trace")
    if not any(isinstance(h, _StderrHandler) for h in trace_logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(TRACE_FORMAT))
        trace_logger.addHandler(handler)
        trace_logger.setLevel(logging.DEBUG)
        # Trace lines only go to the trace channel
        trace_logger.propagate = False
    return trace_logger


class MmsParser:
    """Parses MMS (picture) e-mails in two stages.

    ``parse*`` reduces the raw e-mail to a carrier-agnostic CanonicalMessage.
    ``provider_parse`` then hands that message to the provider for the
    carrier it was sent through and returns a ParsedMessage.

    No failure escapes as an exception: the methods return ``None`` and push a
    diagnostic onto the error stack (see ``errors`` and ``last_error``). The
    error stack, the last parsed message and the options are instance state,
    so use one parser per parse lifecycle when sharing work across threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None, logger: Optional[logging.Logger] = None, **options):
        if config is None:
            config = ParserConfig(**options)
        elif options:
            raise ValueError("Pass options either as a ParserConfig or as keywords, not both")

        self.logger = logger or logging.getLogger(__name__)
        self.error_sink = ErrorSink(self.logger)
        self.message: Optional[CanonicalMessage] = None

        self.mime_parser: Optional[MimeAdapter] = config.mime_parser
        self.debug = config.debug
        self.output_dir = config.output_dir
        self.provider: Optional[Provider] = config.provider
        self.strip_characters = config.strip_characters
        self.cleanse_map = config.cleanse_map
        self.first_multipart_only = config.first_multipart_only

        providers = config.providers if config.providers is not None else default_providers(self.logger)
        if config.fallback_provider is not None:
            self.registry = ProviderRegistry(self.logger, providers, fallback=config.fallback_provider)
        else:
            self.registry = ProviderRegistry(self.logger, providers)

    # ------------------------------------------------------------------
    @property
    def cleanse_map(self):
        return self._cleanse_map

    @cleanse_map.setter
    def cleanse_map(self, value) -> None:
        self._cleanse_map = normalize_cleanse_map(value)

    @property
    def errors(self):
        """Snapshot of the error stack, oldest first."""
        return self.error_sink.all()

    def last_error(self) -> Optional[str]:
        """Remove and return the most recent error."""
        return self.error_sink.last()

    def clear_errors(self) -> None:
        self.error_sink.clear()

    # ------------------------------------------------------------------
    def parse(self, stream: BinaryIO) -> Optional[CanonicalMessage]:
        """Parse from an open readable stream."""
        self._trace("Starting to parse")
        return self._parse(lambda adapter: adapter.parse(stream))

    def parse_bytes(self, data: Union[str, bytes, Iterable[Union[str, bytes]]]) -> Optional[CanonicalMessage]:
        """Parse an in-memory message, given whole or as an iterable of lines."""
        self._trace("Starting to parse string")

        def read(adapter: MimeAdapter) -> MimePart:
            if isinstance(data, (str, bytes, bytearray)):
                return adapter.parse_bytes(data)
            lines = (line.encode("utf-8") if isinstance(line, str) else line for line in data)
            return adapter.parse_bytes(b"".join(lines))

        return self._parse(read)

    def parse_file(self, path: Union[str, os.PathLike]) -> Optional[CanonicalMessage]:
        """Parse the message stored in a file."""
        self._trace(f"Starting to parse file {path}")

        def read(adapter: MimeAdapter) -> MimePart:
            try:
                handle = open(path, "rb")
            except OSError as e:
                raise AdapterFailure(f"Could not open file - {path}: {e.strerror}") from e
            with handle:
                return adapter.parse(handle)

        return self._parse(read)

    def parse_split(self, header_source: Source, body_source: Source) -> Optional[CanonicalMessage]:
        """Parse a message delivered as separate header and body sources."""
        self._trace("Starting to parse split header and body")

        def read(adapter: MimeAdapter) -> MimePart:
            head = self._read_source(header_source)
            body = self._read_source(body_source)
            if not head.endswith((b"\n\n", b"\r\n\r\n")):
                head += b"\r\n" if head.endswith(b"\r\n") else (b"\n" if head.endswith(b"\n") else b"\n\n")
            return adapter.parse_bytes(head + body)

        return self._parse(read)

    def provider_parse(self, message: Optional[CanonicalMessage] = None) -> Optional[ParsedMessage]:
        """Run the carrier provider over ``message`` or the last parsed message.

        The configured ``provider`` is used if set; otherwise the provider is
        detected from the message.
        """
        if message is not None:
            self.message = message

        self.registry.trace_logger = self._trace_logger()
        try:
            parsed = self.registry.dispatch(self.message, override=self.provider)
            self._finish(parsed)
        except MmsParserError as e:
            self._add_error(e)
            self._trace("Could not parse")
            return None

        self._trace("Returning parsed message")
        return parsed

    # ------------------------------------------------------------------
    def _parse(self, read: Callable[[MimeAdapter], MimePart]) -> Optional[CanonicalMessage]:
        adapter = self._prepare_mime_parser()
        self._trace("Created MIME parser")

        tree = None
        try:
            tree = read(adapter)
        except AdapterFailure as e:
            self._add_error(e)
        except Exception as e:
            self._add_error(AdapterFailure(f"{type(adapter).__name__} failed: {e}"))

        reducer = MessageReducer(self.logger, trace_logger=self._trace_logger(),
                                  first_multipart_only=self.first_multipart_only)
        try:
            message = reducer.reduce(tree)
            self._finish(message)
        except MmsParserError as e:
            self._add_error(e)
            self._trace("Failed to parse message")
            return None

        self._trace("Parsed message is valid")
        self.message = message
        return message

    def _finish(self, message) -> None:
        """Cleanse a freshly built message and check it is still valid."""
        try:
            self._cleanser().cleanse(message)
        except ValidationFailure:
            message.release()
            raise
        if not message.is_valid():
            message.release()
            raise ValidationFailure(f"{type(message).__name__} is not valid: no sender")

    def _prepare_mime_parser(self) -> MimeAdapter:
        if self.mime_parser is None:
            self.mime_parser = EmailMimeAdapter(self.logger)
        if self.output_dir is not None:
            self.mime_parser.output_dir = self.output_dir
        return self.mime_parser

    def _cleanser(self) -> Cleanser:
        return Cleanser(self.logger, self.strip_characters, self.cleanse_map)

    def _read_source(self, source: Source) -> bytes:
        if hasattr(source, "read"):
            data = source.read()
        else:
            try:
                with open(source, "rb") as handle:
                    data = handle.read()
            except OSError as e:
                raise AdapterFailure(f"Could not open file - {source}: {e.strerror}") from e
        if isinstance(data, str):
            data = data.encode("utf-8")
        return data

    def _add_error(self, error) -> None:
        self.error_sink.push(error)

    def _trace_logger(self) -> Optional[logging.Logger]:
        return get_trace_logger(self.logger) if self.debug else None

    def _trace(self, text: str) -> None:
        trace_logger = self._trace_logger()
        if trace_logger is not None:
            trace_logger.debug(text)
