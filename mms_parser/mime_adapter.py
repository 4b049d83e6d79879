# ============================================================================
# mms_parser/mime_adapter.py - MIME decoding on top of the email package
# ============================================================================
"""
MIME adapter built on the standard library ``email`` parser.

The adapter turns raw RFC822 input into a tree of :class:`MimePart` nodes.
Leaf bodies are held in :class:`MimeBody` objects which live either in memory
or, when an output directory is configured, in a spool file on disk.
"""

import email.parser
import email.policy
import logging
import os
import tempfile
import weakref
from email.message import Message
from typing import BinaryIO, List, Optional, Union

import chardet

from .errors import AdapterFailure
from .interfaces import MimeAdapter


def _remove_spool_file(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


class MimeBody:
    """Decoded body of a leaf MIME part, in core or spooled to a file."""

    def __init__(self, data: bytes = b"", output_dir: Optional[str] = None):
        self._data: Optional[bytes] = None
        self.path: Optional[str] = None
        self._finalizer = None
        if output_dir:
            with tempfile.NamedTemporaryFile(dir=output_dir, prefix="mms-", suffix=".part", delete=False) as tmp:
                tmp.write(data)
                self.path = tmp.name
            self._finalizer = weakref.finalize(self, _remove_spool_file, self.path)
        else:
            self._data = data

    @property
    def purged(self) -> bool:
        return self._data is None and self.path is None

    def as_bytes(self) -> bytes:
        if self.path is not None:
            with open(self.path, "rb") as handle:
                return handle.read()
        if self._data is None:
            raise AdapterFailure("Body has already been purged")
        return self._data

    def purge(self) -> None:
        """Release the storage backing this body."""
        if self._finalizer is not None:
            self._finalizer()
            self._finalizer = None
        self.path = None
        self._data = None

    def copy(self) -> "MimeBody":
        output_dir = os.path.dirname(self.path) if self.path else None
        return MimeBody(self.as_bytes(), output_dir)


class MimePart:
    """A node of the decoded MIME tree: headers plus a body or child parts."""

    def __init__(self, message: Message, parts: Optional[List["MimePart"]] = None,
                 body: Optional[MimeBody] = None):
        self.message = message
        self.parts: List[MimePart] = parts or []
        self.body = body

    @property
    def content_type(self) -> str:
        return self.message.get_content_type()

    @property
    def charset(self) -> Optional[str]:
        return self.message.get_content_charset()

    @property
    def filename(self) -> Optional[str]:
        return self.message.get_filename()

    def get_header(self, name: str) -> Optional[str]:
        value = self.message.get(name)
        if value is None:
            return None
        return str(value)

    def body_text(self) -> str:
        """Decode the body to text (see ``decode_text``)."""
        if self.body is None:
            raise AdapterFailure(f"No body available for {self.content_type} part")
        return decode_text(self.body.as_bytes(), self.charset)


def decode_text(data: bytes, charset: Optional[str] = None) -> str:
    """Declared charset, then strict UTF-8, then chardet detection, then UTF-8 with replacement."""
    if not data:
        return ""
    if charset:
        try:
            return data.decode(charset)
        except (LookupError, UnicodeDecodeError):
            pass
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    detected = chardet.detect(data)
    if detected and detected["encoding"] and detected["confidence"] > 0.7:
        try:
            return data.decode(detected["encoding"], errors="replace")
        except LookupError:
            pass
    return data.decode("utf-8", errors="replace")


class EmailMimeAdapter(MimeAdapter):
    """MimeAdapter backed by ``email.parser.BytesParser``."""

    def __init__(self, logger: logging.Logger, output_dir: Optional[str] = None):
        self.logger = logger
        self.output_dir = output_dir
        self.bytes_parser = email.parser.BytesParser(policy=email.policy.default)

    def parse(self, stream: BinaryIO) -> MimePart:
        data = stream.read()
        if isinstance(data, str):
            data = data.encode("utf-8", errors="surrogateescape")
        return self.parse_bytes(data)

    def parse_bytes(self, data: Union[str, bytes]) -> MimePart:
        if isinstance(data, str):
            data = data.encode("utf-8", errors="surrogateescape")
        if not data or not data.strip():
            raise AdapterFailure("No data supplied to MIME parser")
        if self.output_dir and not os.path.isdir(self.output_dir):
            raise AdapterFailure(f"Output directory does not exist - {self.output_dir}")
        try:
            message = self.bytes_parser.parsebytes(data)
        except Exception as e:
            raise AdapterFailure(f"Failed to parse MIME message: {e}") from e
        for defect in message.defects:
            self.logger.debug(f"MIME defect: {type(defect).__name__}")
        return self._build_part(message)

    def _build_part(self, message: Message) -> MimePart:
        if message.get_content_maintype() == "multipart":
            payload = message.get_payload()
            if not isinstance(payload, list):
                # Multipart with a broken boundary; treat the raw text as the body
                self.logger.debug("Multipart part without sub-parts, treating as leaf")
                return MimePart(message, body=self._store(self._raw_payload(message)))
            return MimePart(message, parts=[self._build_part(sub) for sub in payload])

        if message.get_content_type() == "message/rfc822":
            payload = message.get_payload()
            if isinstance(payload, list) and payload:
                data = payload[0].as_bytes()
            else:
                data = self._raw_payload(message)
            return MimePart(message, body=self._store(data))

        return MimePart(message, body=self._store(message.get_payload(decode=True) or b""))

    def _raw_payload(self, message: Message) -> bytes:
        payload = message.get_payload()
        if isinstance(payload, str):
            return payload.encode("utf-8", errors="surrogateescape")
        return b""

    def _store(self, data: bytes) -> MimeBody:
        try:
            return MimeBody(data, self.output_dir)
        except OSError as e:
            raise AdapterFailure(f"Could not store part body in {self.output_dir}: {e}") from e
