from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .mime_adapter import MimeBody


@dataclass
class Attachment:
    content_type: str
    filename: Optional[str] = None
    body: Optional[MimeBody] = None
    charset: Optional[str] = None

    @property
    def payload(self) -> bytes:
        if self.body is None or self.body.purged:
            return b""
        return self.body.as_bytes()

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def path(self) -> Optional[str]:
        return self.body.path if self.body is not None else None

    def clone(self) -> Attachment:
        body = self.body.copy() if self.body is not None and not self.body.purged else None
        return Attachment(self.content_type, self.filename, body, self.charset)

    def release(self) -> None:
        if self.body is not None:
            self.body.purge()


@dataclass
class _MessageBase:
    header_from: Optional[str] = None
    header_to: Optional[str] = None
    header_subject: Optional[str] = None
    header_datetime: Optional[str] = None
    body_text: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)

    def is_valid(self) -> bool:
        return bool(self.header_from)

    def add_attachment(self, attachment: Attachment) -> None:
        self.attachments.append(attachment)

    def retrieve_attachments(self, pattern: str) -> List[Attachment]:
        """Attachments whose content type matches ``pattern`` (a regular expression)."""
        regex = re.compile(pattern, re.IGNORECASE)
        return [a for a in self.attachments if regex.search(a.content_type)]

    def release(self) -> None:
        """Release storage held by every attachment."""
        for attachment in self.attachments:
            attachment.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


@dataclass
class CanonicalMessage(_MessageBase):
    """Carrier-agnostic message produced by the reducer."""

    def has_headers(self) -> bool:
        return self.header_from is not None

    def set_headers(self, header_from, header_to, header_subject, header_datetime) -> None:
        self.header_from = header_from
        self.header_to = header_to
        self.header_subject = header_subject
        self.header_datetime = header_datetime

    def append_body_text(self, text: str) -> None:
        if self.body_text is None:
            self.body_text = text
        else:
            self.body_text += text


@dataclass
class ParsedMessage(_MessageBase):
    """Carrier-normalized message produced by a provider."""

    phone_number: Optional[str] = None

    @property
    def images(self) -> List[Attachment]:
        return self.retrieve_attachments(r"^image/")

    @property
    def videos(self) -> List[Attachment]:
        return self.retrieve_attachments(r"^video/")
