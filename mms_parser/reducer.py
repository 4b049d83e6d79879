# ============================================================================
# mms_parser/reducer.py - MIME part tree to CanonicalMessage
# ============================================================================

import logging
from typing import List, Optional

from .errors import AdapterFailure, StructuralFailure
from .mime_adapter import MimePart
from .models import Attachment, CanonicalMessage


class MessageReducer:
    """Walks a MIME part tree and flattens it into a CanonicalMessage.

    Headers are taken from the outermost part. ``text/plain`` children are
    concatenated into the body text in tree order, ``multipart/*`` children are
    reduced after their level has been classified, and every other child
    becomes an attachment.

    With ``first_multipart_only`` set only the first deferred multipart of a
    level is reduced, and any sibling multiparts after it are ignored.
    """

    def __init__(self, logger: logging.Logger, trace_logger: Optional[logging.Logger] = None,
                 first_multipart_only: bool = False):
        self.logger = logger
        self.trace_logger = trace_logger
        self.first_multipart_only = first_multipart_only

    def reduce(self, tree: Optional[MimePart]) -> CanonicalMessage:
        """Reduce ``tree`` into a new message. Raises StructuralFailure."""
        message = CanonicalMessage()
        try:
            self._recurse(tree, message, depth=0)
        except StructuralFailure:
            message.release()
            raise
        return message

    def _trace(self, text: str) -> None:
        if self.trace_logger is not None:
            self.trace_logger.debug(text)

    def _recurse(self, part: Optional[MimePart], message: CanonicalMessage, depth: int) -> None:
        if part is None:
            raise StructuralFailure("No mime message supplied")

        self._trace(f"Parsing MIME message at depth {depth}")

        # Nested multiparts must not overwrite the outer headers
        if not message.has_headers():
            message.set_headers(
                part.get_header("From"),
                part.get_header("To"),
                part.get_header("Subject"),
                part.get_header("Date"),
            )
            self._trace("Parsed headers")

        if not part.parts:
            self._trace("No parts to MIME mail - grabbing body text")
            message.body_text = self._consume_text(part)
            return

        multiparts: List[MimePart] = []
        self._trace("Recursing through message parts")
        for child in part.parts:
            content_type = child.content_type
            self._trace(f"Message contains {content_type}")

            if content_type == "text/plain":
                message.append_body_text(self._consume_text(child))
            elif content_type.startswith("multipart/"):
                self._trace("Adding multipart to stack for later processing")
                multiparts.append(child)
            else:
                self._trace("Adding attachment to stack")
                message.add_attachment(Attachment(content_type, child.filename, child.body, child.charset))
                # The attachment now owns the body storage
                child.body = None

        if self.first_multipart_only and len(multiparts) > 1:
            self.logger.debug(f"Ignoring {len(multiparts) - 1} sibling multipart(s) at depth {depth}")
            multiparts = multiparts[:1]

        self._trace("Preparing to loop through multipart stack")
        for multi in multiparts:
            self._recurse(multi, message, depth + 1)

    def _consume_text(self, part: MimePart) -> str:
        """Decode a part's body and purge its storage."""
        try:
            text = part.body_text()
        except AdapterFailure as e:
            raise StructuralFailure(f"Could not decode {part.content_type} part: {e}") from e
        part.body.purge()
        return text
