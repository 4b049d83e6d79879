# ============================================================================
# mms_parser/providers/uk_vodafone.py
# ============================================================================

import logging
from typing import Optional

from ..converters import HtmlToTextConverter
from ..errors import ProviderFailure
from ..mime_adapter import decode_text
from ..models import CanonicalMessage, ParsedMessage
from .base import AddressPatternProvider


class UKVodafoneProvider(AddressPatternProvider):
    """Picture messages relayed through Vodafone UK's MMS gateway.

    The gateway sends the message text as an HTML page alongside a SMIL
    presentation part. The HTML is converted to plain text when the message
    carries no ``text/plain`` body, and the SMIL part is dropped.
    """

    name = "uk_vodafone"
    pattern = r"vodafone\.co\.uk$"

    def __init__(self, logger: Optional[logging.Logger] = None, html_converter: Optional[HtmlToTextConverter] = None):
        super().__init__(logger)
        self.html_converter = html_converter or HtmlToTextConverter(self.logger)

    def parse(self, message: CanonicalMessage) -> Optional[ParsedMessage]:
        parsed = self.copy_message(message)

        html_part = None
        if not (parsed.body_text or "").strip():
            html_part = next((a for a in parsed.attachments if a.content_type == "text/html"), None)

        if html_part is not None:
            try:
                parsed.body_text = self.html_converter.convert(decode_text(html_part.payload, html_part.charset))
            except Exception as e:
                parsed.release()
                raise ProviderFailure(f"Could not convert Vodafone HTML body: {e}", self.name) from e
            self.logger.debug("Took message text from Vodafone HTML part")

        kept = []
        for attachment in parsed.attachments:
            if attachment is html_part or attachment.content_type == "application/smil":
                attachment.release()
            else:
                kept.append(attachment)
        parsed.attachments = kept
        return parsed
