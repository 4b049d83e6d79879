# ============================================================================
# mms_parser/converters.py
# ============================================================================

import logging

import html2text


class HtmlToTextConverter:
    """Converts the HTML bodies some carriers send into plain text."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def convert(self, html_content: str) -> str:
        self.logger.debug(f"Converting HTML to text, input length: {len(html_content) if html_content else 0}")
        if not html_content:
            return ""

        h = html2text.HTML2Text()
        h.ignore_links = True
        h.ignore_images = True
        h.ignore_tables = True
        h.body_width = 0
        h.unicode_snob = True
        return h.handle(html_content).strip()
