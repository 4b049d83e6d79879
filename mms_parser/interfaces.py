# ============================================================================
# mms_parser/interfaces.py
# ============================================================================

import io
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, BinaryIO, Union

if TYPE_CHECKING:
    from .mime_adapter import MimePart


class MimeAdapter(ABC):
    """Interface for the MIME decoding layer."""

    output_dir = None

    @abstractmethod
    def parse(self, stream: BinaryIO) -> "MimePart":
        """Decode a readable stream into a MIME part tree. Raises AdapterFailure."""
        pass

    def parse_bytes(self, data: Union[str, bytes]) -> "MimePart":
        """Decode an in-memory buffer into a MIME part tree."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self.parse(io.BytesIO(data))
