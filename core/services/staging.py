# =============================================================================
# core/services/staging.py - Staged Upload Files
# =============================================================================
# A StagedFile is an incoming image written to the local upload directory.
# It must be removed once its bytes have been pushed to the media host, and
# on every failure path; discard() is idempotent so both the workflows and
# the request teardown may call it.
# =============================================================================

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class StagedFile:
    """An uploaded image waiting on local disk."""

    path: str
    content_type: str
    size: int
    original_filename: str | None = None
    _discarded: bool = field(default=False, repr=False)

    @property
    def extension(self) -> str:
        """File extension derived from the MIME subtype (image/png -> png)."""
        return self.content_type.split("/", 1)[-1]

    @property
    def discarded(self) -> bool:
        return self._discarded

    def discard(self) -> None:
        """Remove the local file; safe to call more than once."""
        if self._discarded:
            return
        try:
            os.remove(self.path)
            logger.debug(f"Removed staged file: {self.path}")
        except FileNotFoundError:
            pass
        self._discarded = True
