"""
Paste submission and retrieval flow.

Coordinates id generation, id validation and the paste store, and reports
every outcome as a result value for the HTTP layer to translate.
"""
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from rbin.ids import IdGenerator, IdValidator
from rbin.models import Outcome, ReadResult, WriteResult
from rbin.storage import PasteStore

logger = logging.getLogger(__name__)


class PasteService:
    """High-level paste operations used by the routes."""

    def __init__(
        self,
        store: PasteStore,
        generator: IdGenerator,
        validator: IdValidator,
        write_attempts: int = 5,
    ):
        self.store = store
        self.generator = generator
        self.validator = validator
        self.write_attempts = write_attempts

    async def create_paste(self, content: Optional[bytes]) -> WriteResult:
        """
        Store a new paste under a freshly generated id.

        A generated id that is already taken is discarded and a new one is
        drawn, up to write_attempts times.

        Args:
            content: Submitted paste bytes, or None if the form field was absent

        Returns:
            WriteResult; on success paste_id holds the new id
        """
        if content is None:
            logger.warning("Missing paste field in submission")
            return WriteResult(outcome=Outcome.MISSING_FIELD)
        if not content:
            logger.warning("Received empty paste field")
            return WriteResult(outcome=Outcome.EMPTY_CONTENT)

        for attempt in range(1, self.write_attempts + 1):
            paste_id = self.generator.generate()
            logger.debug(f"Generated ID: {paste_id} (attempt {attempt})")
            result = await run_in_threadpool(self.store.write, paste_id, content)
            if result.outcome is not Outcome.ALREADY_EXISTS:
                return result

        logger.error(f"No free paste id after {self.write_attempts} attempts")
        return WriteResult(
            outcome=Outcome.IO_FAILURE,
            error=f"no free paste id after {self.write_attempts} attempts",
        )

    async def get_paste(self, paste_id: str) -> ReadResult:
        """Validate a client-supplied id, then fetch its paste."""
        if not self.validator.validate(paste_id):
            logger.warning(f"Invalid ID format received: {paste_id!r}")
            return ReadResult(outcome=Outcome.INVALID_ID)
        return await run_in_threadpool(self.store.read, paste_id)

    def is_healthy(self) -> bool:
        return self.store.is_writable()
