"""
Filesystem storage layer for pastes.
One file per paste, named <id>.txt, inside the configured paste directory.
"""
import logging
import os
import tempfile
from pathlib import Path

from rbin.ids import IdValidator
from rbin.models import Outcome, ReadResult, WriteResult

logger = logging.getLogger(__name__)

PASTE_SUFFIX = ".txt"
TEMP_SUFFIX = ".tmp"


class PasteStore:
    """Maps a paste id to a single immutable blob on disk."""

    def __init__(self, root: Path, validator: IdValidator):
        """
        Args:
            root: Directory holding the paste files
            validator: Id check applied before any path is built
        """
        self.root = Path(root)
        self.validator = validator

    def ensure_root(self) -> None:
        """Create the paste directory if it does not exist yet."""
        self.root.mkdir(parents=True, exist_ok=True)

    def is_writable(self) -> bool:
        """Check that the paste directory exists and accepts new files."""
        return self.root.is_dir() and os.access(self.root, os.W_OK | os.X_OK)

    def write(self, paste_id: str, content: bytes) -> WriteResult:
        """
        Persist content under paste_id, never replacing an existing paste.

        The bytes go to a hidden temporary file first and are hard-linked
        into place once flushed, so readers never observe a partial paste
        and the link fails if another writer already claimed the id.

        Args:
            paste_id: Id to store the paste under
            content: Raw paste bytes

        Returns:
            WriteResult with outcome OK, ALREADY_EXISTS, INVALID_ID or IO_FAILURE
        """
        if not self.validator.validate(paste_id):
            logger.warning(f"Refusing to write malformed paste id {paste_id!r}")
            return WriteResult(outcome=Outcome.INVALID_ID, paste_id=paste_id)

        path = self._path(paste_id)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.root, prefix=f".{paste_id}.", suffix=TEMP_SUFFIX
            )
        except OSError as e:
            logger.error(f"Failed to create temporary file in {self.root}: {e}")
            return WriteResult(outcome=Outcome.IO_FAILURE, paste_id=paste_id, error=str(e))

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.link(tmp_name, path)
        except FileExistsError:
            logger.warning(f"Paste {paste_id} already exists, not overwriting")
            return WriteResult(outcome=Outcome.ALREADY_EXISTS, paste_id=paste_id)
        except OSError as e:
            logger.error(f"Failed to write paste file {path}: {e}")
            return WriteResult(outcome=Outcome.IO_FAILURE, paste_id=paste_id, error=str(e))
        finally:
            self._discard(tmp_name)

        logger.info(f"Paste {paste_id} saved to {path}")
        return WriteResult(outcome=Outcome.OK, paste_id=paste_id)

    def read(self, paste_id: str) -> ReadResult:
        """
        Fetch the bytes stored under paste_id.

        Returns:
            ReadResult with outcome OK, NOT_FOUND, INVALID_ID or IO_FAILURE
        """
        if not self.validator.validate(paste_id):
            logger.warning(f"Refusing to read malformed paste id {paste_id!r}")
            return ReadResult(outcome=Outcome.INVALID_ID)

        path = self._path(paste_id)
        logger.debug(f"Attempting to read file: {path}")
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            logger.warning(f"Paste {paste_id} not found, path: {path}")
            return ReadResult(outcome=Outcome.NOT_FOUND)
        except OSError as e:
            logger.error(f"Error reading paste file {path}: {e}")
            return ReadResult(outcome=Outcome.IO_FAILURE, error=str(e))

        return ReadResult(outcome=Outcome.OK, content=content)

    def _path(self, paste_id: str) -> Path:
        return self.root / f"{paste_id}{PASTE_SUFFIX}"

    def _discard(self, tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {tmp_name}: {e}")
