"""Temporary on-disk holder for one uploaded audio payload."""

import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class UploadArtifact:
    """Raw uploaded audio bytes buffered to a uniquely named temp file.

    Owned by exactly one request. ``cleanup()`` removes the file at most
    once; failures to delete are logged and swallowed so they never replace
    the response already being built.
    """

    def __init__(self, mime_type: str, filename: str | None, upload_dir: Path | None = None) -> None:
        self.mime_type = mime_type
        self.filename = filename
        self.size = 0
        suffix = Path(filename).suffix if filename else ""
        if upload_dir is not None:
            upload_dir.mkdir(parents=True, exist_ok=True)
        self._file = tempfile.NamedTemporaryFile(
            prefix="upload-", suffix=suffix, dir=upload_dir, delete=False
        )
        self.path = Path(self._file.name)
        self._removed = False

    def write(self, data: bytes) -> None:
        self._file.write(data)
        self.size += len(data)

    def seal(self) -> None:
        """Flush and close the write handle; the file is complete."""
        if not self._file.closed:
            self._file.close()

    def cleanup(self) -> None:
        if self._removed:
            return
        self._removed = True
        self.seal()
        try:
            self.path.unlink()
        except OSError as exc:
            logger.warning("Failed to delete upload artifact %s: %s", self.path, exc)
        else:
            logger.debug("Deleted upload artifact %s", self.path)

    def __repr__(self) -> str:
        return (
            f"UploadArtifact(path={str(self.path)!r}, mime_type={self.mime_type!r}, "
            f"filename={self.filename!r}, size={self.size})"
        )
