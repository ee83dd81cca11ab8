import logging
import re
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Union

from resume_analyzer.models.analysis import UploadedDocument
from resume_analyzer.services.errors import NotFound, StorageFailure

logger = logging.getLogger("uvicorn.error")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _safe_suffix(original_name: str) -> str:
    suffix = Path(original_name).suffix
    return _UNSAFE_CHARS.sub("_", suffix)[:16]


class DocumentStore:
    """Ephemeral on-disk storage for uploaded resumes.

    Every stored artifact gets a random uuid4 name, so two uploads of the same
    file in the same instant never share a path.
    """

    def __init__(self, root: Union[str, Path]):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def store(self, file_bytes: bytes, original_name: str) -> UploadedDocument:
        artifact_id = uuid.uuid4().hex
        path = self._root / f"{artifact_id}{_safe_suffix(original_name)}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to reuse an existing path.
            with open(path, "xb") as fh:
                fh.write(file_bytes)
        except OSError as e:
            if path.exists():
                path.unlink()
            logger.exception("Failed to store upload %s", original_name)
            raise StorageFailure(f"Could not store upload '{original_name}': {e}") from e

        logger.info(f"Stored upload {original_name} as {path.name} ({len(file_bytes)} bytes)")
        return UploadedDocument(
            id=artifact_id,
            storage_path=path,
            original_name=original_name,
            size_bytes=len(file_bytes),
            created_at=datetime.now(timezone.utc),
        )

    def read(self, doc: UploadedDocument) -> bytes:
        try:
            return doc.storage_path.read_bytes()
        except FileNotFoundError as e:
            raise NotFound(f"Artifact {doc.id} not found") from e
        except OSError as e:
            raise StorageFailure(f"Could not read artifact {doc.id}: {e}") from e

    def release(self, doc: UploadedDocument) -> None:
        try:
            doc.storage_path.unlink()
        except FileNotFoundError as e:
            raise NotFound(f"Artifact {doc.id} already released") from e
        except OSError as e:
            raise StorageFailure(f"Could not remove artifact {doc.id}: {e}") from e
        logger.info(f"Released artifact {doc.id}")

    def exists(self, doc: UploadedDocument) -> bool:
        return doc.storage_path.exists()

    @contextmanager
    def stored(self, file_bytes: bytes, original_name: str) -> Iterator[UploadedDocument]:
        """Store an upload for the duration of a ``with`` block.

        Release errors are logged and never raised.
        """
        doc = self.store(file_bytes, original_name)
        try:
            yield doc
        finally:
            try:
                self.release(doc)
            except (NotFound, StorageFailure):
                logger.exception("Failed to delete artifact %s", doc.id)
