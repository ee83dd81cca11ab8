from pathlib import Path

import pytest

from resume_analyzer.services.errors import NotFound, StorageFailure
from resume_analyzer.services.storage import DocumentStore


class TestStore:
    def test_store_writes_bytes_and_metadata(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        doc = store.store(b"%PDF-1.4 data", "cv.pdf")

        assert doc.storage_path.read_bytes() == b"%PDF-1.4 data"
        assert doc.original_name == "cv.pdf"
        assert doc.size_bytes == len(b"%PDF-1.4 data")
        assert doc.storage_path.parent == tmp_path
        assert doc.storage_path.suffix == ".pdf"

    def test_creates_missing_root(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path / "nested" / "uploads")
        doc = store.store(b"x", "cv.pdf")
        assert doc.storage_path.exists()

    def test_same_name_same_instant_gets_distinct_artifacts(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        first = store.store(b"first", "resume.pdf")
        second = store.store(b"second", "resume.pdf")

        assert first.id != second.id
        assert first.storage_path != second.storage_path
        assert store.read(first) == b"first"
        assert store.read(second) == b"second"

    def test_original_name_does_not_leak_into_path(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        doc = store.store(b"x", "../../etc/passwd")
        assert doc.storage_path.parent == tmp_path
        assert "passwd" not in doc.storage_path.name

    def test_unwritable_root_raises_storage_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        store = DocumentStore(blocker / "uploads")
        with pytest.raises(StorageFailure):
            store.store(b"x", "cv.pdf")


class TestReadAndRelease:
    def test_release_removes_artifact(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        doc = store.store(b"x", "cv.pdf")
        store.release(doc)
        assert not store.exists(doc)

    def test_read_after_release_raises_not_found(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        doc = store.store(b"x", "cv.pdf")
        store.release(doc)
        with pytest.raises(NotFound):
            store.read(doc)

    def test_double_release_raises_not_found(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        doc = store.store(b"x", "cv.pdf")
        store.release(doc)
        with pytest.raises(NotFound):
            store.release(doc)


class TestStoredContext:
    def test_releases_on_success(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        with store.stored(b"x", "cv.pdf") as doc:
            assert store.exists(doc)
        assert not store.exists(doc)

    def test_releases_when_block_raises(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        with pytest.raises(RuntimeError):
            with store.stored(b"x", "cv.pdf") as doc:
                raise RuntimeError("boom")
        assert not store.exists(doc)

    def test_release_failure_is_logged_not_raised(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path)
        with store.stored(b"x", "cv.pdf") as doc:
            doc.storage_path.unlink()
        assert not store.exists(doc)
