"""JSON-document implementation of the StudentStore.

The whole student collection lives in one document, ``{"students": [...]}``.
Every save rewrites the document and drops a timestamped backup copy next to
it, keeping only the newest ``max_backups`` files.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from tutoring.domain import Student, StudentId
from tutoring.stores.codec import Document, student_from_document, student_to_document
from tutoring.stores.interfaces import StudentStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_BACKUPS = 10


class JsonStudentStore(StudentStore):
    """File-backed store holding every student in a single JSON document."""

    def __init__(
        self,
        path: str | Path,
        backups_dir: str | Path | None = None,
        max_backups: int = DEFAULT_MAX_BACKUPS,
    ) -> None:
        self._path = Path(path)
        self._backups_dir = Path(backups_dir) if backups_dir else None
        self._max_backups = max_backups

    @property
    def path(self) -> Path:
        return self._path

    def list_students(self) -> list[Student]:
        return [student_from_document(doc) for doc in self._read()]

    def load_student(self, student_id: StudentId) -> Student | None:
        key = str(student_id)
        for doc in self._read():
            if doc.get("id") == key:
                return student_from_document(doc)
        return None

    def save_student(self, student: Student) -> None:
        documents = self._read()
        replacement = student_to_document(student)
        for index, doc in enumerate(documents):
            if doc.get("id") == replacement["id"]:
                documents[index] = replacement
                break
        else:
            documents.append(replacement)
        self._write(documents)

    def delete_student(self, student_id: StudentId) -> bool:
        key = str(student_id)
        documents = self._read()
        remaining = [doc for doc in documents if doc.get("id") != key]
        if len(remaining) == len(documents):
            return False
        self._write(remaining)
        return True

    def student_exists(self, student_id: StudentId) -> bool:
        key = str(student_id)
        return any(doc.get("id") == key for doc in self._read())

    def _read(self) -> list[Document]:
        if not self._path.exists():
            return []
        with self._path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        students = data.get("students") if isinstance(data, dict) else None
        return students if isinstance(students, list) else []

    def _write(self, documents: list[Document]) -> None:
        payload = {"students": documents}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        if self._backups_dir is not None:
            self._write_backup(payload)

    def _write_backup(self, payload: dict) -> None:
        self._backups_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        backup = self._backups_dir / f"students-{stamp}.json"
        with backup.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)

        backups = sorted(
            self._backups_dir.glob("students-*.json"),
            key=lambda p: p.name,
            reverse=True,
        )
        for stale in backups[self._max_backups :]:
            try:
                stale.unlink()
            except OSError:
                logger.warning("Could not remove stale backup %s", stale)
