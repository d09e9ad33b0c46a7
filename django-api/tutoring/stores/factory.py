"""Build the configured StudentStore from Django settings."""

from pathlib import Path

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from tutoring.stores.django_store import DjangoStudentStore
from tutoring.stores.interfaces import StudentStore
from tutoring.stores.json_store import JsonStudentStore

STORE_FILE_NAME = "students.json"
BACKUPS_DIR_NAME = "backups"


def build_student_store() -> StudentStore:
    """Return the store selected by ``TUTORING_STORE_BACKEND``."""
    backend = getattr(settings, "TUTORING_STORE_BACKEND", "django")
    if backend == "django":
        return DjangoStudentStore()
    if backend == "json":
        data_dir = Path(settings.TUTORING_DATA_DIR)
        return JsonStudentStore(
            data_dir / STORE_FILE_NAME,
            backups_dir=data_dir / BACKUPS_DIR_NAME,
            max_backups=getattr(settings, "TUTORING_MAX_BACKUPS", 10),
        )
    raise ImproperlyConfigured(f"Unknown TUTORING_STORE_BACKEND: {backend!r}")
