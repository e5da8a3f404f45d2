"""
Shared test setup.

Points the feedback store at a throwaway SQLite file before any
reasonbridge module is imported (the store singleton opens its
database at import time).
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="reasonbridge-tests-")
os.environ.setdefault("REASONBRIDGE_DB_PATH", os.path.join(_TMP_DIR, "feedback.db"))
os.environ.setdefault("REASONBRIDGE_LOG_FORMAT", "text")

import pytest  # noqa: E402


@pytest.fixture
def store(tmp_path):
    """A fresh, isolated FeedbackStore per test."""
    from reasonbridge.store import FeedbackStore
    return FeedbackStore(db_path=str(tmp_path / "feedback.db"))


@pytest.fixture
def service(store):
    from reasonbridge.service import FeedbackService
    return FeedbackService(store=store)
