"""
Test suite for structured logging helpers.

System role: Verification of log field rendering
"""

import logging
import uuid
from decimal import Decimal

from i18n_backend.boundary.db.models import JobStatus
from i18n_backend.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)


class TestSafeLogValue:
    """Test suite for safe_log_value."""

    def test_enums_render_by_value(self) -> None:
        assert safe_log_value(JobStatus.RUNNING) == "running"

    def test_scalars(self) -> None:
        job_id = uuid.uuid4()

        assert safe_log_value(job_id) == str(job_id)
        assert safe_log_value(Decimal("0.0030")) == "0.0030"
        assert safe_log_value(None) == "None"

    def test_collections_are_summarized(self) -> None:
        """Test key id lists are reduced to a count."""
        key_ids = [uuid.uuid4() for _ in range(2000)]

        assert safe_log_value(key_ids) == "list(2000 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_long_strings_are_truncated(self) -> None:
        rendered = safe_log_value("x" * 30, max_length=10)

        assert rendered.startswith("x" * 10 + "...")
        assert "30 total" in rendered


class TestLogWithContext:
    """Test suite for the context logging helpers."""

    def test_context_lands_in_record(self, caplog) -> None:
        # Arrange
        logger = logging.getLogger("i18n_backend.tests.log_utils")
        job_id = uuid.uuid4()

        # Act
        with caplog.at_level(logging.INFO, logger=logger.name):
            log_with_context(logger, logging.INFO, "Job started", job_id=job_id, status=JobStatus.RUNNING)

        # Assert
        record = caplog.records[-1]
        assert record.job_id == str(job_id)
        assert record.status == "running"

    def test_disabled_level_emits_nothing(self, caplog) -> None:
        logger = logging.getLogger("i18n_backend.tests.log_utils")

        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_with_context(logger, logging.DEBUG, "Item picked", item_id="1")

        assert caplog.records == []

    def test_exception_fields(self, caplog) -> None:
        logger = logging.getLogger("i18n_backend.tests.log_utils")
        error = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger=logger.name):
            log_exception_with_context(logger, "Job crashed", error, job_id="j1")

        record = caplog.records[-1]
        assert record.error_type == "RuntimeError"
        assert record.error_msg == "boom"
        assert record.exc_info[1] is error
