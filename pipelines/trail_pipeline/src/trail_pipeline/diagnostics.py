"""Collector for soft, per-item failures reported during batch stages."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterator

from phrasetrail_core.errors.types import ErrorType, StageDiagnostic

logger = logging.getLogger(__name__)


class Diagnostics:
    """
    Thread-safe sink for StageDiagnostic records.

    Every record is logged at WARNING as it arrives; callers inspect the
    collected records once the batch is over.
    """

    def __init__(self) -> None:
        self._records: list[StageDiagnostic] = []
        self._lock = threading.Lock()

    def report(
        self,
        error_type: ErrorType,
        *,
        stage: str,
        message: str,
        item: str | None = None,
        **details: Any,
    ) -> StageDiagnostic:
        record = StageDiagnostic(
            error_type=error_type,
            stage=stage,
            item=item,
            message=message,
            details=details,
        )
        with self._lock:
            self._records.append(record)
        logger.warning(record.to_log_message())
        return record

    @property
    def records(self) -> list[StageDiagnostic]:
        with self._lock:
            return list(self._records)

    def of_type(self, error_type: ErrorType) -> list[StageDiagnostic]:
        return [r for r in self.records if r.error_type is error_type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[StageDiagnostic]:
        return iter(self.records)
