# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Crawl stage timer for latency logging and timeout diagnostics.

Created before the fetch deadline is armed so it survives cancellation
and can still say which stage was running when a crawl failed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

_STAGE_HINTS = {
    "validate": "URL validation should be instant; check the input.",
    "fetch": "Target site is slow or unreachable.",
    "parse": "Document is very large or malformed.",
    "classify": "Body subtree is very large.",
}


@dataclass(slots=True)
class StageRecord:
    name: str
    start_ns: int
    end_ns: int = 0


class PipelineTimer:
    """Track crawl stage transitions."""

    __slots__ = ("_stages", "_current", "_start_ns")

    def __init__(self) -> None:
        self._stages: list[StageRecord] = []
        self._current: StageRecord | None = None
        self._start_ns: int = time.monotonic_ns()

    def stage(self, name: str) -> None:
        """End previous stage + start new stage."""
        now = time.monotonic_ns()
        if self._current is not None:
            self._current.end_ns = now
            self._stages.append(self._current)
        self._current = StageRecord(name=name, start_ns=now)

    def finalize(self) -> None:
        if self._current is not None:
            self._current.end_ns = time.monotonic_ns()
            self._stages.append(self._current)
            self._current = None

    @property
    def current_stage(self) -> str | None:
        return self._current.name if self._current else None

    @property
    def total_ms(self) -> float:
        return round((time.monotonic_ns() - self._start_ns) / 1e6, 1)

    def elapsed_per_stage(self) -> dict[str, float]:
        """{stage_name: elapsed_ms} for finished stages plus the running one."""
        now = time.monotonic_ns()
        result: dict[str, float] = {}
        for s in self._stages:
            result[s.name] = round((s.end_ns - s.start_ns) / 1e6, 1)
        if self._current is not None:
            result[self._current.name] = round((now - self._current.start_ns) / 1e6, 1)
        return result

    def failure_report(self) -> dict:
        """Structured diagnostic for a crawl that did not complete."""
        current = self.current_stage or "unknown"
        return {
            "failed_at": current,
            "stages": self.elapsed_per_stage(),
            "total_ms": self.total_ms,
            "hint": _STAGE_HINTS.get(current, f"Failed during '{current}' stage."),
        }
