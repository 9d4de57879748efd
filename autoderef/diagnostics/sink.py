"""Module implementing the collector all lint passes report their findings to."""
from __future__ import annotations

from threading import Lock
from typing import Iterator, List, Optional

from autoderef.diagnostics.diagnostic import Diagnostic
from autoderef.diagnostics.lints import Lint


class DiagnosticSink:
    """
    Append-only collection of findings.

    Tasks running in parallel share one sink, so appending is guarded by a lock.
    Findings of one task keep the order in which they were emitted.
    """

    def __init__(self):
        self._lock = Lock()
        self._diagnostics: List[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic):
        with self._lock:
            self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: List[Diagnostic]):
        """Append the findings of a task as one contiguous run."""
        with self._lock:
            self._diagnostics.extend(diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        with self._lock:
            snapshot = list(self._diagnostics)
        yield from snapshot

    def findings(self, lint: Optional[Lint] = None) -> List[Diagnostic]:
        """Return all findings, optionally only those of the given lint."""
        return [diagnostic for diagnostic in self if lint is None or diagnostic.lint is lint]

    def clear(self):
        with self._lock:
            self._diagnostics.clear()
