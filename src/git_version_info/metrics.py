"""Prometheus metrics helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from prometheus_client import CollectorRegistry, Counter, Histogram


@dataclass
class ResolveMetrics:
    """Encapsulate Prometheus metrics with deterministic registry usage."""

    registry: CollectorRegistry = field(default_factory=CollectorRegistry)

    def __post_init__(self) -> None:
        self.resolve_attempts_total = Counter(
            "version_resolve_attempts_total",
            "Total version resolution attempts.",
            registry=self.registry,
        )
        self.tags_ignored_total = Counter(
            "version_tags_ignored_total",
            "Tags skipped because they are not SemVer 2.0 versions.",
            registry=self.registry,
        )
        self.candidates_walked_total = Counter(
            "version_candidates_walked_total",
            "Release branch commits examined while searching for a tag.",
            registry=self.registry,
        )
        self.resolve_exit_code_total = Counter(
            "version_resolve_exit_code_total",
            "Resolution exit codes.",
            labelnames=("code",),
            registry=self.registry,
        )
        self.resolve_duration_seconds = Histogram(
            "version_resolve_duration_seconds",
            "Resolution duration in seconds.",
            registry=self.registry,
            buckets=(0.05, 0.1, 0.2, 0.4, 0.6, 1.0, 2.0, 5.0),
        )

    def record_attempt(self) -> None:
        """Increment attempt counter."""
        self.resolve_attempts_total.inc()

    def record_ignored_tag(self) -> None:
        self.tags_ignored_total.inc()

    def record_candidate(self) -> None:
        self.candidates_walked_total.inc()

    def record_exit_code(self, code: int) -> None:
        """Record exit code."""
        self.resolve_exit_code_total.labels(code=str(code)).inc()

    def observe_duration(self, seconds: float) -> None:
        """Observe duration."""
        self.resolve_duration_seconds.observe(seconds)

    def sample(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Return the current value of a sample, ``0.0`` when unset."""
        value = self.registry.get_sample_value(name, labels or {})
        return value or 0.0
