"""Core orchestration for git version resolution."""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from .artifacts import write_env, write_json
from .clock import Clock, default_clock
from .exceptions import GitCommandError, GitUnavailableError, VersionResolutionError
from .git_ops import DEFAULT_TIMEOUT, GitRepository
from .logging_utils import setup_logging
from .metrics import ResolveMetrics
from .models import ResolvedVersion
from .walker import VersionControl, resolve_version

RepositoryFactory = Callable[[Path, str, int], VersionControl]


@dataclass(frozen=True)
class ResolveOptions:
    """User-facing options."""

    path: Path
    release_branch: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    git_executable: str = "git"
    out_json: Optional[Path] = None
    out_env: Optional[Path] = None
    log_level: str = "INFO"


@dataclass
class ResolveOutcome:
    """Result of a resolution run."""

    exit_code: int
    status: str
    message: str
    report: dict[str, Any]
    resolved: Optional[ResolvedVersion] = None


def run(
    options: ResolveOptions,
    *,
    clock: Clock | None = None,
    metrics: ResolveMetrics | None = None,
    repository_factory: RepositoryFactory | None = None,
) -> ResolveOutcome:
    """Resolve the version of the checkout at ``options.path``."""
    clock = clock or default_clock()
    metrics = metrics or ResolveMetrics()
    repository_factory = repository_factory or _git_repository
    correlation_id = os.environ.get("CORRELATION_ID", str(uuid.uuid4()))
    log = setup_logging(correlation_id, options.log_level)
    metrics.record_attempt()
    start_ms = clock.monotonic_ms()

    try:
        resolved = _execute(
            options=options,
            metrics=metrics,
            repository_factory=repository_factory,
            correlation_id=correlation_id,
        )
    except VersionResolutionError as err:
        timing_ms = clock.elapsed_ms(start_ms)
        metrics.record_exit_code(err.exit_code)
        metrics.observe_duration(timing_ms / 1000)
        log.error(
            "version_resolution_failed",
            extra={
                "status": err.status,
                "exit_code": err.exit_code,
                **err.context,
            },
        )
        report = _error_report(
            err=err,
            options=options,
            correlation_id=correlation_id,
            timing_ms=timing_ms,
            clock=clock,
        )
        if options.out_json is not None:
            write_json(report, options.out_json)
        return ResolveOutcome(exit_code=err.exit_code, status=err.status, message=err.args[0], report=report)

    timing_ms = clock.elapsed_ms(start_ms)
    status = _derive_status(resolved)
    exit_code = 0
    metrics.record_exit_code(exit_code)
    metrics.observe_duration(timing_ms / 1000)

    metadata = resolved.to_metadata()
    report: dict[str, Any] = {
        "correlation_id": correlation_id,
        "path": str(options.path),
        "release_branch": options.release_branch or "",
        "status": status,
        "exit_code": exit_code,
        "generated_at": clock.timestamp(),
        "timing_ms": timing_ms,
        "version": metadata,
    }
    if options.out_json is not None:
        write_json(report, options.out_json)
    if options.out_env is not None:
        write_env(metadata, options.out_env)

    return ResolveOutcome(
        exit_code=exit_code,
        status=status,
        message=_status_message(status, resolved),
        report=report,
        resolved=resolved,
    )


def _execute(
    *,
    options: ResolveOptions,
    metrics: ResolveMetrics,
    repository_factory: RepositoryFactory,
    correlation_id: str,
) -> ResolvedVersion:
    path = options.path.expanduser().resolve()
    if not path.is_dir():
        raise VersionResolutionError(
            "«مسیر انتخاب‌شده پوشهٔ معتبری نیست.»",
            exit_code=2,
            status="error",
            context={"path": str(path)},
        )

    vcs = repository_factory(path, options.git_executable, options.timeout)
    try:
        return resolve_version(
            vcs, options.release_branch, metrics=metrics, correlation_id=correlation_id
        )
    except GitUnavailableError as exc:
        raise VersionResolutionError(
            "«فایل اجرایی git یافت نشد؛ لطفاً مطمئن شوید git در PATH قرار دارد.»",
            exit_code=3,
            status="git_unavailable",
            context={"executable": exc.executable, "reason": exc.reason},
        ) from exc
    except GitCommandError as exc:
        raise VersionResolutionError(
            f"«اجرای دستور {' '.join(exc.command)} ناموفق بود (کد {exc.returncode}).»",
            exit_code=4,
            status="git_failed",
            context={
                "command": " ".join(exc.command),
                "returncode": exc.returncode,
                "stderr": exc.stderr,
            },
        ) from exc


def _git_repository(path: Path, git_executable: str, timeout: int) -> VersionControl:
    return GitRepository(path, git_executable=git_executable, timeout=timeout)


def _error_report(
    *,
    err: VersionResolutionError,
    options: ResolveOptions,
    correlation_id: str,
    timing_ms: int,
    clock: Clock,
) -> dict[str, Any]:
    return {
        "correlation_id": correlation_id,
        "path": str(options.path),
        "release_branch": options.release_branch or "",
        "status": err.status,
        "exit_code": err.exit_code,
        "generated_at": clock.timestamp(),
        "timing_ms": timing_ms,
        "error": err.args[0],
        "context": {key: str(value) for key, value in err.context.items()},
    }


def _derive_status(resolved: ResolvedVersion) -> str:
    if resolved.is_tagged:
        return "tagged"
    if resolved.commits_since_tag is None:
        return "no_tag"
    return "untagged"


def _status_message(status: str, resolved: ResolvedVersion) -> str:
    messages = {
        "tagged": "«نسخهٔ {tag} دقیقاً روی HEAD برچسب خورده است.»",
        "untagged": "«نسخهٔ {tag} با {distance} کامیت فاصله از برچسب.»",
        "no_tag": "«هیچ برچسب نسخه‌ای یافت نشد؛ نسخهٔ {tag} استفاده شد.»",
    }
    template = messages.get(status, "«وضعیت ناشناخته.»")
    return template.format(tag=resolved.tag, distance=resolved.commits_since_tag)


__all__ = ["ResolveOptions", "ResolveOutcome", "run"]
