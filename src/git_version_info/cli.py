"""CLI entry point using Typer."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from .artifacts import render_env
from .config import get_settings
from .core import ResolveOptions, run


app = typer.Typer(
    pretty_exceptions_short=True,
    rich_markup_mode="rich",
    help="محاسبهٔ نسخهٔ معنایی مخزن Git از روی برچسب‌ها.",
)


class OutputFormat(str, Enum):
    text = "text"
    json = "json"
    env = "env"


@app.command()
def resolve(
    path: Path = typer.Option(Path.cwd(), "--path", help="مسیر مخزن محلی."),
    release_branch: Optional[str] = typer.Option(
        None,
        "--release-branch",
        help="شاخهٔ انتشار که برچسب‌های نسخه روی آن قرار دارند.",
    ),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout",
        min=1,
        help="مهلت اجرای هر دستور git (ثانیه).",
    ),
    git_executable: Optional[str] = typer.Option(
        None,
        "--git",
        help="مسیر یا نام فایل اجرایی git.",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.text,
        "--format",
        case_sensitive=False,
        help="قالب خروجی روی stdout.",
    ),
    out_json: Optional[Path] = typer.Option(
        None,
        "--out-json",
        help="مسیر ذخیرهٔ گزارش JSON.",
    ),
    out_env: Optional[Path] = typer.Option(
        None,
        "--out-env",
        help="مسیر ذخیرهٔ فایل متغیرهای محیطی KEY=value.",
    ),
) -> None:
    """Resolve the version of the checkout at --path."""
    settings = get_settings()
    options = ResolveOptions(
        path=path,
        release_branch=release_branch if release_branch is not None else settings.release_branch,
        timeout=timeout or settings.timeout,
        git_executable=git_executable or settings.git_executable,
        out_json=out_json,
        out_env=out_env,
        log_level=settings.log_level,
    )
    outcome = run(options)
    if output_format is OutputFormat.json:
        typer.echo(json.dumps(outcome.report, ensure_ascii=False, sort_keys=True))
    elif output_format is OutputFormat.env and outcome.exit_code == 0:
        typer.echo(render_env(outcome.report["version"]), nl=False)
    else:
        typer.echo(outcome.message, err=outcome.exit_code != 0)
    raise typer.Exit(outcome.exit_code)


def main() -> None:
    """CLI wrapper for console_scripts compatibility."""
    app()


if __name__ == "__main__":
    main()
