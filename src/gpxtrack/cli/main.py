from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import IO

from dotenv import load_dotenv
from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)

from gpxtrack.config import (
    OUTPUT_FORMATS,
    load_app_config,
    parse_output_format,
    parse_size,
    resolve_config_path,
    save_app_config,
)
from gpxtrack.geo import (
    Point,
    TrkPtHandler,
    parse_gpx,
    render_table,
    write_csv,
    write_json,
)

logger = logging.getLogger(__name__)

_DEBUG_VALUES = {"1", "true", "yes", "on"}


def _parse_log_level(value: str | None) -> int | None:
    if not value:
        return None
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else None


def configure_logging() -> None:
    level = _parse_log_level(os.getenv("GPXTRACK_LOG_LEVEL"))
    if level is None:
        debug = os.getenv("GPXTRACK_DEBUG", "").lower() in _DEBUG_VALUES
        level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _extract_points(
    gpx_path: Path, chunk_size: int, show_progress: bool
) -> list[Point]:
    points: list[Point] = []
    handler = TrkPtHandler(points.append)
    total = gpx_path.stat().st_size

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TimeElapsedColumn(),
        console=Console(stderr=True),
        transient=True,
        disable=not show_progress,
    ) as progress:
        task_id = progress.add_task(f"Reading {gpx_path.name}", total=total)
        parse_gpx(
            gpx_path,
            handler,
            chunk_size=chunk_size,
            on_progress=lambda n: progress.update(task_id, advance=n),
        )
    return points


def _write_points(points: list[Point], output_format: str, handle: IO[str]) -> None:
    if output_format == "json":
        write_json(points, handle)
    elif output_format == "table":
        Console(file=handle).print(render_table(points))
    else:
        write_csv(points, handle)


def handle_extract(args: argparse.Namespace) -> None:
    try:
        config = load_app_config(args.config_path)
        output_format = (
            parse_output_format(args.format) if args.format else config.output_format
        )
        chunk_size = parse_size(args.chunk_size, config.chunk_size)
        if chunk_size <= 0:
            raise ValueError("--chunk-size must be greater than 0.")
        show_progress = config.show_progress and not args.no_progress

        logger.debug("Extracting track points from %s", args.gpx)
        points = _extract_points(args.gpx, chunk_size, show_progress)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"gpxtrack: {exc}") from exc

    logger.info("Extracted %s track points from %s", len(points), args.gpx)

    if args.out is None:
        _write_points(points, output_format, sys.stdout)
        return
    args.out.parent.mkdir(parents=True, exist_ok=True)
    with args.out.open("w", encoding="utf-8", newline="") as handle:
        _write_points(points, output_format, handle)
    logger.info("Wrote %s", args.out)


def handle_configure(args: argparse.Namespace) -> None:
    config_path = resolve_config_path(args.config_path)
    try:
        current = load_app_config(config_path, include_env=False)

        updates: dict[str, object] = {}
        if args.format is not None:
            updates["output_format"] = parse_output_format(args.format)
        if args.chunk_size is not None:
            chunk_size = parse_size(args.chunk_size, current.chunk_size)
            if chunk_size <= 0:
                raise ValueError("--chunk-size must be greater than 0.")
            updates["chunk_size"] = chunk_size
        if args.progress is not None:
            updates["show_progress"] = args.progress
    except ValueError as exc:
        raise SystemExit(f"gpxtrack: {exc}") from exc

    if not updates:
        raise SystemExit("No configuration values provided.")

    updated = replace(current, **updates)
    path = save_app_config(updated, config_path)
    print(f"Saved config to {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpxtrack",
        description="Extract track points from GPX files.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    configure = sub.add_parser(
        "configure", help="Configure default settings (stored on disk)."
    )
    configure.add_argument(
        "--config-path",
        type=Path,
        default=None,
        help="Optional config file path override.",
    )
    configure.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Default output format.",
    )
    configure.add_argument(
        "--chunk-size",
        type=str,
        default=None,
        help="Read size per parser step (bytes or KB/MB/GB/TB).",
    )
    configure.add_argument(
        "--progress",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show a progress bar while reading.",
    )

    extract = sub.add_parser("extract", help="Extract track points from a GPX file.")
    extract.add_argument("--gpx", required=True, type=Path, help="Path to a GPX file.")
    extract.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output path. Defaults to standard output.",
    )
    extract.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (defaults to the configured format).",
    )
    extract.add_argument(
        "--chunk-size",
        type=str,
        default=None,
        help="Read size per parser step (bytes or KB/MB/GB/TB).",
    )
    extract.add_argument(
        "--no-progress",
        action="store_true",
        default=False,
        help="Do not show a progress bar.",
    )
    extract.add_argument(
        "--config-path",
        type=Path,
        default=None,
        help="Optional config file path override.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "configure":
        handle_configure(args)
        return

    if args.command == "extract":
        handle_extract(args)


if __name__ == "__main__":
    main()
