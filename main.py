"""
main.py - command line entry point for exporting recorded projects
"""

import argparse
import logging
import shlex
import sys
from pathlib import Path

from screenedit.application.services.export_service import ExportRequest, ExportService
from screenedit.domain.errors import ExportCancelledError, ExportValidationError
from screenedit.domain.models.export import (
    CompressionPreset,
    ExportFormat,
    ExportOptions,
    ResolutionPreset,
)
from screenedit.infra.logging import setup_logging
from screenedit.infra.media_io import MediaIO
from screenedit.infra.project_store import ProjectStore, load_project_file
from screenedit.infra.settings import settings


def print_progress(progress) -> None:
    if progress.percent is not None:
        print(f"\rExporting... {progress.percent:5.1f}%", end="", flush=True)


def cmd_export(args: argparse.Namespace) -> int:
    project = load_project_file(args.project)
    options = ExportOptions(
        format=ExportFormat(args.format),
        frame_rate=args.fps,
        compression=CompressionPreset(args.compression),
        resolution=ResolutionPreset(args.resolution),
    )
    request = ExportRequest(
        project=project,
        options=options,
        output_dir=Path(args.output_dir) if args.output_dir else None,
        output_path=Path(args.output) if args.output else None,
        dry_run=args.dry_run,
    )

    service = ExportService()
    try:
        result = service.export(request, on_progress=print_progress)
    except ExportValidationError as e:
        print(f"Export rejected: {e}", file=sys.stderr)
        return 2
    except ExportCancelledError:
        print("\nExport cancelled", file=sys.stderr)
        return 130
    except RuntimeError as e:
        print(f"\nExport failed: {e}", file=sys.stderr)
        return 1

    if result.executed:
        print(f"\nExported to {result.output_path}")
    else:
        print(shlex.join(result.command))
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    store = ProjectStore(args.recordings_dir or settings.recordings_dir)
    for project in store.list():
        print(
            f"{project.id}\t{project.name}\t{project.duration:.2f}s\t"
            f"{project.resolution.width}x{project.resolution.height}"
        )
    return 0


def cmd_probe(args: argparse.Namespace) -> int:
    media_io = MediaIO()
    dimensions = media_io.probe_video_dimensions(args.file)
    duration = media_io.probe_duration(args.file)
    print(f"audio: {media_io.has_audio_stream(args.file)}")
    print(f"dimensions: {'%dx%d' % dimensions if dimensions else 'unknown'}")
    print(f"duration: {'%.3fs' % duration if duration is not None else 'unknown'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exports screen recordings with their edits using FFmpeg."
    )
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export a project")
    export.add_argument("project", help="Project directory or project.json file")
    export.add_argument(
        "--format", choices=[f.value for f in ExportFormat], default="mp4"
    )
    export.add_argument("--fps", type=int, choices=[24, 30, 60], default=30)
    export.add_argument(
        "--compression",
        choices=[c.value for c in CompressionPreset],
        default="social",
    )
    export.add_argument(
        "--resolution",
        choices=[r.value for r in ResolutionPreset],
        default="1080p",
    )
    export.add_argument("--output-dir", help="Directory for the exported file")
    export.add_argument("--output", help="Exact output file (overrides --output-dir)")
    export.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the FFmpeg command instead of running it",
    )
    export.set_defaults(func=cmd_export)

    list_cmd = subparsers.add_parser("list", help="List saved projects")
    list_cmd.add_argument("--recordings-dir", help="Directory holding the projects")
    list_cmd.set_defaults(func=cmd_list)

    probe = subparsers.add_parser("probe", help="Inspect a media file")
    probe.add_argument("file")
    probe.set_defaults(func=cmd_probe)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else settings.log_level
    setup_logging(settings.log_file, level)

    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
