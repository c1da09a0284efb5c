"""Command-line interface for Oddiya.

Builds slideshow plans from photo lists and inspects them frame by frame.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from oddiya.core.config.loader import (
    configure_logging,
    load_app_config,
    load_images,
    load_job_config,
    resolve_job_path,
)
from oddiya.core.reporting import summarize_plan
from oddiya.core.slideshow import (
    DURATION_IN_FRAMES,
    CompositionDocument,
    CompositionProps,
    SlideshowComposition,
    build_slideshow_plan,
)
from oddiya.core.utils.json import read_json, write_json

console = Console()
logger = logging.getLogger(__name__)


def _load_document(path: Path) -> CompositionDocument:
    if not path.exists():
        raise FileNotFoundError(f"Plan file not found: {path}")
    return CompositionDocument.model_validate(read_json(path))


def run_plan(args: argparse.Namespace) -> int:
    """Build a plan and write it as a composition document.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        app_config = load_app_config(Path(args.app_config))
        configure_logging(app_config)

        if args.job:
            job_path = Path(args.job).resolve()
            job = load_job_config(job_path)
            images = load_images(resolve_job_path(job_path, job.images_path))
            session_id = args.session or job.session_id
            seed = args.seed if args.seed is not None else job.seed
            title = args.title or job.title
            music = args.music or job.music
            out_path = Path(args.out) if args.out else resolve_job_path(job_path, job.output_path)
        else:
            images = load_images(Path(args.images).resolve())
            session_id = args.session
            seed = args.seed
            title = args.title or ""
            music = args.music
            out_path = Path(args.out or "plan.json")
        if args.duration <= 0:
            raise ValueError(f"--duration must be positive, got {args.duration}")
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load inputs: {e}[/red]")
        return 1

    plan = build_slideshow_plan(
        images, session_id, seed=seed, settings=app_config.slideshow.to_settings()
    )
    if plan.is_empty:
        console.print("[yellow]No images available, showing a placeholder[/yellow]")

    props = CompositionProps(title=title, images=images, music=music, trip_id=session_id)
    composition = SlideshowComposition(props, plan, args.duration)
    document = composition.to_document()
    write_json(out_path, document.model_dump(mode="json"))

    _print_groups(document)
    hidden = composition.hidden_records()
    if hidden:
        console.print(
            f"[yellow]{len(hidden)} placements start at or after frame "
            f"{composition.duration_in_frames} and will not be shown[/yellow]"
        )
    console.print(f"\n[green]Plan written to:[/green] {out_path}")
    return 0


def run_frame(args: argparse.Namespace) -> int:
    """Print the layers visible at one frame."""
    try:
        document = _load_document(Path(args.plan))
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load plan: {e}[/red]")
        return 1

    composition = SlideshowComposition.from_document(document)
    if args.frame >= composition.duration_in_frames:
        console.print(
            f"[yellow]Frame {args.frame} is past the end of the composition "
            f"({composition.duration_in_frames} frames)[/yellow]"
        )
    state = composition.frame_state(args.frame)
    if state.is_empty:
        console.print(f"Frame {args.frame}: nothing to draw")
        return 0

    table = Table(title=f"Frame {args.frame}")
    table.add_column("z")
    table.add_column("Arrangement")
    table.add_column("Image")
    table.add_column("Box")
    for layer in state.layers:
        box = ", ".join(f"{k}={v}" for k, v in layer.css_box().items())
        table.add_row(
            str(layer.z_index),
            layer.record.arrangement.value,
            f"#{layer.record.image_index} {layer.url}",
            box,
        )
    console.print(table)
    return 0


def run_summary(args: argparse.Namespace) -> int:
    """Print plan diagnostics."""
    try:
        document = _load_document(Path(args.plan))
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load plan: {e}[/red]")
        return 1

    summary = summarize_plan(document.plan, pool_size=len(document.props.images))

    console.print(f"[bold]Seed:[/bold] {summary.seed}")
    console.print(f"Groups: {summary.group_count}   Placements: {summary.record_count}")
    console.print(f"Length: {document.duration_in_frames} frames")
    console.print(
        f"Images used: {summary.unique_images}/{summary.pool_size} "
        f"(coverage {summary.coverage:.0%}, max reuse {summary.max_reuse})"
    )
    for kind, count in summary.arrangement_counts.items():
        console.print(f"   {kind.value}: {count}")
    for flag in summary.flags:
        color = "yellow" if flag.level.value == "warning" else "cyan"
        console.print(f"[{color}]{flag.code}[/{color}] {flag.message}")
    return 0


def _print_groups(document: CompositionDocument) -> None:
    plan = document.plan
    table = Table(title=f"Slideshow plan (seed {plan.seed:.0f})")
    table.add_column("Group")
    table.add_column("Arrangement")
    table.add_column("Beats")
    table.add_column("Frame")
    table.add_column("Images")
    for group in plan.groups:
        images = [str(r.image_index) for r in plan.records_for_group(group.group_index)]
        table.add_row(
            str(group.group_index),
            group.arrangement.value + (" (truncated)" if group.truncated else ""),
            f"{group.beat_indices[0]}-{group.beat_indices[-1]}",
            str(group.start_frame),
            ", ".join(images),
        )
    console.print(table)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="oddiya",
        description="Oddiya - beat-synchronized trip slideshow planner",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    plan = sub.add_parser("plan", help="Build a slideshow plan")
    source = plan.add_mutually_exclusive_group(required=True)
    source.add_argument("--images", help="Path to photo list (JSON/YAML)")
    source.add_argument("--job", help="Path to job config (JSON/YAML)")
    plan.add_argument("--session", help="Trip/session id used to diversify the seed")
    plan.add_argument("--seed", type=float, help="Fixed seed (fresh seed when omitted)")
    plan.add_argument("--title", help="Overlay title")
    plan.add_argument("--music", help="Background music reference")
    plan.add_argument("--out", help="Output plan path (default: plan.json)")
    plan.add_argument(
        "--duration",
        type=int,
        default=DURATION_IN_FRAMES,
        help=f"Composition length in frames (default: {DURATION_IN_FRAMES})",
    )
    plan.add_argument(
        "--app-config",
        default="config.json",
        help="Path to app config (default: config.json)",
    )

    frame = sub.add_parser("frame", help="Show the layers visible at a frame")
    frame.add_argument("--plan", required=True, help="Path to plan JSON")
    frame.add_argument("--frame", type=int, required=True, help="Frame number")

    summary = sub.add_parser("summary", help="Show plan diagnostics")
    summary.add_argument("--plan", required=True, help="Path to plan JSON")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "plan":
        sys.exit(run_plan(args))
    elif args.cmd == "frame":
        sys.exit(run_frame(args))
    elif args.cmd == "summary":
        sys.exit(run_summary(args))


if __name__ == "__main__":
    main()
