"""CLI entrypoint for rendering evidence markers over an image.

Usage:
    python -m evidencemark.render <result.json> <image> [--output out.png]
                                  [--config config.yaml]
                                  [--display-width W] [--display-height H]
                                  [--active I] [--expand I ...]
                                  [--resolve-overlaps] [--json] [--verbose]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from evidencemark.config import EvidenceMarkConfig
from evidencemark.errors import ResultFormatError
from evidencemark.interaction.highlight import HighlightSynchronizer
from evidencemark.layout.placement import count_overlaps
from evidencemark.loader import load_detection_result
from evidencemark.render.list_view import EMPTY_LIST_MESSAGE, build_list_rows
from evidencemark.render.overlay import compose_scene, render_overlay
from evidencemark.types import DetectionResult
from evidencemark.utils.image import (
    fit_display_size,
    load_image,
    read_image_size,
    resize_to_display,
    save_image,
)

console = Console()


def _build_verdict_panel(result: DetectionResult) -> Panel:
    """Build the verdict header panel."""
    color = "red" if result.is_likely_ai else "cyan"
    title = "Analysis Result"
    if result.suggested_title:
        title += f" • {escape(result.suggested_title)}"
    lines = [
        f"[bold {color}]{escape(result.verdict)}[/bold {color}]",
        f"[bold]Likelihood:[/bold] {result.confidence_score:g}%",
        "",
        escape(result.reasoning),
    ]
    return Panel("\n".join(lines), title=title, border_style=color)


def _build_findings_table(rows) -> Table:
    """Build the findings list, mirroring the highlight state of the overlay."""
    table = Table(title="What we found", show_lines=True)
    table.add_column("#", style="cyan", width=4)
    table.add_column("Finding", style="bold")
    table.add_column("Details")

    for row in rows:
        marker = "[reverse]" if row.highlighted else ""
        end = "[/reverse]" if row.highlighted else ""
        details = escape(row.visible_description) if row.expanded else "[dim]▸ collapsed[/dim]"
        table.add_row(str(row.index), f"{marker}{escape(row.label)}{end}", details)
    return table


def _build_layout_panel(scene) -> Panel:
    """Build label layout diagnostics."""
    placements = [item.placement for item in scene.items]
    lines = [
        f"[bold]Display size:[/bold] {scene.display_width:g}x{scene.display_height:g}",
        f"[bold]Markers:[/bold] {len(scene.items)}",
        f"[bold]Overlapping label pairs:[/bold] {count_overlaps(placements)}",
    ]
    for item in scene.items:
        p = item.placement
        lines.append(
            f"  {item.index}: anchor ({item.anchor.x:.0f}, {item.anchor.y:.0f}) "
            f"→ label ({p.x:.0f}, {p.y:.0f}, {p.width:.0f}x{p.height:.0f})"
        )
    return Panel("\n".join(lines), title="Label Layout", border_style="magenta")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Draw evidence markers from a detection result over an image.",
        prog="python -m evidencemark.render",
    )
    parser.add_argument("result_json", type=Path, help="Path to the detection result JSON")
    parser.add_argument("image", type=Path, help="Path to the analyzed image")
    parser.add_argument("--output", type=Path, default=None, help="Where to write the annotated image")
    parser.add_argument("--config", type=Path, default=None, help="EvidenceMark config YAML")
    parser.add_argument("--display-width", type=int, default=None, help="Displayed image width in pixels")
    parser.add_argument("--display-height", type=int, default=None, help="Displayed image height in pixels")
    parser.add_argument("--active", type=int, default=None, help="Finding index to highlight")
    parser.add_argument(
        "--expand", type=int, nargs="*", default=[],
        help="Finding indices whose details are shown",
    )
    parser.add_argument("--resolve-overlaps", action="store_true", help="Stack colliding labels")
    parser.add_argument("--json", action="store_true", help="Output the composed scene as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show progress logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_time=True, show_path=False)],
        )
    else:
        logging.basicConfig(level=logging.WARNING)

    for path in (args.result_json, args.image):
        if not path.is_file():
            console.print(f"[red]Error: {escape(str(path))} not found[/red]")
            return 1

    config = EvidenceMarkConfig.from_yaml(args.config) if args.config else EvidenceMarkConfig.default()
    if args.resolve_overlaps:
        config.placement.resolve_overlaps = True

    try:
        result = load_detection_result(args.result_json)
        w, h = read_image_size(args.image)
        display_w, display_h = fit_display_size(w, h, args.display_width, args.display_height)
        image = load_image(args.image)
    except (ResultFormatError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    image = resize_to_display(image, display_w, display_h)

    findings = result.annotated_artifacts
    sync = HighlightSynchronizer()
    sync.load(findings)
    if args.active is not None:
        sync.pointer_enter(args.active)
    for index in args.expand:
        if index not in sync.expanded_indices:
            sync.toggle(index)

    scene = compose_scene(
        findings, display_w, display_h,
        state=sync.state, config=config, is_likely_ai=result.is_likely_ai,
    )

    if args.output is not None:
        rendered = render_overlay(image, scene)
        save_image(rendered, args.output)

    if args.json:
        output = scene.to_dict()
        output["verdict"] = result.verdict
        output["output"] = str(args.output) if args.output else None
        print(json.dumps(output, indent=2))
        return 0

    console.print()
    console.rule("[bold blue]EvidenceMark Report[/bold blue]")
    console.print()
    console.print(_build_verdict_panel(result))
    console.print()

    rows = build_list_rows(findings, sync.state)
    if rows:
        console.print(_build_findings_table(rows))
        console.print()
        console.print(_build_layout_panel(scene))
    else:
        console.print(f"[italic dim]{EMPTY_LIST_MESSAGE}[/italic dim]")
    console.print()

    if result.technical_analysis:
        console.print(Panel(escape(result.technical_analysis), title="Breakdown", border_style="cyan"))
        console.print()

    if args.output is not None:
        console.print(f"[green]Wrote {args.output}[/green]")
    console.rule("[bold]Render complete[/bold]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
