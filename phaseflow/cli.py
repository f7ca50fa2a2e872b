"""CLI entry point for phaseflow."""

import argparse
import json
import logging
import sys
from pathlib import Path

from phaseflow.config import load_config
from phaseflow.engine import compute_layout
from phaseflow.models import DatasetError
from phaseflow.sample_data import sample_dataset
from phaseflow.selection import SelectionController, describe_project


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Time-based phase flow diagrams")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # layout command
    layout_parser = sub.add_parser("layout", help="Print diagram geometry as JSON")
    layout_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    layout_parser.add_argument("--select", default=None, help="Project id to select")

    # render command
    render_parser = sub.add_parser("render", help="Render the diagram to HTML or PNG")
    render_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    render_parser.add_argument("--format", choices=["html", "png"], default="html")
    render_parser.add_argument("--select", default=None, help="Project id to select")
    render_parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output file (default: <output_dir>/diagram.<format>)",
    )

    # info command
    info_parser = sub.add_parser("info", help="Show a project's dependencies and influences")
    info_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    info_parser.add_argument("project_id", help="Project id")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    dataset = sample_dataset()
    layout = compute_layout(dataset, config)

    try:
        if args.command == "layout":
            data = layout.to_dict()
            if args.select:
                controller = SelectionController(layout)
                data["emphasis"] = controller.click_project(args.select).to_dict()
            print(json.dumps(data, indent=2))

        elif args.command == "render":
            output = args.output or config.resolved_output_dir / f"diagram.{args.format}"
            if args.format == "png":
                from phaseflow.output.raster import write_png
                path = write_png(layout, dataset, config, output, selected=args.select)
            else:
                from phaseflow.output.html import write_html
                path = write_html(layout, dataset, config, output, selected=args.select)
            print(f"Output: {path}")

        elif args.command == "info":
            info = describe_project(dataset, args.project_id)
            print(f"{info.name} Details")
            print(f"  Size: {info.size:g}")
            for line in info.summary.splitlines():
                print(f"  {line}")

        else:
            parser.print_help()
    except DatasetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
