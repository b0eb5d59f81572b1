"""Command-line interface for the marker timeline engine.

WHY: Reviewers and pipeline scripts need to inspect how a scene's
markers lay out into lanes, how far review has progressed, and where a
navigation key would move the cursor, without running the review UI.

HOW: argparse with three subcommands over a marker JSON file:
  lanes     — group into swimlanes and run the selected formatters
  summary   — print confirmed / rejected / unknown counts
  navigate  — run one named navigation action and print the target id
Reserved tag ids come from the environment (.env) via load_tag_config()
and may be overridden with flags. Status messages go to stderr.

RULES:
- Shot-boundary markers are excluded before grouping; drafts are kept
- lanes: --formats is comma-separated; with --output-dir the default is
  all registered formats, without it the plain text report on stdout
- Output naming: {stem}{suffix}, numeric suffix on conflict (-lanes-2.txt)
- navigate prints the selected id, or "none"
- Config and data errors print "Error: ..." to stderr and exit 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from marker_timeline.actions import ACTIONS, NavigationContext, run_action
from marker_timeline.config import load_tag_config
from marker_timeline.core.grouping import action_markers, build_timeline_layout
from marker_timeline.core.models import Marker, TagConfig
from marker_timeline.core.summary import calculate_marker_summary
from marker_timeline.formatters import FORMATTERS
from marker_timeline.formatters.base import FormatterOutput
from marker_timeline.loader import load_markers


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. scene42-lanes.txt)
    - Conflict: insert a counter before the extension (scene42-lanes-2.txt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _load_inputs(args: argparse.Namespace) -> tuple:
    """Load the config and the eligible markers for any subcommand."""
    config = load_tag_config(
        status_confirmed=args.confirmed_tag,
        status_rejected=args.rejected_tag,
        source_manual=args.manual_tag,
        shot_boundary=args.shot_boundary_tag,
        marker_group_parent=args.group_parent,
    )
    markers = load_markers(args.marker_file)
    eligible = action_markers(markers, config, getattr(args, "swimlane", None))
    _status("Loaded {} markers ({} eligible)".format(len(markers), len(eligible)))
    return config, eligible


def _run_lanes(args: argparse.Namespace, config: TagConfig, markers: list[Marker]) -> None:
    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",")]
        for key in format_keys:
            if key not in FORMATTERS:
                available = ", ".join(sorted(FORMATTERS.keys()))
                raise ValueError("Unknown format '{}'. Available formats: {}".format(key, available))
    elif args.output_dir:
        format_keys = list(FORMATTERS.keys())
    else:
        format_keys = ["plain_text"]

    layout = build_timeline_layout(markers, config, config.marker_group_parent or None)
    _status("  {} swimlanes, {} markers placed".format(len(layout.groups), len(layout)))

    if not args.output_dir:
        for key in format_keys:
            for output in FORMATTERS[key]().format(layout, config):
                sys.stdout.write(output.content)
        return

    output_dir = Path(args.output_dir).resolve()
    if not output_dir.is_dir():
        raise ValueError("Output directory does not exist: {}".format(output_dir))

    stem = Path(args.marker_file).stem
    for key in format_keys:
        formatter = FORMATTERS[key]()
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(layout, config):
            saved = _save_output(output, stem, output_dir)
            _status("  Saved: {}".format(saved.name))


def _run_summary(args: argparse.Namespace, config: TagConfig, markers: list[Marker]) -> None:
    summary = calculate_marker_summary(markers, config)
    print("confirmed: {}".format(summary.confirmed))
    print("rejected: {}".format(summary.rejected))
    print("unknown: {}".format(summary.unknown))


def _run_navigate(args: argparse.Namespace, config: TagConfig, markers: list[Marker]) -> None:
    layout = build_timeline_layout(markers, config, config.marker_group_parent or None)
    context = NavigationContext(
        markers=markers,
        layout=layout,
        selected_id=args.selected,
        config=config,
        current_time=args.time,
        use_temporal_locality=not args.first_marker,
    )
    target = run_action(args.action, context)
    print(target if target is not None else "none")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("marker_file", help="Path to a marker JSON file.")
    parser.add_argument(
        "--confirmed-tag", default=None,
        help="Tag id of 'status: confirmed' (default: $MARKER_STATUS_CONFIRMED).",
    )
    parser.add_argument(
        "--rejected-tag", default=None,
        help="Tag id of 'status: rejected' (default: $MARKER_STATUS_REJECTED).",
    )
    parser.add_argument(
        "--manual-tag", default=None,
        help="Tag id of 'source: manual' (default: $MARKER_SOURCE_MANUAL).",
    )
    parser.add_argument(
        "--shot-boundary-tag", default=None,
        help="Tag id of shot-boundary markers (default: $MARKER_SHOT_BOUNDARY).",
    )
    parser.add_argument(
        "--group-parent", default=None,
        help="Tag id whose numbered children order the lanes (default: $MARKER_GROUP_PARENT).",
    )
    parser.add_argument(
        "--swimlane", default=None,
        help="Only consider markers of this lane (folded tag name).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Subcommands: lanes, summary, navigate (one is required)
    - Every subcommand takes the marker file and the tag-id overrides
    - navigate: positional action id, --selected, --time, --first-marker
    """
    parser = argparse.ArgumentParser(
        prog="marker_timeline",
        description="Group video markers into swimlanes and navigate between them.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log grouping and navigation details to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lanes = subparsers.add_parser("lanes", help="Lay markers out into swimlanes and tracks.")
    _add_common_arguments(lanes)
    lanes.add_argument(
        "--formats", default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all with --output-dir, "
             "otherwise plain_text only.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    lanes.add_argument(
        "--output-dir", default=None,
        help="Directory to save output files (default: print to stdout).",
    )
    lanes.set_defaults(handler=_run_lanes)

    summary = subparsers.add_parser("summary", help="Count markers by review status.")
    _add_common_arguments(summary)
    summary.set_defaults(handler=_run_summary)

    navigate = subparsers.add_parser("navigate", help="Run one navigation action.")
    _add_common_arguments(navigate)
    navigate.add_argument(
        "action", choices=sorted(ACTIONS.keys()), metavar="ACTION",
        help="Navigation action id, e.g. navigation.nextUnprocessed.",
    )
    navigate.add_argument("--selected", default=None, help="Currently selected marker id.")
    navigate.add_argument(
        "--time", type=float, default=0.0,
        help="Playhead position in seconds (default: %(default)s).",
    )
    navigate.add_argument(
        "--first-marker", action="store_true",
        help="Lane moves select the lane's first marker instead of the closest in time.",
    )
    navigate.set_defaults(handler=_run_navigate)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for ``python -m marker_timeline`` and ``marker-timeline``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config, markers = _load_inputs(args)
        args.handler(args, config, markers)
    except ValueError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
