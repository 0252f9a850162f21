"""CLI entry point for the affiliate wager leaderboard.

Orchestrates the full pipeline: configuration, credential resolution,
fetch, normalization, sorting, rendering, and QA validation.

Usage::

    # Fetch and render an HTML leaderboard
    python -m src.cli generate \\
        --code Colby --start 2025-10-01 --end 2025-10-31 \\
        --output output/leaderboard.html

    # Same, as a one-slide PPTX plus a CSV export
    python -m src.cli generate --config leaderboard.yaml \\
        --output output/leaderboard.pptx --csv output/leaderboard.csv

    # Render a saved API response without touching the network
    python -m src.cli render --input response.json \\
        --sort-by code --order asc --output output/leaderboard.html

    # Print the ranked table
    python -m src.cli show --input response.json

    # Write a starter config
    python -m src.cli init-config leaderboard.yaml
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from src.client.credentials import resolve_credential
from src.generator.export import export_csv
from src.generator.html_builder import SORT_FIELD_LABELS, HTMLBuilder
from src.generator.pptx_builder import PPTXBuilder
from src.qa.validator import QAValidator
from src.schema.loader import load_config, save_config
from src.schema.models import QueryConfig, SortOrder, SortState
from src.session.controller import LeaderboardController
from src.session.state import SessionStatus


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

_CONFIG_FLAGS = {
    "code": "affiliate_code",
    "start": "date_start",
    "end": "date_end",
    "api_url": "api_url",
    "env_file": "env_file",
    "timeout": "timeout_seconds",
}


def _load_config(args, resolve_key=True):
    """Build the session QueryConfig from --config plus flag overrides."""
    if getattr(args, "config", None):
        path = Path(args.config)
        if not path.exists():
            _error(f"Config file not found: {path}")
        config = load_config(path)
    else:
        config = QueryConfig()

    overrides = {}
    for flag, attr in _CONFIG_FLAGS.items():
        value = getattr(args, flag, None)
        if value is not None:
            overrides[attr] = value
    config = dataclasses.replace(config, **overrides)

    if resolve_key and not config.credential:
        credential = resolve_credential(config.env_file,
                                        config.fallback_credential)
        if not credential:
            _warn("No API key resolved; requests will likely be rejected")
        config = dataclasses.replace(config, credential=credential)
    return config


def _sort_state(args):
    return SortState(field=args.sort_by, order=SortOrder(args.order))


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def _run_session(args):
    """Load data into a controller; exits on a failed fetch."""
    input_path = getattr(args, "input", None)
    config = _load_config(args, resolve_key=input_path is None)
    controller = LeaderboardController(config, sort=_sort_state(args))

    if input_path:
        p = Path(input_path)
        if not p.exists():
            _error(f"Response file not found: {p}")
        _info(f"Reading response from {p}")
        try:
            body = json.loads(p.read_text(encoding="utf-8"))
        except ValueError as exc:
            _error(f"Response file is not valid JSON: {exc}")
        controller.load_body(body)
    else:
        _info(f"Fetching {config.affiliate_code} "
              f"({config.date_start} to {config.date_end})")
        controller.load()

    if controller.state.status is SessionStatus.FAILED:
        _error(controller.state.error_message)

    _info(f"Loaded {len(controller.records)} affiliate(s), sorted by "
          f"{controller.state.sort.field} ({controller.state.sort.order.value})")
    return controller


def _output_format(args):
    if args.format:
        return args.format
    suffix = Path(args.output).suffix.lower()
    if suffix == ".pptx":
        return "pptx"
    if suffix in (".html", ".htm"):
        return "html"
    _error(f"Cannot infer output format from {args.output!r}; use --format")


def _write_output(args, controller):
    view = controller.view()
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    fmt = _output_format(args)

    if fmt == "pptx":
        data = PPTXBuilder().build(view, controller.records)
        output.write_bytes(data)
        _info(f"Written: {output} ({len(data):,} bytes)")
    else:
        page = HTMLBuilder().build(view)
        if not args.skip_qa:
            _info("Running QA validation...")
            qa_result = QAValidator().validate(page, view)
            if qa_result.passed:
                _info(qa_result.summary())
            else:
                _warn(qa_result.summary())
                if args.verbose:
                    print(qa_result.report(), file=sys.stderr)
                if not args.force:
                    _error("QA validation failed. Use --force to write anyway, "
                           "or --skip-qa to skip validation.")
        else:
            _info("QA validation skipped (--skip-qa)")
        output.write_text(page, encoding="utf-8")
        _info(f"Written: {output} ({len(page):,} chars)")

    if args.csv:
        path = export_csv(controller.records, args.csv)
        _info(f"Written: {path}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_generate(args):
    """Fetch from the API and write the rendered leaderboard."""
    controller = _run_session(args)
    _write_output(args, controller)


def cmd_render(args):
    """Render a saved API response."""
    controller = _run_session(args)
    _write_output(args, controller)


def cmd_show(args):
    """Print the ranked table to stdout."""
    controller = _run_session(args)
    view = controller.view()

    if view.is_empty:
        print(view.empty_state.title)
        print(view.empty_state.message)
        return

    print(f"{'#':>3}  {'Tier':<6}  {'Affiliate':<20}  {'Wagered':>14}  "
          f"{'Earnings':>14}  {'Users':>8}  Last active")
    for row in view.rows:
        print(f"{row.rank:>3}  {row.tier.value:<6}  {row.code:<20}  "
              f"{row.total_wagered:>14}  {row.total_earnings:>14}  "
              f"{row.users_registered:>8}  {row.last_active}")


def cmd_init_config(args):
    """Write a default YAML config."""
    path = Path(args.path)
    if path.exists() and not args.force:
        _error(f"{path} already exists (use --force to overwrite)")
    config = _load_config(args, resolve_key=False)
    save_config(config, path)
    _info(f"Written: {path}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wager-leaderboard",
        description="Render an affiliate wager leaderboard from the affiliate API.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- generate ----
    gen = subparsers.add_parser(
        "generate",
        help="Fetch affiliate statistics and render the leaderboard.",
    )
    _add_query_args(gen)
    _add_sort_args(gen)
    _add_output_args(gen)
    gen.set_defaults(func=cmd_generate)

    # ---- render ----
    ren = subparsers.add_parser(
        "render",
        help="Render the leaderboard from a saved JSON response.",
    )
    _add_query_args(ren)
    _add_input_arg(ren, required=True)
    _add_sort_args(ren)
    _add_output_args(ren)
    ren.set_defaults(func=cmd_render)

    # ---- show ----
    show = subparsers.add_parser(
        "show",
        help="Print the ranked leaderboard to stdout.",
    )
    _add_query_args(show)
    _add_input_arg(show, required=False)
    _add_sort_args(show)
    _add_verbose_arg(show)
    show.set_defaults(func=cmd_show)

    # ---- init-config ----
    init = subparsers.add_parser(
        "init-config",
        help="Write a YAML config with the default query.",
    )
    init.add_argument("path", help="Where to write the config file.")
    _add_query_args(init)
    init.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite an existing file.",
    )
    init.set_defaults(func=cmd_init_config)

    return parser


def _add_query_args(parser):
    """Add --config and query override args to a subparser."""
    group = parser.add_argument_group("query")
    group.add_argument("--config", help="Path to a YAML config file.")
    group.add_argument("--code", help="Affiliate code(s), comma-separated.")
    group.add_argument("--start", help="Start date (YYYY-MM-DD).")
    group.add_argument("--end", help="End date (YYYY-MM-DD).")
    group.add_argument("--api-url", dest="api_url", help="API endpoint URL.")
    group.add_argument(
        "--env-file",
        dest="env_file",
        help="File holding a LUXDROP_API_KEY=... line (default: .env).",
    )
    group.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: 30).",
    )


def _add_input_arg(parser, required):
    parser.add_argument(
        "-i", "--input",
        required=required,
        help="Saved API response (.json) to use instead of fetching.",
    )


def _add_sort_args(parser):
    """Add --sort-by / --order args to a subparser."""
    parser.add_argument(
        "--sort-by",
        dest="sort_by",
        default="total_wagered",
        help=f"Field to sort by, e.g. {', '.join(SORT_FIELD_LABELS)} "
             f"(default: total_wagered).",
    )
    parser.add_argument(
        "--order",
        choices=[o.value for o in SortOrder],
        default="desc",
        help="Sort direction (default: desc).",
    )


def _add_verbose_arg(parser):
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Debug logging and full QA report on failure.",
    )


def _add_output_args(parser):
    """Add output file arguments."""
    parser.add_argument(
        "-o", "--output",
        required=True,
        help="Output file path (.html or .pptx).",
    )
    parser.add_argument(
        "--format",
        choices=["html", "pptx"],
        help="Output format (default: inferred from --output).",
    )
    parser.add_argument(
        "--csv",
        help="Also export the sorted records to this CSV path.",
    )
    parser.add_argument(
        "--skip-qa",
        action="store_true",
        default=False,
        help="Skip QA validation of HTML output.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Write output even if QA validation fails.",
    )
    _add_verbose_arg(parser)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
