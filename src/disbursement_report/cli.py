"""Command-line entry points for the disbursement report toolkit.

The CLI only wires argparse onto the report builder: it loads settings and a
payment summary, delegates to :mod:`disbursement_report.report`, and writes the
result to a file or to stdout. Delivery (email, HTTP) is left to the caller.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence

from . import attachment, log, models, report
from .config import ReportSettings, load_settings
from .exceptions import ReportError


@dataclass(frozen=True)
class CommandSpec:
    """Describe how a CLI sub-command is configured and executed."""

    name: str
    help_text: str
    register: Callable[[argparse._SubParsersAction[argparse.ArgumentParser]], argparse.ArgumentParser]
    execute: Callable[[ReportSettings, argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="disbursement-report",
        description="Build merchant disbursement spreadsheet reports from payment summaries.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to config.ini (searched upwards from the working directory by default).",
    )
    return parser


def configure_subcommands(parser: argparse.ArgumentParser) -> Mapping[str, CommandSpec]:
    """Wire all CLI sub-commands onto the supplied parser."""
    subparsers = parser.add_subparsers(dest="command", required=True, title="commands")
    specs = [
        register_build_command(subparsers),
        register_attachment_command(subparsers),
        register_summary_command(subparsers),
    ]
    for spec in specs:
        spec.register(subparsers)
    return build_command_table(specs)


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to the payment summary JSON document.",
    )


def register_build_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``build``."""
    name = "build"
    help_text = "Write the disbursement report workbook to an .xlsx file."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        _add_input_argument(parser)
        parser.add_argument(
            "--output-dir",
            type=Path,
            default=None,
            help="Directory receiving the report (defaults to the configured OutputDirectory).",
        )
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_build)


def register_attachment_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``attachment``."""
    name = "attachment"
    help_text = "Emit the report as a base64 email attachment descriptor in JSON."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        _add_input_argument(parser)
        parser.add_argument(
            "--output",
            type=Path,
            default=None,
            help="File receiving the JSON descriptor (defaults to stdout).",
        )
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_attachment)


def register_summary_command(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> CommandSpec:
    """Register the parser and executor for ``summary``."""
    name = "summary"
    help_text = "Print merchant details, counts and totals of a payment summary."

    def registrar(action: argparse._SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
        parser = action.add_parser(name, help=help_text)
        _add_input_argument(parser)
        parser.set_defaults(command=name)
        return parser

    return CommandSpec(name=name, help_text=help_text, register=registrar, execute=run_summary)


def build_command_table(specs: Iterable[CommandSpec]) -> Dict[str, CommandSpec]:
    """Index command specs by name."""
    return {spec.name: spec for spec in specs}


def dispatch_command(
    settings: ReportSettings,
    args: argparse.Namespace,
    command_table: Mapping[str, CommandSpec],
) -> int:
    """Run the executor registered for ``args.command``."""
    spec = command_table.get(args.command)
    if spec is None:
        raise KeyError(f"Unknown command: {args.command}")
    return spec.execute(settings, args)


def _load_summary(args: argparse.Namespace) -> report.ReportSummary:
    return report.summarize(models.load_payment_summary(args.input))


def _report_filename(settings: ReportSettings, summary: report.ReportSummary) -> str:
    if summary.report_date is None:
        raise ReportError("Payment summary has no report date")
    return attachment.build_report_filename(settings.label, summary.report_date)


def run_build(settings: ReportSettings, args: argparse.Namespace) -> int:
    """Build the report and save it as an .xlsx file."""
    summary = _load_summary(args)
    filename = _report_filename(settings, summary)
    workbook = report.build_report_from_summary(summary)
    directory = args.output_dir if args.output_dir is not None else settings.output_directory
    destination = attachment.save_report(workbook, directory, filename)
    print(destination)
    return 0


def run_attachment(settings: ReportSettings, args: argparse.Namespace) -> int:
    """Build the report and emit its attachment descriptor as JSON."""
    summary = _load_summary(args)
    filename = _report_filename(settings, summary)
    workbook = report.build_report_from_summary(summary)
    document = json.dumps(attachment.to_attachment(workbook, filename).as_dict())
    if args.output is None:
        print(document)
    else:
        output = Path(args.output).expanduser().resolve()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document, encoding="utf-8")
        log.info("Wrote attachment descriptor to '%s'", output)
    return 0


def run_summary(settings: ReportSettings, args: argparse.Namespace) -> int:
    """Print the figures of a payment summary."""
    summary = _load_summary(args)
    print(f"Merchant:        {summary.merchant_name} <{summary.merchant_email}>")
    print(f"Report date:     {summary.report_date}")
    print(f"Disbursed:       {summary.disbursed_amount}")
    print(f"Purchases:       {summary.total_purchase_count} totalling {summary.total_purchase_amount}")
    print(f"Refunds:         {summary.total_refund_count} totalling {summary.total_refund_amount}")
    return 0


def handle_cli_error(error: Exception) -> int:
    """Convert raised exceptions into user-friendly exit codes."""
    if isinstance(error, ReportError):
        log.error("%s", error)
        return 2
    if isinstance(error, FileNotFoundError):
        log.error("%s", error)
        return 3
    log.error("%s", error)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point that orchestrates parsing and execution."""
    parser = build_parser()
    command_table = configure_subcommands(parser)
    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
        return dispatch_command(settings, args, command_table)
    except Exception as error:  # centralised error handler tested separately
        return handle_cli_error(error)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
