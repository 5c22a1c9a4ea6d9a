"""Validate a ``terraform show -json`` plan file from the command line.

Exit codes: ``0`` when no errors were found, ``1`` when at least one error
diagnostic was reported and ``2`` when the plan could not be read.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Sequence, TextIO

# Support both running from workspace root and tools directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from adapters.terraform_plan import PlanFormatError, iter_resource_configs, load_plan
from core import validation_rules
from core.validation_service import InvalidRequestError, PlanReport, validate_resources
from providers.json_rules import JsonRuleProvider

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_UNREADABLE = 2

logger = logging.getLogger("validate_plan")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate the resource changes of a Terraform plan.")
    parser.add_argument("plan", help="Path to the output of 'terraform show -json <planfile>'.")
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format for the report (default: text).",
    )
    parser.add_argument(
        "--rules",
        default=os.environ.get("VALIDATION_RULES_PATH"),
        help="JSON rule file or directory layered over the built-in rules. Defaults to $VALIDATION_RULES_PATH.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable informational logging.")
    return parser


def render_text(report: PlanReport, stream: TextIO) -> None:
    for resource in report.resources:
        for diagnostic in resource.diagnostics:
            location = resource.address or resource.resource_type
            if not diagnostic.path.is_empty:
                location = f"{location}: {diagnostic.path}"
            stream.write(f"{diagnostic.severity.value.upper()}: {location}: {diagnostic.summary}\n")
            stream.write(f"  {diagnostic.detail}\n")
    stream.write(
        f"{len(report.resources)} resource(s) checked, "
        f"{report.error_count} error(s), {report.warning_count} warning(s)\n"
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = get_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.rules:
        try:
            validation_rules.set_rule_provider(JsonRuleProvider(rules_path=args.rules))
        except (OSError, ValueError) as exc:
            logger.error("Could not load rules from %s: %s", args.rules, exc)
            return EXIT_UNREADABLE

    try:
        plan = load_plan(args.plan)
        report = validate_resources(list(iter_resource_configs(plan)))
    except OSError as exc:
        logger.error("Could not read plan %s: %s", args.plan, exc)
        return EXIT_UNREADABLE
    except (PlanFormatError, InvalidRequestError) as exc:
        logger.error("%s", exc)
        return EXIT_UNREADABLE

    if args.format == "json":
        json.dump(report.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        render_text(report, sys.stdout)

    return EXIT_ERRORS if report.has_errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
