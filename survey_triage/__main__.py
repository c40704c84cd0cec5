import argparse
import logging
import sys

from survey_triage.pipeline import triage_file
from survey_triage.rules import rules_from_options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Missing-value and completeness triage for a survey export")
    parser.add_argument("path", help="CSV or TSV file to triage")
    parser.add_argument("--treat-empty-as-missing", action="store_true",
                        help="Also treat empty strings as missing")
    parser.add_argument("--token", action="append", default=[],
                        help="Extra raw value to treat as missing (repeatable)")
    parser.add_argument("--case-insensitive", action="store_true", help="Match tokens ignoring case")
    parser.add_argument("--strip-whitespace", action="store_true", help="Trim cells before matching")
    parser.add_argument("--one-based", action="store_true", help="Report 1-based row indices")
    parser.add_argument("--segments", type=int, default=10, help="Number of row segments to summarize")
    parser.add_argument("--engine", choices=["pandas", "polars"], default="pandas")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log = logging.getLogger("survey_triage")

    rules = rules_from_options({
        "": args.treat_empty_as_missing,
        "extra_tokens": args.token,
        "case_sensitive": not args.case_insensitive,
        "strip_whitespace": args.strip_whitespace,
    })
    log.info("triage path=%s rules=%s", args.path, rules.describe())

    outcome = triage_file(
        args.path, rules=rules, index_base=1 if args.one_based else 0,
        segments=args.segments, engine=args.engine,
    )
    if args.json:
        print(outcome.report.to_json(indent=2))
    else:
        print(outcome.report.to_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
