"""
Contract CLI
Perimeter

Validate a JSON data file against a contract from a definition file.

    perimeter-validate --contracts contracts.yaml --contract create_user --file user.json
"""

import argparse
import json
import sys

from common.config import get_settings
from common.structured_logging import configure_logging
from contracts.loader import ContractDefinitionError, load_contracts
from contracts.report import format_report
from contracts.validator import validate

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perimeter-validate",
        description="Validate data against a contract",
    )
    parser.add_argument(
        "--contracts",
        help="Contract definition file (.yaml/.yml/.json); defaults to the contracts_path setting"
    )
    parser.add_argument(
        "--contract",
        required=True,
        help="Name of the contract to validate against"
    )
    parser.add_argument(
        "--file",
        required=True,
        help="JSON file to validate"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with error code on validation failure"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print violations as JSON instead of a report"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI for validating data against contracts."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_dir)

    contracts_path = args.contracts or settings.contracts_path
    if not contracts_path:
        print("Error: no contract file given (--contracts or PERIMETER_CONTRACTS)", file=sys.stderr)
        return EXIT_USAGE

    try:
        registry = load_contracts(contracts_path)
    except (OSError, ContractDefinitionError) as e:
        print(f"Error loading contracts: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        with open(args.file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        return EXIT_USAGE

    result = validate(registry, args.contract, data)

    if result.valid:
        print(f"Validation PASSED for {args.contract}")
        return EXIT_OK

    print(f"Validation FAILED for {args.contract}")
    if args.json:
        print(json.dumps([v.to_dict() for v in result.violations], indent=2))
    else:
        print(format_report(result.violations))

    return EXIT_INVALID if args.strict else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
