"""Command-line entry point: ``sf-profile-full``.

Retrieves complete Profile metadata from an org and writes it in source
format.

Examples:
- sf-profile-full --name Admin --name "Custom: Sales Profile"
- sf-profile-full --sourcedir force-app/main/default/profiles --clean
- sf-profile-full --all --org production --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any

from sf_profile_full.adapters.soap import SoapMetadataConnection
from sf_profile_full.config import ConfigFileError, resolve_config
from sf_profile_full.constants import NOT_FOUND_MESSAGE
from sf_profile_full.exceptions import MetadataCallError, ProfileSelectionError
from sf_profile_full.executor import create_executor
from sf_profile_full.frontdoor import resolve_profile_names
from sf_profile_full.telemetry import RecordingReporter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sf_profile_full.config import FrozenConfig
    from sf_profile_full.core.types import RetrieveFullResult

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sf-profile-full",
        description=(
            "Retrieve complete Profile metadata with readMetadata and write it "
            "as <name>.profile-meta.xml files."
        ),
    )
    selector = parser.add_mutually_exclusive_group(required=True)
    selector.add_argument(
        "-n",
        "--name",
        action="append",
        metavar="NAME",
        help="Profile name to retrieve; repeatable, comma-separated values allowed",
    )
    selector.add_argument(
        "-s",
        "--sourcedir",
        metavar="DIR",
        help="Retrieve every profile that has a .profile-meta.xml file under DIR",
    )
    selector.add_argument(
        "-a",
        "--all",
        action="store_true",
        dest="all_profiles",
        help="Retrieve every profile in the org",
    )
    parser.add_argument(
        "-d",
        "--output-dir",
        metavar="DIR",
        help="Directory for the written files (default: force-app/main/default/profiles)",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        default=None,
        help="Remove loginIpRanges, userLicense and loginHours before writing",
    )
    parser.add_argument("--org", help="Named org section from the configuration files")
    parser.add_argument("--env-file", metavar="PATH", help="Read SF_PROFILE_* from a .env file")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.clean:
        overrides["clean"] = True
    return overrides


def format_table(result: RetrieveFullResult) -> str:
    """Render outcomes as a plain-text table."""
    header = ("Profile", "Status", "File Path", "Error")
    rows = [
        (
            p.name,
            "✓" if p.success else "✗",
            str(p.file_path) if p.file_path else "",
            p.error or "",
        )
        for p in result.profiles
    ]
    widths = [max(len(row[i]) for row in (header, *rows)) for i in range(len(header))]

    def line(row: tuple[str, ...]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(row, widths, strict=True)).rstrip()

    return "\n".join([line(header), line(tuple("─" * w for w in widths)), *map(line, rows)])


def print_outcomes(result: RetrieveFullResult) -> None:
    """Print one line per outcome, the summary line and the table."""
    for outcome in result.profiles:
        if outcome.success:
            print(f"  ✓ {outcome.name} → {outcome.file_path}")
        elif outcome.error == NOT_FOUND_MESSAGE:
            print(f"  ✗ {outcome.name}: Profile not found in org", file=sys.stderr)
        else:
            print(f"  ✗ {outcome.name}: {outcome.error}", file=sys.stderr)
    print()
    print(f"Done. {result.total_success} succeeded, {result.total_failed} failed.")
    if result.profiles:
        print(format_table(result))


async def run(
    args: argparse.Namespace,
    config: FrozenConfig,
    reporters: Sequence[RecordingReporter] = (),
) -> RetrieveFullResult:
    """Resolve the selection and run the retrieval for parsed arguments."""
    async with SoapMetadataConnection.from_config(config) as connection:
        executor = create_executor(connection, config, telemetry_reporters=reporters)
        if args.all_profiles and not args.json:
            print("Querying org for all profiles...")
        names = await resolve_profile_names(
            args.name,
            source_dir=args.sourcedir,
            all_profiles=args.all_profiles,
            service=executor.service,
        )
        if not args.json:
            if args.sourcedir:
                print(f"Found {len(names)} profile(s) in {args.sourcedir}")
            elif args.all_profiles:
                print(f"Found {len(names)} profile(s) in org.")
            print(f"Retrieving {len(names)} profile(s) from {config.instance_url}...")
        return await executor.execute(names)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        resolved = resolve_config(
            _overrides(args), org=args.org, use_env_file=args.env_file
        )
    except (ValueError, ConfigFileError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE
    if args.verbose:
        print(resolved.audit(), file=sys.stderr)

    reporters = [RecordingReporter()] if args.verbose else []
    try:
        result = asyncio.run(run(args, resolved.to_frozen(), reporters))
    except (ValueError, ProfileSelectionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except MetadataCallError as e:
        log.error("Retrieval aborted: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_outcomes(result)
    for reporter in reporters:
        # Empty unless SF_PROFILE_TELEMETRY=1
        if reporter.timings or reporter.metrics:
            print(reporter.get_report(), file=sys.stderr)

    return EXIT_OK if result.ok else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
