"""Command-line interface for contactmerge."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..config import OrganizerConfig
from ..core.record import Record
from ..organizer import ContactOrganizer, AnalysisSnapshot
from ..store.memory import InMemoryRecordStore


def load_records(path: str) -> List[Record]:
    """Load records from a JSON file holding an array of record objects.

    Args:
        path: Path to the JSON file

    Returns:
        The records, in file order

    Raises:
        ValueError: If the file does not hold a JSON array
    """
    with open(path, encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of contact records")

    return [Record.from_dict(item) for item in data]


def load_config(path: Optional[str]) -> OrganizerConfig:
    """Load configuration overrides from a JSON object, or the defaults."""
    if not path:
        return OrganizerConfig()
    with open(path, encoding='utf-8') as f:
        return OrganizerConfig.from_dict(json.load(f))


def print_summary(snapshot: AnalysisSnapshot) -> None:
    """Print the health summary and record statistics.

    Args:
        snapshot: Analysis results to display
    """
    stats = snapshot.statistics
    summary = snapshot.summary

    print("\n" + "=" * 60)
    print("CONTACT HEALTH SUMMARY")
    print("=" * 60)
    print(f"Total Contacts:         {stats.total_contacts:,}")
    print(f"With Phone:             {stats.with_phone:,}")
    print(f"With Email:             {stats.with_email:,}")
    print(f"With Organization:      {stats.with_organization:,}")
    print(f"With Photo:             {stats.with_photo:,}")
    print()
    print(f"Health Score:           {summary.health_score:.1f}")
    print(f"High Severity:          {summary.high_severity_count:,}")
    print(f"Medium Severity:        {summary.medium_severity_count:,}")
    print(f"Low Severity:           {summary.low_severity_count:,}")
    print(f"Suggestions:            {summary.suggestion_count:,}")
    print(f"Duplicate Groups:       {len(snapshot.groups):,}")
    print("=" * 60 + "\n")


def print_issues(snapshot: AnalysisSnapshot, limit: int) -> None:
    """Print the worst issues first."""
    if not snapshot.issues:
        print("No data quality issues found.")
        return

    print("ISSUES:")
    print("-" * 60)
    for issue in snapshot.issues[:limit]:
        print(f"  {issue}")

    if len(snapshot.issues) > limit:
        print(f"\n... and {len(snapshot.issues) - limit} more issues")
    print("-" * 60 + "\n")


def _analyze_file(args: argparse.Namespace) -> Optional[ContactOrganizer]:
    filepath = args.file

    if not Path(filepath).exists():
        print(f"Error: File not found: {filepath}", file=sys.stderr)
        return None

    try:
        config = load_config(args.config)
        records = load_records(filepath)
        store = InMemoryRecordStore(records, archive_group=config.archive_group)
    except (OSError, ValueError, KeyError) as e:
        print(f"Error processing file: {e}", file=sys.stderr)
        return None

    organizer = ContactOrganizer(store, config)
    organizer.refresh()
    return organizer


def analyze_command(args: argparse.Namespace) -> int:
    """Execute the analyze command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    organizer = _analyze_file(args)
    if organizer is None:
        return 1

    print_summary(organizer.snapshot)
    print_issues(organizer.snapshot, args.limit)
    return 0


def find_duplicates_command(args: argparse.Namespace) -> int:
    """Execute the find-duplicates command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    organizer = _analyze_file(args)
    if organizer is None:
        return 1

    groups = organizer.snapshot.groups
    if not groups:
        print("No duplicate contacts found.")
        return 0

    print(f"\nFound {len(groups)} duplicate groups:\n")
    for i, group in enumerate(groups, 1):
        print(f"{i}. {group}")
        for record in group.records:
            print(f"   - {record.id}: {record}")
        print(_indent(str(organizer.build_plan(group)), "   "))
        print()
    return 0


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='contactmerge',
        description='A tool to find duplicate contacts and data quality issues in contact records.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '-c', '--config',
        help='JSON file with configuration overrides'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands'
    )

    analyze_parser = subparsers.add_parser(
        'analyze',
        help='Show the health summary and data quality issues'
    )
    analyze_parser.add_argument(
        'file',
        help='Path to a JSON array of contact records'
    )
    analyze_parser.add_argument(
        '-n', '--limit',
        type=int,
        default=50,
        help='Maximum number of issues to display (default: 50)'
    )

    find_parser = subparsers.add_parser(
        'find-duplicates',
        help='Show duplicate contact groups and their merge plans'
    )
    find_parser.add_argument(
        'file',
        help='Path to a JSON array of contact records'
    )

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return 0

    if args.command == 'analyze':
        return analyze_command(args)
    elif args.command == 'find-duplicates':
        return find_duplicates_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
