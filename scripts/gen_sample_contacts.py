#!/usr/bin/env python3
"""Generate a synthetic contact spreadsheet (csv / xlsx / ods).

The file contains duplicate names, blank cells and a handful of schools so
every analysis (duplicates, grouping, missing data, contacts) has output.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from contact_sheet.sample_data import write_sample_file


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic contact spreadsheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/contacts.csv
  %(prog)s data/contacts.xlsx --rows 20000 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.csv, .xlsx or .ods)")
    parser.add_argument("--rows", type=int, default=1_000, help="Number of data rows (default: 1,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    try:
        path = write_sample_file(args.output, args.rows, seed=args.seed)
    except (OSError, ValueError) as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    print(f"Created {path} ({args.rows:,} rows)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
