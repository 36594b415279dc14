#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates synthetic credential-manager CSV exports with a configurable
number of rows. Column layout mimics common exporters:

    name,url,username,password,notes

A share of rows can be made "dirty" to exercise the import rules:
- empty service (defaulted to "Imported" on import)
- empty password (row dropped on import)
- quoted fields with embedded commas and doubled quotes
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

SITES = ["Bank", "Mail", "Shop", "Forum", "Cloud", "Router", "Work VPN", "Streaming"]
DOMAINS = ["example.com", "example.org", "mail.test", "shop.test"]


def generate_credentials(rows: int, dirty_ratio: float = 0.05, seed: int = 42) -> pd.DataFrame:
    """Generate synthetic credential rows.

    Args:
        rows: Number of data rows to generate
        dirty_ratio: Share of rows with an empty service, and separately with an empty password
        seed: Random seed for reproducible data

    Returns:
        DataFrame with columns name, url, username, password, notes
    """
    rng = np.random.default_rng(seed)

    site_idx = rng.integers(0, len(SITES), rows)
    domain_idx = rng.integers(0, len(DOMAINS), rows)
    names = [f"{SITES[s]} {i}" for i, s in enumerate(site_idx)]
    urls = [f"https://{SITES[s].lower().replace(' ', '')}.{DOMAINS[d]}" for s, d in zip(site_idx, domain_idx)]
    usernames = [f"user{i}@{DOMAINS[d]}" for i, d in enumerate(domain_idx)]
    passwords = [f"pw-{v:08x}" for v in rng.integers(0, 2**32, rows)]
    notes = np.where(rng.random(rows) < 0.2, 'has "quotes", and commas', "").tolist()

    no_service = rng.random(rows) < dirty_ratio
    no_password = rng.random(rows) < dirty_ratio
    for i in np.flatnonzero(no_service):
        names[i] = ""
    for i in np.flatnonzero(no_password):
        passwords[i] = ""

    return pd.DataFrame(
        {"name": names, "url": urls, "username": usernames, "password": passwords, "notes": notes}
    )


def create_csv_file(output_path: Path, rows: int, dirty_ratio: float, seed: int = 42) -> int:
    """Write the export and return the number of rows expected to import."""
    df = generate_credentials(rows, dirty_ratio, seed)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # pandas quotes fields containing commas/quotes and doubles embedded quotes
    df.to_csv(output_path, index=False, lineterminator="\n")
    importable = int((df["password"] != "").sum())
    print(f"Created CSV file: {output_path}")
    print(f"  Data rows: {rows:,}")
    print(f"  Rows with a password (importable): {importable:,}")
    return importable


def main() -> int:
    """Main CLI interface for dataset generation."""
    parser = argparse.ArgumentParser(
        description="Generate synthetic credential CSV exports for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate default 50k rows
  %(prog)s export.csv

  # Larger file, 10% dirty rows
  %(prog)s big.csv --rows 500000 --dirty 0.1
        """
    )
    parser.add_argument("output", type=Path, help="Output CSV file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument(
        "--dirty", type=float, default=0.05, help="Share of rows with missing service/password (default: 0.05)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data (default: 42)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be generated without creating files"
    )
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.dirty <= 1:
        print("Error: --dirty must be between 0 and 1", file=sys.stderr)
        return 1

    print("Dataset generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Data rows: {args.rows:,}")
    print(f"  Dirty ratio: {args.dirty}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate the file but not creating it.")
        return 0

    try:
        create_csv_file(args.output, args.rows, args.dirty, args.seed)
    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
