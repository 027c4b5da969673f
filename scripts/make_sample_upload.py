#!/usr/bin/env python
from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dashboard_backend.core.csvio import UPLOAD_TEMPLATE_FIELDS


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample workflow upload CSV")
    parser.add_argument("--output", required=True, help="output file path (.csv)")
    parser.add_argument("--asin", default="B08XYZ1234", help="PB C-ASIN of the sample row")
    parser.add_argument("--gl", default="Home", help="GL of the sample row")
    parser.add_argument("--header-only", action="store_true", help="write the header row only")
    args = parser.parse_args()

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    sample = {
        "PB C-ASIN": args.asin,
        "1P C-ASIN": "B07DEF9012",
        "GL": args.gl,
        "positioning": "Comparable",
        "FLC Check": "FLC competitive vs 1P",
        "pricing_recommendation": "Price Match",
        "justification": 'Specs match the 1P item, "price match" recommended.',
        "strategic_priority": "High",
    }

    with output.open("w", newline="", encoding="utf-8") as fp:
        writer = csv.DictWriter(fp, fieldnames=UPLOAD_TEMPLATE_FIELDS)
        writer.writeheader()
        if not args.header_only:
            writer.writerow(sample)

    print(f"Upload CSV written: {output}")


if __name__ == "__main__":
    main()
