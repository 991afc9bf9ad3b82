#!/usr/bin/env python3
"""
Firestore Index Manifest

Prints the composite indexes the direct-query range filters need, in
firestore.indexes.json form, using the collection and field names from the
active configuration.

Usage:
    python scripts/print_firestore_indexes.py [--output firestore.indexes.json]
"""

import argparse
import json
import sys


def main():
    parser = argparse.ArgumentParser(description="Print the Firestore composite indexes the query core needs")
    parser.add_argument("--output", type=str, default="", help="Write to this file instead of stdout")
    args = parser.parse_args()

    from lifelog.common.config import load_config
    from lifelog.common.firestore_store import required_indexes

    config = load_config()
    manifest = {
        "indexes": required_indexes(config.store),
        "fieldOverrides": [],
    }
    text = json.dumps(manifest, indent=2)

    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        print(f"[Indexes] Wrote {len(manifest['indexes'])} indexes to {args.output}", file=sys.stderr)
    else:
        print(text)


if __name__ == "__main__":
    main()
