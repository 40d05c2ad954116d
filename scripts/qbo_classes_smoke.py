"""Smoke test: list (and optionally create) QuickBooks Online classes.

Prereqs:
- A saved OAuth token file (see QBO_TOKENS_PATH)

Env vars:
- QBO_CLIENT_ID
- QBO_CLIENT_SECRET
- QBO_ENVIRONMENT (sandbox|production) [default: sandbox]
- QBO_TOKENS_PATH (optional)           [default: .env_qbo_tokens.json]

Run:
  python scripts/qbo_classes_smoke.py --limit 5
  python scripts/qbo_classes_smoke.py --create "Retail"
"""

from __future__ import annotations

import argparse
import logging

from qbo_resources import QBOConnection, QuickBooksClass


def main() -> None:
    parser = argparse.ArgumentParser(description="List or create QBO classes")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--name", help="Look up a single class by Name")
    parser.add_argument("--create", metavar="NAME", help="Create a class with this Name")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    classes = QuickBooksClass(QBOConnection.from_env())

    if args.create:
        new_id = classes.create({"Name": args.create})
        if new_id is False:
            raise SystemExit(f"Create failed ({classes.get_error_code()}): {classes.get_error()}")
        print(f"Created Class {args.create!r} with Id {new_id}")

    if args.name:
        found = classes.find_by("Name", args.name)
        print(found if found else f"[no Class named {args.name!r}]")
        return

    rows = classes.query(offset=0, limit=args.limit, projection="Id, Name, Active")
    if classes.has_error():
        raise SystemExit(f"Query failed ({classes.get_error_code()}): {classes.get_error()}")

    print(f"Found {len(rows)} class(es)")
    for row in rows:
        print(f"- {row.get('Id')}: {row.get('Name')} (active={row.get('Active')})")


if __name__ == "__main__":
    main()
