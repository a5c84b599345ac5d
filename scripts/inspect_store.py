#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json

from tradedesk.document import COLLECTIONS, USER_COUNTER
from tradedesk.store import create_store_from_env


def main() -> int:
    parser = argparse.ArgumentParser(description="Summarize the persisted document (collection sizes, counter).")
    parser.add_argument("--dump", action="store_true", help="Print the whole document instead of a summary.")
    args = parser.parse_args()

    store = create_store_from_env()
    document = store.snapshot()
    if args.dump:
        print(json.dumps(document, indent=2, ensure_ascii=False))
        return 0
    summary = {name: len(document[name]) for name in COLLECTIONS}
    summary[USER_COUNTER] = document[USER_COUNTER]
    print(json.dumps({"success": True, "location": store.backend.location, "summary": summary}, ensure_ascii=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
