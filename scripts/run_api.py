#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging

import uvicorn

from tradedesk.main import create_app
from tradedesk.runtime_profile import env_int, env_str


def main() -> int:
    parser = argparse.ArgumentParser(description="Serve the TradeDesk API.")
    parser.add_argument("--host", default=env_str("TRADEDESK_HOST", default="0.0.0.0"))
    parser.add_argument("--port", type=int, default=env_int("TRADEDESK_PORT", default=5000, minimum=1))
    args = parser.parse_args()

    logging.basicConfig(
        level=env_str("TRADEDESK_LOG_LEVEL", default="INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
