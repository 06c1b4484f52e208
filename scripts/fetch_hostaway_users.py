#!/usr/bin/env python
"""Print the Hostaway account's users as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from owner_portal.clients import HostawayClient, HostawayTokenCache  # noqa: E402
from owner_portal.core.config import get_settings  # noqa: E402
from owner_portal.core.errors import VendorError  # noqa: E402
from owner_portal.core.logging import configure_logging  # noqa: E402


async def fetch_users() -> dict:
    settings = get_settings().hostaway
    client = HostawayClient(settings, HostawayTokenCache(settings))
    return await client.get_users()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--indent", type=int, default=2, help="JSON indentation (default: 2)."
    )
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)

    try:
        users = asyncio.run(fetch_users())
    except VendorError as exc:
        print(f"Fetching users failed: {exc.message}", file=sys.stderr)
        return 1

    print(json.dumps(users, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
