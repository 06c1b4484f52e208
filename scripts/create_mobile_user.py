#!/usr/bin/env python
"""Create a portal (mobile app) account linked to a Hostaway user."""

from __future__ import annotations

import argparse
import getpass
import sys
import uuid
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from owner_portal.clients import PortalStore  # noqa: E402
from owner_portal.core.config import get_settings  # noqa: E402
from owner_portal.services.auth import account_details, hash_password  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name")
    parser.add_argument("--hostaway-id", required=True, type=int)
    parser.add_argument(
        "--password",
        help="Account password; prompted for when omitted.",
    )
    parser.add_argument("--revenue-sharing", type=int)
    parser.add_argument("--referral-code")
    parser.add_argument(
        "--listing-id",
        type=int,
        action="append",
        default=[],
        help="Map the Hostaway user to a listing (repeatable).",
    )
    parser.add_argument(
        "--db-path",
        help="SQLite database path (defaults to DATABASE_PATH).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    store = PortalStore(args.db_path or get_settings().database.path)

    if store.get_mobile_user_by_email(args.email) is not None:
        print(f"A user with email {args.email} already exists.", file=sys.stderr)
        return 1

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("A password is required.", file=sys.stderr)
        return 1

    user = store.create_mobile_user(
        hostaway_id=args.hostaway_id,
        first_name=args.first_name,
        last_name=args.last_name,
        email=args.email,
        password_hash=hash_password(password),
        user_id=uuid.uuid4().hex,
        revenue_sharing=args.revenue_sharing,
        referral_code=args.referral_code,
    )
    for listing_id in args.listing_id:
        store.upsert_hostaway_user(ha_user_id=args.hostaway_id, listing_id=listing_id)

    print(f"Created user {account_details(user)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
