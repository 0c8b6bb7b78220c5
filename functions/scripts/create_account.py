"""
CLI helper to register an account without going through the HTTP API.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.credentials import CredentialService
from portal.dependencies import get_db_client, get_password_hasher
from portal.exceptions import PortalError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Register a portal account")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--email", required=True, help="Login email")
    parser.add_argument("--role", required=True, help="Role tag, e.g. senior")
    parser.add_argument(
        "--password",
        type=str,
        default=None,
        help="Password (prompted for when omitted)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    password = args.password or getpass.getpass("Password: ")
    service = CredentialService(get_db_client(), get_password_hasher())
    try:
        account = service.signup(args.name, args.email, password, args.role)
    except PortalError as exc:
        logger.error("Could not register %s: %s", args.email, exc.message)
        return 1
    logger.info("Registered account %s (%s)", account.id, account.email)
    return 0


if __name__ == "__main__":
    sys.exit(main())
