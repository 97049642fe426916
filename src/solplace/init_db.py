"""Create the registry tables and optionally seed a development mint and balances.

Usage:
    python -m solplace.init_db --mint <hex> --airdrop <hex>=<lamports>
"""

from __future__ import annotations

import argparse
import logging

from solplace.db.session import create_tables, drop_tables, session_scope
from solplace.services.ledger import LedgerService
from solplace.services.tokens import TokenRegistry

logger = logging.getLogger(__name__)


def _parse_airdrop(value: str) -> tuple[bytes, int]:
    identity, _, amount = value.partition("=")
    try:
        return bytes.fromhex(identity), int(amount)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"expected <hex>=<lamports>, got {value!r}") from err


def init_db(
    mints: list[bytes] | None = None,
    airdrops: list[tuple[bytes, int]] | None = None,
    *,
    reset: bool = False,
) -> None:
    """Create all tables, then register `mints` and credit `airdrops`.

    With `reset` every table is dropped first.
    """
    if reset:
        drop_tables()
        logger.warning("Dropped all registry tables")
    create_tables()
    if not mints and not airdrops:
        return

    with session_scope() as session:
        tokens = TokenRegistry(session)
        for mint in mints or []:
            tokens.register(mint)
            logger.info("Registered mint %s", mint.hex())
        ledger = LedgerService(session)
        for identity, lamports in airdrops or []:
            balance = ledger.airdrop(identity, lamports)
            logger.info("Airdropped %d lamports to %s (balance %d)", lamports, identity.hex(), balance)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--mint", action="append", default=[], type=bytes.fromhex, help="hex mint address")
    parser.add_argument(
        "--airdrop",
        action="append",
        default=[],
        type=_parse_airdrop,
        help="credit an identity, as <hex>=<lamports>",
    )
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    init_db(args.mint, args.airdrop, reset=args.reset)
    print("Database initialized.")


if __name__ == "__main__":
    main()
