"""Token mint resolution."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from solplace.core.errors import InvalidTokenMint, UninitializedMint
from solplace.models.token_mint import TokenMint


class TokenRegistry:
    """Resolve and register the token mints placements may reference."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, address: bytes) -> TokenMint | None:
        return self.session.execute(
            select(TokenMint).where(TokenMint.address == address)
        ).scalars().first()

    def resolve(self, mint_account: bytes, token_mint: bytes) -> TokenMint:
        """Return the mint at `mint_account`, checking it is the one referenced.

        Raises:
            InvalidTokenMint: the account is unknown or differs from `token_mint`.
            UninitializedMint: the mint exists but was never initialised.
        """
        mint = self.get(mint_account)
        if mint is None:
            raise InvalidTokenMint()
        if not mint.is_initialized:
            raise UninitializedMint()
        if mint.address != token_mint:
            raise InvalidTokenMint("Invalid token mint: reference does not match the mint account")
        return mint

    def register(
        self,
        address: bytes,
        *,
        decimals: int = 0,
        supply: int = 0,
        is_initialized: bool = True,
        mint_authority: bytes | None = None,
    ) -> TokenMint:
        """Create or update a mint entry."""
        mint = self.get(address)
        if mint is None:
            mint = TokenMint(address=address)
            self.session.add(mint)
        mint.decimals = decimals
        mint.supply = supply
        mint.is_initialized = is_initialized
        mint.mint_authority = mint_authority
        self.session.flush()
        return mint
