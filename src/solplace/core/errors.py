"""Error taxonomy for placement attempts.

Every failure is terminal for the attempt that raised it. Codes use Anchor-style
custom-error numbering (6000 + declaration order); clients can match on
either the name or the number.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorCategory(str, Enum):
    """Coarse grouping used for HTTP mapping and metrics labels."""

    INPUT = "input"
    ADDRESS = "address"
    RATE_LIMIT = "rate_limit"
    CAPACITY = "capacity"
    PAYMENT = "payment"
    ACCOUNT = "account"


class PlacementError(RuntimeError):
    """Base exception for all placement failures."""

    code: ClassVar[int] = 6000
    category: ClassVar[ErrorCategory] = ErrorCategory.INPUT
    http_status: ClassVar[int] = 400
    default_message: ClassVar[str] = "Placement failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def name(self) -> str:
        """Return the error kind as exposed to clients."""
        return type(self).__name__

    def to_dict(self) -> dict[str, object]:
        """Serialize the error for API responses."""
        return {
            "code": self.code,
            "error": self.name,
            "category": self.category.value,
            "message": self.message,
        }


class InvalidLatitude(PlacementError):
    code = 6000
    default_message = "Invalid coordinates: latitude must be between -90° and +90°"


class InvalidLongitude(PlacementError):
    code = 6001
    default_message = "Invalid coordinates: longitude must be between -180° and +180°"


class InvalidCoordinates(PlacementError):
    code = 6002
    default_message = "Invalid coordinates provided"


class InvalidTokenMint(PlacementError):
    code = 6003
    default_message = "Invalid token mint: account does not exist or is not a valid SPL token"


class UninitializedMint(PlacementError):
    code = 6004
    default_message = "Token mint is not initialized"


class UserOnCooldown(PlacementError):
    code = 6005
    category = ErrorCategory.RATE_LIMIT
    http_status = 429
    default_message = "User is still on cooldown. Please wait before placing another logo"


class LogoUriTooLong(PlacementError):
    code = 6006
    default_message = "Logo URI is too long. Maximum 200 characters allowed"


class InsufficientFunds(PlacementError):
    code = 6007
    category = ErrorCategory.PAYMENT
    http_status = 402
    default_message = "Insufficient funds to pay placement fee"


class InvalidTreasury(PlacementError):
    code = 6008
    category = ErrorCategory.PAYMENT
    default_message = "Invalid treasury account"


class InvalidLogoPlacement(PlacementError):
    code = 6009
    category = ErrorCategory.ADDRESS
    default_message = "Invalid logo placement address"


class InvalidCooldown(PlacementError):
    code = 6010
    category = ErrorCategory.ADDRESS
    default_message = "Invalid cooldown address"


class InvalidAccount(PlacementError):
    code = 6011
    category = ErrorCategory.ACCOUNT
    http_status = 422
    default_message = "Invalid account: discriminator mismatch"


class ClusterFull(PlacementError):
    code = 6012
    category = ErrorCategory.CAPACITY
    http_status = 409
    default_message = "Cluster is full. No room for a new coordinate in this area"


class InvalidCluster(PlacementError):
    code = 6013
    category = ErrorCategory.ADDRESS
    default_message = "Invalid cluster address"


ALL_ERRORS: tuple[type[PlacementError], ...] = (
    InvalidLatitude,
    InvalidLongitude,
    InvalidCoordinates,
    InvalidTokenMint,
    UninitializedMint,
    UserOnCooldown,
    LogoUriTooLong,
    InsufficientFunds,
    InvalidTreasury,
    InvalidLogoPlacement,
    InvalidCooldown,
    InvalidAccount,
    ClusterFull,
    InvalidCluster,
)
