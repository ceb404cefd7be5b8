"""Exception types raised by the settlement encoding library.

Every error is an input/programmer error: nothing here is retried, and each
one is raised at the call that violates the contract.
"""

from __future__ import annotations


class EncodingError(ValueError):
    """Base class for all encoding errors."""


class InvalidOrder(EncodingError):
    """Raised when an order field cannot be normalized."""


class InvalidTrade(EncodingError):
    """Raised when a wire trade cannot be decoded back into an order."""


class InvalidSignature(EncodingError):
    """Raised when signature data has the wrong shape for its scheme."""


class MissingExecutedAmount(EncodingError):
    """Raised when a partially fillable order is encoded without a fill amount."""


class UnsupportedSigningScheme(EncodingError):
    """Raised when a signing scheme is outside the defined set."""


class InvalidFlags(EncodingError):
    """Raised when a flag value or flag integer is outside the defined options."""


class InvalidOrderUid(EncodingError):
    """Raised when an order UID is not exactly 56 bytes."""


class MissingPrice(EncodingError):
    """Raised when a settlement token has no clearing price."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"missing price for token {token}")


class MissingVerifyingContract(EncodingError):
    """Raised when order refunds are encoded for a domain without a settlement address."""


class TradeNotEncoded(EncodingError):
    """Raised when a swap payload is requested before its trade was encoded."""


class EncoderFinalized(EncodingError):
    """Raised when a finalized encoder is mutated or finalized a second time."""
