"""
Error taxonomy for the intent pipeline.

Three families, none of which are retried automatically:
- ClassificationError: oracle transport/status failures and unusable replies
- TransactionError: chain gateway failures
- SessionError: wallet session preconditions

Every error that reaches the agent boundary is converted into a failed
IntentResult; nothing here is meant to escape to an HTTP client raw.
"""

from typing import Optional


class AgentError(Exception):
    """Base exception for all pipeline errors."""
    pass


# =============================================================================
# Classification / oracle
# =============================================================================

class ClassificationError(AgentError):
    """The oracle could not produce a usable classification or reply."""
    pass


class HttpFailureError(ClassificationError):
    """The oracle request never produced an HTTP response."""
    pass


class NonSuccessStatusError(ClassificationError):
    """The oracle answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"API request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class MalformedJsonError(ClassificationError):
    """No parseable JSON object could be extracted from the oracle reply."""

    def __init__(self, message: str, raw_reply: str = ""):
        super().__init__(message)
        self.raw_reply = raw_reply


class NoChoicesError(ClassificationError):
    """The oracle response carried no candidate text."""
    pass


# =============================================================================
# Chain gateway
# =============================================================================

class TransactionError(AgentError):
    """Base exception for chain gateway failures."""
    pass


class NoReceiptError(TransactionError):
    """A submitted transaction produced no receipt."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class AddressNotFoundError(TransactionError):
    """
    The transaction was mined but the created resource could not be located
    in its logs. The on-chain effect happened; only the address is unknown.
    """

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ChainCallFailedError(TransactionError):
    """An RPC call or transaction submission failed."""
    pass


class ReadOnlyViolationError(TransactionError):
    """A mutating call was attempted on a read-only gateway."""
    pass


class InvalidAddressFormatError(TransactionError):
    """An identifier is not a well-formed EVM address."""

    def __init__(self, value: str):
        super().__init__(f"Invalid address format: {value!r}")
        self.value = value


# =============================================================================
# Wallet session
# =============================================================================

class SessionError(AgentError):
    """Base exception for wallet session errors."""
    pass


class NotConnectedError(SessionError):
    """The operation requires a connected wallet and none is present."""

    def __init__(self, message: str = "No wallet connected"):
        super().__init__(message)


__all__ = [
    "AgentError",
    "ClassificationError",
    "HttpFailureError",
    "NonSuccessStatusError",
    "MalformedJsonError",
    "NoChoicesError",
    "TransactionError",
    "NoReceiptError",
    "AddressNotFoundError",
    "ChainCallFailedError",
    "ReadOnlyViolationError",
    "InvalidAddressFormatError",
    "SessionError",
    "NotConnectedError",
]
