"""
Error hierarchy for activity verification.

Only AddressValidationError is allowed to leave the core; ChainError
subclasses are collapsed to a negative result by each verifier.
"""


class ActivityError(Exception):
    """Base error for the activity verifier."""


class AddressValidationError(ActivityError, ValueError):
    """Input address is not a well-formed EVM address."""

    def __init__(self, address: object, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid Ethereum address {address!r}: {reason}")


class ChainError(ActivityError):
    """A chain query could not produce an answer."""


class ChainConnectionError(ChainError, ConnectionError):
    """Endpoint unreachable, timed out, or returned malformed data."""

    def __init__(self, network: str, message: str):
        self.network = network
        super().__init__(f"[{network}] {message}")


class ContractError(ChainError):
    """Target event/function missing, call reverted, or output undecodable."""
