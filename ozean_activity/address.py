"""
EVM address validation utilities.

Accepts 40 hex digit addresses with or without a 0x prefix. All-lowercase
and all-uppercase forms are taken as-is; mixed case must carry a valid
EIP-55 checksum.
"""

import re
from typing import Optional

from web3 import Web3

from .errors import AddressValidationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def address_problem(address: object) -> Optional[str]:
    """
    Check an address syntactically.

    Returns a human-readable reason if invalid, None if valid.
    """
    if not isinstance(address, str):
        return "address must be a string"
    if not address:
        return "address is empty"
    if Web3.is_address(address):
        return None

    # Invalid: work out why for the error message
    body = address[2:] if address[:2] in ("0x", "0X") else address
    if len(body) != 40:
        return f"expected 40 hex digits, got {len(body)}"
    if not _HEX_RE.match(body):
        return "contains non-hex characters"
    return "mixed-case address has an invalid checksum"


def validate_address(address: object) -> str:
    """
    Validate an EVM address and return its checksummed form.

    Raises:
        AddressValidationError: if the address is malformed
    """
    reason = address_problem(address)
    if reason is not None:
        raise AddressValidationError(address, reason)
    return Web3.to_checksum_address(address)


def is_valid_address(address: object) -> bool:
    """Return True if the address passes syntactic validation."""
    return address_problem(address) is None
