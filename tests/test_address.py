"""
Tests for EVM address validation.
"""

import pytest

from ozean_activity.address import ZERO_ADDRESS, address_problem, is_valid_address, validate_address
from ozean_activity.errors import AddressValidationError

CHECKSUMMED = "0x73cb4Cf464Ba30bBB369Ce7AC58C0e1B1920EAF6"


class TestValidateAddress:
    """Tests for validate_address."""

    def test_checksummed_address(self):
        assert validate_address(CHECKSUMMED) == CHECKSUMMED

    def test_lowercase_is_checksummed(self):
        assert validate_address(CHECKSUMMED.lower()) == CHECKSUMMED

    def test_uppercase_body_is_checksummed(self):
        assert validate_address("0x" + CHECKSUMMED[2:].upper()) == CHECKSUMMED

    def test_zero_address(self):
        assert validate_address(ZERO_ADDRESS) == ZERO_ADDRESS

    def test_bare_hex_without_prefix(self):
        """The 0x prefix is optional; the result is always prefixed."""
        assert validate_address(CHECKSUMMED[2:]) == CHECKSUMMED
        assert validate_address(CHECKSUMMED[2:].lower()) == CHECKSUMMED
        assert is_valid_address(CHECKSUMMED[2:])

    @pytest.mark.parametrize(
        "address,reason",
        [
            ("", "empty"),
            ("0x73cb4Cf464", "40 hex digits, got 10"),
            ("73cb4Cf464Ba30bBB369Ce7AC58C0e1B1920EA", "40 hex digits, got 38"),
            ("73CB4cf464Ba30bBB369Ce7AC58C0e1B1920EAF6", "checksum"),
            ("0xgg" + "0" * 38, "non-hex"),
            ("0x73CB4cf464Ba30bBB369Ce7AC58C0e1B1920EAF6", "checksum"),
        ],
    )
    def test_invalid_addresses(self, address: str, reason: str):
        with pytest.raises(AddressValidationError, match=reason):
            validate_address(address)

    def test_error_is_value_error(self):
        """Callers catching ValueError also see validation failures."""
        with pytest.raises(ValueError):
            validate_address("0x1234")

    def test_error_carries_address(self):
        with pytest.raises(AddressValidationError) as exc_info:
            validate_address("0x1234")
        assert exc_info.value.address == "0x1234"
        assert "40 hex digits" in exc_info.value.reason

    def test_non_string(self):
        assert address_problem(None) == "address must be a string"
        assert not is_valid_address(42)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
