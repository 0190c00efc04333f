"""
Pydantic models for activity results and API responses.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Core Results
# ============================================================================

class ActivityResult(BaseModel):
    """Outcome of the three activity checks for one address."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bridging: bool = Field(..., description="BridgeDeposit found on Sepolia")
    staking: bool = Field(..., description="Non-zero staking shares on Ozean")
    token_wrapping: bool = Field(
        ...,
        alias="tokenWrapping",
        description="Mint transfer to the address found on Ozean",
    )

    @property
    def eligible(self) -> bool:
        """Eligible only when all three activities were detected."""
        return self.bridging and self.staking and self.token_wrapping


# ============================================================================
# Single Check
# ============================================================================

class CheckResultData(BaseModel):
    """Boolean result of one check."""

    result: bool = Field(..., description="Whether the activity was detected")


class CheckResponse(BaseModel):
    """Response for a single activity or eligibility check."""

    data: CheckResultData

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"data": {"result": True}}
            ]
        }
    }


# ============================================================================
# All Activities
# ============================================================================

class ActivitiesData(BaseModel):
    """All three checks plus the derived eligibility."""

    result: ActivityResult
    eligible: bool = Field(..., description="True when all three checks passed")


class ActivitiesResponse(BaseModel):
    """Response for the combined activity check."""

    data: ActivitiesData

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "data": {
                        "result": {"bridging": True, "staking": False, "tokenWrapping": False},
                        "eligible": False,
                    }
                }
            ]
        }
    }


# ============================================================================
# Request Body
# ============================================================================

class AddressRequest(BaseModel):
    """Optional JSON body carrying the address to check."""

    address: Optional[str] = Field(None, description="EVM address (0x...)")


# ============================================================================
# Errors / Health
# ============================================================================

class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    error: str = Field(..., description="Error summary")
    details: str = Field(..., description="Human-readable failure reason")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    networks: dict[str, bool] = Field(..., description="RPC connectivity per network")
    contracts: dict[str, str] = Field(..., description="Configured contract addresses")
