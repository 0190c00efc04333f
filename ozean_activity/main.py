"""
Ozean Activity API - HTTP adapter over the activity verifier.

Provides REST endpoints for:
- Bridge activity (GET/POST /ozean/bridge)
- Staking activity (GET/POST /ozean/stake)
- Token wrapping activity (GET/POST /ozean/wrap)
- All activities + eligibility (GET/POST /ozean/activities, /ozean/eligibility)
- Health checks (GET /health)

Every check endpoint takes the address from ?address=, then from a JSON
body {"address": ...}, then falls back to DEFAULT_ADDRESS.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .errors import ActivityError
from .evm import ChainRegistry
from .models import (
    ActivitiesData,
    ActivitiesResponse,
    CheckResponse,
    CheckResultData,
    ErrorResponse,
    HealthResponse,
)
from .verifier import ActivityVerifier

# Configure logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


# Shared across requests (initialized at startup)
_registry: ChainRegistry | None = None
_verifier: ActivityVerifier | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    global _registry, _verifier

    settings = get_settings()

    _registry = ChainRegistry(settings)
    _verifier = ActivityVerifier(settings, registry=_registry)

    logger.info(
        "API started",
        version=__version__,
        host=settings.host,
        port=settings.port,
        sepolia_rpc=settings.sepolia_rpc_url,
        ozean_rpc=settings.ozean_rpc_url,
    )

    yield

    _verifier = None
    _registry = None

    logger.info("API stopped")


# Create FastAPI app
app = FastAPI(
    title="Ozean Activity API",
    description="Bridge, staking and wrapping activity checks for Ozean rewards",
    version=__version__,
    lifespan=lifespan,
)


# Add CORS middleware
_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ActivityError)
async def activity_error_handler(request: Request, exc: ActivityError) -> JSONResponse:
    """Turn any core error into a 500 with {error, details}."""
    logger.error("Error processing request", path=request.url.path, error=str(exc))
    body = ErrorResponse(error="Failed to process request", details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


# ============================================================================
# Dependencies
# ============================================================================


def get_verifier() -> ActivityVerifier:
    """Get the process-wide verifier."""
    if not _verifier:
        raise HTTPException(status_code=503, detail="Verifier not initialized")
    return _verifier


async def resolve_address(
    request: Request,
    address: Optional[str] = Query(None, description="EVM address to check"),
    settings: Settings = Depends(get_settings),
) -> str:
    """Pick the address from query, then JSON body, then the default."""
    if address:
        return address

    if await request.body():
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("address"):
            return body["address"]

    return settings.default_address


# ============================================================================
# Health Check
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Check API health and connectivity.

    Returns service status and connectivity to both network RPCs.
    """
    networks: dict[str, bool] = {}

    if _registry:
        names = _registry.networks
        reachable = await asyncio.gather(
            *(_registry.get(name).check_connectivity() for name in names)
        )
        networks = dict(zip(names, reachable))

    return HealthResponse(
        status="ok" if networks and all(networks.values()) else "degraded",
        version=__version__,
        networks=networks,
        contracts={
            "bridge": settings.bridge_contract_address,
            "staking": settings.staking_contract_address,
            "token": settings.token_contract_address,
        },
    )


# ============================================================================
# Single Activity Checks
# ============================================================================


@app.api_route("/ozean/bridge", methods=["GET", "POST"], response_model=CheckResponse)
async def bridge_check(
    address: str = Depends(resolve_address),
    verifier: ActivityVerifier = Depends(get_verifier),
) -> CheckResponse:
    """Check for a BridgeDeposit to the address on Sepolia."""
    bridging = await verifier.verify_bridge(address)
    return CheckResponse(data=CheckResultData(result=bridging))


@app.api_route("/ozean/stake", methods=["GET", "POST"], response_model=CheckResponse)
async def stake_check(
    address: str = Depends(resolve_address),
    verifier: ActivityVerifier = Depends(get_verifier),
) -> CheckResponse:
    """Check for non-zero staking shares on Ozean."""
    staking = await verifier.verify_staking(address)
    return CheckResponse(data=CheckResultData(result=staking))


@app.api_route("/ozean/wrap", methods=["GET", "POST"], response_model=CheckResponse)
async def wrap_check(
    address: str = Depends(resolve_address),
    verifier: ActivityVerifier = Depends(get_verifier),
) -> CheckResponse:
    """Check for wrapped tokens minted to the address on Ozean."""
    wrapping = await verifier.verify_wrapping(address)
    return CheckResponse(data=CheckResultData(result=wrapping))


# ============================================================================
# Combined Checks
# ============================================================================


@app.api_route("/ozean/activities", methods=["GET", "POST"], response_model=ActivitiesResponse)
async def activities_check(
    address: str = Depends(resolve_address),
    verifier: ActivityVerifier = Depends(get_verifier),
) -> ActivitiesResponse:
    """Run all three checks and report eligibility."""
    result = await verifier.check_activities(address)
    return ActivitiesResponse(data=ActivitiesData(result=result, eligible=result.eligible))


@app.api_route("/ozean/eligibility", methods=["GET", "POST"], response_model=CheckResponse)
async def eligibility_check(
    address: str = Depends(resolve_address),
    verifier: ActivityVerifier = Depends(get_verifier),
) -> CheckResponse:
    """Report whether the address qualifies for the reward."""
    eligible = await verifier.is_eligible(address)
    return CheckResponse(data=CheckResultData(result=eligible))


# ============================================================================
# Entry Point
# ============================================================================


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "ozean_activity.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
