"""
Activity verification engine.

Three independent checks (bridge, stake, wrap) run concurrently and are
combined into an ActivityResult. A chain failure inside one check is
logged and reported as "not detected" for that check only, so an outage
can deny eligibility but never grant it.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import structlog

from .address import ZERO_ADDRESS, validate_address
from .config import Settings
from .contracts import (
    BRIDGE_DEPOSIT_EVENT,
    BRIDGE_INTERFACE,
    SHARES_OF_FUNCTION,
    STAKING_INTERFACE,
    TOKEN_INTERFACE,
    TRANSFER_EVENT,
    ContractInterface,
    FilterValues,
)
from .errors import ChainError
from .evm import OZEAN, SEPOLIA, ChainConnection, ChainRegistry
from .models import ActivityResult
from .readers import query_events, read_state

logger = structlog.get_logger()

LogReader = Callable[..., Awaitable[list[Any]]]
StateReader = Callable[..., Awaitable[int]]


class ActivityVerifier:
    """
    Checks bridge, staking and wrapping activity for an address.

    Stateless apart from its configuration and the shared, read-only
    chain registry; one instance serves any number of concurrent checks.
    """

    def __init__(
        self,
        settings: Settings,
        registry: Optional[ChainRegistry] = None,
        log_reader: LogReader = query_events,
        state_reader: StateReader = read_state,
    ):
        self.settings = settings
        self.registry = registry or ChainRegistry(settings)
        self._log_reader = log_reader
        self._state_reader = state_reader

    # ------------------------------------------------------------------
    # Public entry points (validate, then check)
    # ------------------------------------------------------------------

    async def verify_bridge(self, address: str) -> bool:
        """True if the address received a BridgeDeposit for any bridge token."""
        return await self._verify_bridge(validate_address(address))

    async def verify_staking(self, address: str) -> bool:
        """True if the address owns a non-zero number of staking shares."""
        return await self._verify_staking(validate_address(address))

    async def verify_wrapping(self, address: str) -> bool:
        """True if wrapped tokens were minted to the address."""
        return await self._verify_wrapping(validate_address(address))

    async def check_activities(self, address: str) -> ActivityResult:
        """
        Run all three checks concurrently.

        Raises:
            AddressValidationError: before any network call, if the
                address is malformed
        """
        user = validate_address(address)

        bridging, staking, token_wrapping = await asyncio.gather(
            self._verify_bridge(user),
            self._verify_staking(user),
            self._verify_wrapping(user),
        )
        result = ActivityResult(bridging=bridging, staking=staking, token_wrapping=token_wrapping)

        logger.info(
            "Activities checked",
            address=user,
            bridging=result.bridging,
            staking=result.staking,
            token_wrapping=result.token_wrapping,
            eligible=result.eligible,
        )
        return result

    async def is_eligible(self, address: str) -> bool:
        """True only if all three activities were detected."""
        result = await self.check_activities(address)
        return result.eligible

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    async def _verify_bridge(self, user: str) -> bool:
        try:
            connection = self.registry.get(SEPOLIA)
        except ChainError as e:
            logger.warning("Bridge activity check failed", check="bridging", address=user, reason=str(e))
            return False

        found = await asyncio.gather(
            *(
                self._has_events(
                    connection,
                    self.settings.bridge_contract_address,
                    BRIDGE_INTERFACE,
                    BRIDGE_DEPOSIT_EVENT.name,
                    (token, None, user),
                    check="bridging",
                    label=symbol,
                )
                for symbol, token in self.settings.bridge_tokens.items()
            )
        )
        return any(found)

    async def _verify_staking(self, user: str) -> bool:
        try:
            connection = self.registry.get(OZEAN)
            shares = await self._state_reader(
                connection,
                self.settings.staking_contract_address,
                STAKING_INTERFACE,
                SHARES_OF_FUNCTION.name,
                (user,),
                timeout=self.settings.rpc_timeout_seconds,
            )
        except ChainError as e:
            logger.warning("Staking activity check failed", check="staking", address=user, reason=str(e))
            return False
        except Exception:
            logger.exception("Staking activity check crashed", check="staking", address=user)
            return False

        return shares > 0

    async def _verify_wrapping(self, user: str) -> bool:
        try:
            connection = self.registry.get(OZEAN)
        except ChainError as e:
            logger.warning("Token wrapping activity check failed", check="token_wrapping", address=user, reason=str(e))
            return False

        # Mints (zero address -> user) always count; burns only when enabled
        directions = [("wrap", {"from": ZERO_ADDRESS, "to": user})]
        if self.settings.count_unwrap_events:
            directions.append(("unwrap", {"from": user, "to": ZERO_ADDRESS}))

        found = await asyncio.gather(
            *(
                self._has_events(
                    connection,
                    self.settings.token_contract_address,
                    TOKEN_INTERFACE,
                    TRANSFER_EVENT.name,
                    filter_values,
                    check="token_wrapping",
                    label=label,
                )
                for label, filter_values in directions
            )
        )
        return any(found)

    async def _has_events(
        self,
        connection: ChainConnection,
        contract_address: str,
        interface: ContractInterface,
        event_name: str,
        filter_values: FilterValues,
        check: str,
        label: str,
    ) -> bool:
        """Run one log query; a failed query counts as no match."""
        try:
            logs = await self._log_reader(
                connection,
                contract_address,
                interface,
                event_name,
                filter_values,
                from_block=self.settings.log_from_block,
                to_block=self.settings.log_to_block,
                timeout=self.settings.rpc_timeout_seconds,
            )
        except ChainError as e:
            logger.warning(
                "Event query failed",
                check=check,
                query=label,
                network=connection.name,
                reason=str(e),
            )
            return False
        except Exception:
            logger.exception("Event query crashed", check=check, query=label, network=connection.name)
            return False

        return len(logs) > 0
