"""
Shared fixtures: settings and an in-memory chain reader.
"""

from typing import Any, Optional

import pytest

from ozean_activity.config import Settings
from ozean_activity.contracts import ContractInterface, EventFilter
from ozean_activity.evm import ChainRegistry
from ozean_activity.verifier import ActivityVerifier

TEST_ADDRESS = "0x73cb4Cf464Ba30bBB369Ce7AC58C0e1B1920EAF6"
OTHER_ADDRESS = "0x1234567890123456789012345678901234567890"

USDC = "0x94a9D9AC8a22534E3FaCa9F4e7F2E2cf85d5E4C8"
DAI = "0xFF34B3d4Aee8ddCd6F9AFFFB6Fe49bD371b8a357"
ZERO = "0x0000000000000000000000000000000000000000"


class FakeChainReader:
    """
    In-memory stand-in for query_events/read_state.

    Events are stored per (contract, event) as argument dicts; state values
    per (contract, function, args). Failures can be injected per contract or
    per query with a predicate.
    """

    def __init__(self) -> None:
        self.events: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.state: dict[tuple[str, str, tuple[Any, ...]], int] = {}
        self.failures: list[tuple[Any, Exception]] = []
        self.log_calls: list[dict[str, Any]] = []
        self.state_calls: list[dict[str, Any]] = []

    def add_event(self, contract: str, event_name: str, **args: Any) -> None:
        self.events.setdefault((contract.lower(), event_name), []).append(args)

    def set_state(self, contract: str, function_name: str, args: tuple[Any, ...], value: int) -> None:
        key = (contract.lower(), function_name, tuple(str(a).lower() for a in args))
        self.state[key] = value

    def fail_when(self, predicate: Any, error: Exception) -> None:
        """Raise `error` for any call whose call record satisfies `predicate`."""
        self.failures.append((predicate, error))

    def _maybe_fail(self, call: dict[str, Any]) -> None:
        for predicate, error in self.failures:
            if predicate(call):
                raise error

    async def query_events(
        self,
        connection: Any,
        contract_address: str,
        interface: ContractInterface,
        event_name: str,
        filter_values: Any = None,
        *,
        from_block: Any = 0,
        to_block: Any = "latest",
        timeout: Optional[float] = None,
    ) -> list[Any]:
        event_filter = EventFilter.build(interface.event(event_name), filter_values)
        filters = event_filter.argument_filters()
        call = {
            "network": connection.name,
            "contract": contract_address.lower(),
            "event": event_name,
            "filters": filters,
            "from_block": from_block,
            "to_block": to_block,
        }
        self.log_calls.append(call)
        self._maybe_fail(call)

        matches = []
        for args in self.events.get((contract_address.lower(), event_name), []):
            if all(str(args.get(k, "")).lower() == str(v).lower() for k, v in filters.items()):
                matches.append({"event": event_name, "args": args})
        return matches

    async def read_state(
        self,
        connection: Any,
        contract_address: str,
        interface: ContractInterface,
        function_name: str,
        args: Any = (),
        *,
        timeout: Optional[float] = None,
    ) -> int:
        interface.function(function_name)
        call = {
            "network": connection.name,
            "contract": contract_address.lower(),
            "function": function_name,
            "args": tuple(args),
        }
        self.state_calls.append(call)
        self._maybe_fail(call)

        key = (contract_address.lower(), function_name, tuple(str(a).lower() for a in args))
        return self.state.get(key, 0)

    @property
    def call_count(self) -> int:
        return len(self.log_calls) + len(self.state_calls)


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env)."""
    return Settings(_env_file=None)


@pytest.fixture
def chain() -> FakeChainReader:
    return FakeChainReader()


@pytest.fixture
def verifier(settings: Settings, chain: FakeChainReader) -> ActivityVerifier:
    """Verifier wired to the fake chain reader."""
    return ActivityVerifier(
        settings,
        registry=ChainRegistry(settings),
        log_reader=chain.query_events,
        state_reader=chain.read_state,
    )
