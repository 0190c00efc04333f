"""
Contract log and state readers.

Both readers translate web3/aiohttp failures into ChainConnectionError or
ContractError and let them propagate; deciding how to degrade is up to
the caller.
"""

import asyncio
from typing import Any, Awaitable, Optional, Sequence, TypeVar, Union

import aiohttp
import structlog
from web3 import Web3
from web3.exceptions import (
    ABIEventNotFound,
    ABIFunctionNotFound,
    BadFunctionCallOutput,
    ContractLogicError,
    MismatchedABI,
    Web3Exception,
    Web3ValidationError,
)

from .contracts import ContractInterface, EventFilter, FilterValues
from .errors import ChainConnectionError, ContractError
from .evm import ChainConnection

logger = structlog.get_logger()

T = TypeVar("T")

BlockIdentifier = Union[int, str]

# Checked before CONNECTION_FAILURES: these are Web3Exception subclasses too
CONTRACT_FAILURES = (
    ContractLogicError,
    BadFunctionCallOutput,
    ABIFunctionNotFound,
    ABIEventNotFound,
    MismatchedABI,
    Web3ValidationError,
)

CONNECTION_FAILURES = (
    aiohttp.ClientError,
    OSError,
    Web3Exception,
    ValueError,
    KeyError,
)


async def _call(
    connection: ChainConnection,
    awaitable: Awaitable[T],
    what: str,
    timeout: Optional[float],
) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        raise ChainConnectionError(connection.name, f"{what} timed out after {timeout}s") from e
    except CONTRACT_FAILURES as e:
        raise ContractError(f"{what} failed: {e}") from e
    except CONNECTION_FAILURES as e:
        raise ChainConnectionError(connection.name, f"{what} failed: {e}") from e


def _contract(connection: ChainConnection, contract_address: str, interface: ContractInterface) -> Any:
    if not isinstance(contract_address, str) or not Web3.is_address(contract_address):
        raise ContractError(f"Malformed {interface.name} contract address: {contract_address!r}")
    try:
        return connection.w3.eth.contract(
            address=Web3.to_checksum_address(contract_address),
            abi=interface.abi,
        )
    except (Web3Exception, ValueError, TypeError) as e:
        raise ContractError(f"Cannot bind {interface.name} at {contract_address}: {e}") from e


async def query_events(
    connection: ChainConnection,
    contract_address: str,
    interface: ContractInterface,
    event_name: str,
    filter_values: Optional[FilterValues] = None,
    *,
    from_block: BlockIdentifier = 0,
    to_block: BlockIdentifier = "latest",
    timeout: Optional[float] = None,
) -> list[Any]:
    """
    Fetch all logs of one event that match the given indexed values.

    Args:
        connection: Network to query
        contract_address: Emitting contract
        interface: Interface declaring the event
        event_name: Event to match
        filter_values: Indexed values by name, or positionally over the
            event inputs; None entries are wildcards
        from_block: First block of the range (default: genesis)
        to_block: Last block of the range (default: latest)
        timeout: Per-call timeout in seconds (None = no timeout)

    Returns:
        Matching log entries in chain order (empty if none match)

    Raises:
        ChainConnectionError: endpoint unreachable, timed out, or bad payload
        ContractError: unknown event, malformed address or filter, ABI mismatch
    """
    descriptor = interface.event(event_name)
    try:
        event_filter = EventFilter.build(descriptor, filter_values)
    except ValueError as e:
        raise ContractError(f"Invalid filter for {interface.name}.{event_name}: {e}") from e

    contract = _contract(connection, contract_address, interface)
    what = f"{interface.name}.{event_name} log query"
    try:
        event = getattr(contract.events, event_name)()
    except CONTRACT_FAILURES as e:
        raise ContractError(f"{what} failed: {e}") from e

    logs = await _call(
        connection,
        event.get_logs(
            argument_filters=event_filter.argument_filters(),
            from_block=from_block,
            to_block=to_block,
        ),
        what,
        timeout,
    )
    if logs is None:
        raise ChainConnectionError(connection.name, f"{what} returned no payload")

    logger.debug(
        "Event logs fetched",
        network=connection.name,
        contract=contract_address,
        event_name=event_name,
        filters=event_filter.argument_filters(),
        count=len(logs),
    )
    return list(logs)


async def read_state(
    connection: ChainConnection,
    contract_address: str,
    interface: ContractInterface,
    function_name: str,
    args: Sequence[Any] = (),
    *,
    timeout: Optional[float] = None,
) -> int:
    """
    Call a view function and return its unsigned integer result.

    Raises:
        ChainConnectionError: endpoint unreachable, timed out, or bad payload
        ContractError: unknown function, revert, or non-integer output
    """
    descriptor = interface.function(function_name)
    if len(args) != len(descriptor.inputs):
        raise ContractError(
            f"{interface.name}.{function_name} takes {len(descriptor.inputs)} arguments, got {len(args)}"
        )

    call_args = []
    for param, value in zip(descriptor.inputs, args):
        if param.type == "address":
            if not isinstance(value, str) or not Web3.is_address(value):
                raise ContractError(f"Argument {param.name} is not an address: {value!r}")
            value = Web3.to_checksum_address(value)
        call_args.append(value)

    contract = _contract(connection, contract_address, interface)
    what = f"{interface.name}.{function_name} call"
    try:
        function = getattr(contract.functions, function_name)(*call_args)
    except CONTRACT_FAILURES as e:
        raise ContractError(f"{what} failed: {e}") from e

    value = await _call(connection, function.call(), what, timeout)

    # bool is an int subclass; reject it along with anything non-integral
    if isinstance(value, bool) or not isinstance(value, int):
        raise ContractError(f"{what} returned non-integer {value!r}")
    if value < 0:
        raise ContractError(f"{what} returned negative value {value}")

    logger.debug(
        "Contract state read",
        network=connection.name,
        contract=contract_address,
        function=function_name,
        value=str(value),
    )
    return value
