"""
Typed contract interface descriptors for the three checked contracts.

Descriptors are validated when built, so a malformed interface fails at
import time rather than on the first RPC call.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from web3 import Web3

from .errors import ContractError

# Solidity types these interfaces use
SUPPORTED_TYPES = frozenset({"address", "uint256", "uint128", "uint64", "uint32", "uint8", "bool", "bytes32"})

# EVM logs carry at most 3 indexed topics besides the signature
MAX_INDEXED_INPUTS = 3


@dataclass(frozen=True)
class AbiParam:
    """A single event or function parameter."""

    name: str
    type: str
    indexed: bool = False

    def __post_init__(self) -> None:
        if self.type not in SUPPORTED_TYPES:
            raise ValueError(f"Unsupported ABI type {self.type!r} for parameter {self.name!r}")

    def to_abi(self, for_event: bool) -> dict[str, Any]:
        entry: dict[str, Any] = {"name": self.name, "type": self.type, "internalType": self.type}
        if for_event:
            entry["indexed"] = self.indexed
        return entry


@dataclass(frozen=True)
class EventDescriptor:
    """An event definition (name + ordered inputs)."""

    name: str
    inputs: tuple[AbiParam, ...]

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ValueError(f"Invalid event name {self.name!r}")
        names = [p.name for p in self.inputs]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate input names in event {self.name}")
        if len(self.indexed_names) > MAX_INDEXED_INPUTS:
            raise ValueError(
                f"Event {self.name} has {len(self.indexed_names)} indexed inputs (max {MAX_INDEXED_INPUTS})"
            )

    @property
    def indexed_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.inputs if p.indexed)

    def input(self, name: str) -> AbiParam:
        for param in self.inputs:
            if param.name == name:
                return param
        raise ValueError(f"Event {self.name} has no input {name!r}")

    def to_abi(self) -> dict[str, Any]:
        return {
            "anonymous": False,
            "inputs": [p.to_abi(for_event=True) for p in self.inputs],
            "name": self.name,
            "type": "event",
        }


@dataclass(frozen=True)
class FunctionDescriptor:
    """A read-only function definition."""

    name: str
    inputs: tuple[AbiParam, ...]
    outputs: tuple[AbiParam, ...]
    state_mutability: str = "view"

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ValueError(f"Invalid function name {self.name!r}")
        if self.state_mutability not in ("view", "pure"):
            raise ValueError(f"Function {self.name} must be view or pure, got {self.state_mutability}")
        if any(p.indexed for p in self.inputs + self.outputs):
            raise ValueError(f"Function {self.name} parameters cannot be indexed")

    def to_abi(self) -> dict[str, Any]:
        return {
            "inputs": [p.to_abi(for_event=False) for p in self.inputs],
            "name": self.name,
            "outputs": [p.to_abi(for_event=False) for p in self.outputs],
            "stateMutability": self.state_mutability,
            "type": "function",
        }


@dataclass(frozen=True)
class ContractInterface:
    """The subset of a contract ABI the verifier relies on."""

    name: str
    events: tuple[EventDescriptor, ...] = ()
    functions: tuple[FunctionDescriptor, ...] = ()

    def __post_init__(self) -> None:
        names = [e.name for e in self.events] + [f.name for f in self.functions]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate member names in interface {self.name}")

    @property
    def abi(self) -> list[dict[str, Any]]:
        return [e.to_abi() for e in self.events] + [f.to_abi() for f in self.functions]

    def event(self, name: str) -> EventDescriptor:
        for event in self.events:
            if event.name == name:
                return event
        raise ContractError(f"{self.name} interface has no event {name!r}")

    def function(self, name: str) -> FunctionDescriptor:
        for function in self.functions:
            if function.name == name:
                return function
        raise ContractError(f"{self.name} interface has no function {name!r}")


FilterValues = Union[Mapping[str, Any], Sequence[Any]]


@dataclass(frozen=True)
class EventFilter:
    """
    Indexed-field match values for one event.

    A value of None is a wildcard and matches anything.
    """

    event: EventDescriptor
    values: tuple[tuple[str, Any], ...]

    @classmethod
    def build(cls, event: EventDescriptor, filter_values: Optional[FilterValues] = None) -> "EventFilter":
        """
        Build a filter from a mapping (by input name) or a positional
        sequence over the event inputs, as in ``Deposit(token, None, user)``.
        """
        if filter_values is None:
            named: dict[str, Any] = {}
        elif isinstance(filter_values, Mapping):
            named = dict(filter_values)
        else:
            values = list(filter_values)
            if len(values) > len(event.inputs):
                raise ValueError(
                    f"{event.name} takes at most {len(event.inputs)} filter values, got {len(values)}"
                )
            named = {param.name: value for param, value in zip(event.inputs, values)}

        normalized: list[tuple[str, Any]] = []
        for name, value in named.items():
            param = event.input(name)
            if value is None:
                continue
            if not param.indexed:
                raise ValueError(f"Cannot filter on non-indexed input {event.name}.{name}")
            if param.type == "address":
                if not isinstance(value, str) or not Web3.is_address(value):
                    raise ValueError(f"Filter value for {event.name}.{name} is not an address: {value!r}")
                value = Web3.to_checksum_address(value)
            normalized.append((name, value))

        return cls(event=event, values=tuple(normalized))

    def argument_filters(self) -> dict[str, Any]:
        return dict(self.values)


def _p(name: str, type_: str, indexed: bool = False) -> AbiParam:
    return AbiParam(name=name, type=type_, indexed=indexed)


BRIDGE_DEPOSIT_EVENT = EventDescriptor(
    name="BridgeDeposit",
    inputs=(
        _p("_stablecoin", "address", indexed=True),
        _p("_amount", "uint256"),
        _p("_to", "address", indexed=True),
    ),
)

SHARES_OF_FUNCTION = FunctionDescriptor(
    name="sharesOf",
    inputs=(_p("user", "address"),),
    outputs=(_p("", "uint256"),),
)

TRANSFER_EVENT = EventDescriptor(
    name="Transfer",
    inputs=(
        _p("from", "address", indexed=True),
        _p("to", "address", indexed=True),
        _p("value", "uint256"),
    ),
)

BRIDGE_INTERFACE = ContractInterface(name="OzeanBridge", events=(BRIDGE_DEPOSIT_EVENT,))
STAKING_INTERFACE = ContractInterface(name="OzeanStaking", functions=(SHARES_OF_FUNCTION,))
TOKEN_INTERFACE = ContractInterface(name="WrappedToken", events=(TRANSFER_EVENT,))
