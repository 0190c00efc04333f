"""
Read-only EVM connections for the two checked networks.
"""

from dataclasses import dataclass

from web3 import AsyncWeb3, AsyncHTTPProvider

from .config import Settings
from .errors import ChainConnectionError

# Network names
SEPOLIA = "sepolia"
OZEAN = "ozean"


@dataclass(frozen=True)
class ChainConnection:
    """
    Immutable handle bound to one network endpoint.

    Connections are never mutated after creation, so one instance can be
    shared by any number of concurrent checks.
    """

    name: str
    rpc_url: str
    w3: AsyncWeb3

    @classmethod
    def from_url(cls, name: str, rpc_url: str) -> "ChainConnection":
        return cls(name=name, rpc_url=rpc_url, w3=AsyncWeb3(AsyncHTTPProvider(rpc_url)))

    async def check_connectivity(self) -> bool:
        """Check if the RPC endpoint is reachable."""
        try:
            await self.w3.eth.block_number
            return True
        except Exception:
            return False


class ChainRegistry:
    """
    Process-wide registry of chain connections.

    Connections are created lazily on first use and reused afterwards.
    """

    def __init__(self, settings: Settings):
        self._urls = {
            SEPOLIA: settings.sepolia_rpc_url,
            OZEAN: settings.ozean_rpc_url,
        }
        self._connections: dict[str, ChainConnection] = {}

    @property
    def networks(self) -> tuple[str, ...]:
        return tuple(self._urls)

    def get(self, network: str) -> ChainConnection:
        """Get (or create) the connection for a network."""
        connection = self._connections.get(network)
        if connection is None:
            if network not in self._urls:
                raise ChainConnectionError(network, "network is not configured")
            try:
                connection = ChainConnection.from_url(network, self._urls[network])
            except (TypeError, ValueError) as e:
                raise ChainConnectionError(network, f"cannot create provider: {e}") from e
            self._connections[network] = connection
        return connection
