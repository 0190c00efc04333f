"""
Ozean Activity - reward eligibility checks over two EVM networks.

Verifies three on-chain activity signals for an address:
- Bridging (BridgeDeposit events on the Sepolia bridge)
- Staking (sharesOf on the Ozean staking contract)
- Token wrapping (mint Transfer events on the Ozean token)
"""

__version__ = "0.1.0"
