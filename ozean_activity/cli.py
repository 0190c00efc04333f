"""
CLI for the Ozean activity verifier.
"""

import asyncio
import json
from typing import Optional

import typer
from dotenv import load_dotenv

from .config import Settings, get_settings
from .errors import ActivityError
from .verifier import ActivityVerifier

app = typer.Typer(
    name="ozean-activity",
    help="Ozean reward eligibility checks (bridge, stake, wrap)",
)


def main() -> None:
    """Entry point."""
    load_dotenv()
    app()


def _settings(sepolia_rpc_url: Optional[str], ozean_rpc_url: Optional[str]) -> Settings:
    settings = get_settings()
    overrides = {}
    if sepolia_rpc_url:
        overrides["sepolia_rpc_url"] = sepolia_rpc_url
    if ozean_rpc_url:
        overrides["ozean_rpc_url"] = ozean_rpc_url
    return settings.model_copy(update=overrides) if overrides else settings


@app.command()
def check(
    address: str = typer.Argument(..., help="EVM address to check"),
    sepolia_rpc_url: Optional[str] = typer.Option(
        None, "--sepolia-rpc-url", envvar="SEPOLIA_RPC_URL", help="Sepolia RPC URL"
    ),
    ozean_rpc_url: Optional[str] = typer.Option(
        None, "--ozean-rpc-url", envvar="OZEAN_RPC_URL", help="Ozean RPC URL"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Run all three activity checks for an address.

    Example:
        ozean-activity check 0x73cb4Cf464Ba30bBB369Ce7AC58C0e1B1920EAF6
    """

    async def _check() -> None:
        verifier = ActivityVerifier(_settings(sepolia_rpc_url, ozean_rpc_url))

        try:
            result = await verifier.check_activities(address)
        except ActivityError as e:
            typer.echo(f"Error checking activities: {e}", err=True)
            raise typer.Exit(1)

        if json_output:
            payload = {"result": result.model_dump(by_alias=True), "eligible": result.eligible}
            typer.echo(json.dumps(payload, indent=2))
            return

        typer.echo(f"Activities for {address}:")
        typer.echo(f"  Bridging:       {'yes' if result.bridging else 'no'}")
        typer.echo(f"  Staking:        {'yes' if result.staking else 'no'}")
        typer.echo(f"  Token wrapping: {'yes' if result.token_wrapping else 'no'}")
        typer.echo(f"\nEligible: {'yes' if result.eligible else 'no'}")

    asyncio.run(_check())


@app.command()
def eligible(
    address: str = typer.Argument(..., help="EVM address to check"),
    sepolia_rpc_url: Optional[str] = typer.Option(
        None, "--sepolia-rpc-url", envvar="SEPOLIA_RPC_URL", help="Sepolia RPC URL"
    ),
    ozean_rpc_url: Optional[str] = typer.Option(
        None, "--ozean-rpc-url", envvar="OZEAN_RPC_URL", help="Ozean RPC URL"
    ),
) -> None:
    """
    Exit 0 if the address is eligible for the reward, 2 if not.
    """

    async def _eligible() -> bool:
        verifier = ActivityVerifier(_settings(sepolia_rpc_url, ozean_rpc_url))
        try:
            return await verifier.is_eligible(address)
        except ActivityError as e:
            typer.echo(f"Error checking eligibility: {e}", err=True)
            raise typer.Exit(1)

    if asyncio.run(_eligible()):
        typer.echo("eligible")
        return

    typer.echo("not eligible")
    raise typer.Exit(2)


@app.command()
def serve() -> None:
    """Run the HTTP API server."""
    from .main import run

    run()


if __name__ == "__main__":
    main()
