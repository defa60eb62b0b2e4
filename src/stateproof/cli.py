#!/usr/bin/env python3
"""
State Proofs CLI

Command-line interface for generating beacon state inclusion proofs.
Every proof command prints one proof rooted in a beacon block root, as a
table for people or as JSON for scripts and contract tests.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional, Union

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .api.proof_service import ProofService, ProofServiceError
from .config import Settings
from .exceptions import ProofError, RetrievalError
from .proofs.resolver import ProofParams, ProofType
from .schema import NETWORKS

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)

format_option = click.option(
    "--format", "format_output", type=click.Choice(["table", "json"]), default="table",
    help="Output format"
)
slot_option = click.option(
    "--slot", default="head", help="Slot number to generate the proof for (defaults to head)"
)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_slot(value: str) -> Union[int, str]:
    """Slot argument: "head" or a non-negative integer."""
    if value == "head":
        return value
    try:
        slot = int(value)
    except ValueError:
        raise click.BadParameter(f"expected 'head' or a slot number, got {value!r}", param_hint="--slot")
    if slot < 0:
        raise click.BadParameter("slot must be non-negative", param_hint="--slot")
    return slot


def print_proof_result(result: Dict[str, Any], format_output: str = "table"):
    """Print a serialized proof in the requested format."""
    if format_output == "json":
        # Unstyled and unwrapped, for piping into other tools
        click.echo(json.dumps(result, indent=2))
        return

    table = Table(title=f"{result['proof_type']} proof")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Network", str(result.get("network", "")))
    table.add_row("Slot", str(result["slot"]))
    table.add_row("Block Root", result["root"])
    table.add_row("Leaf", result["leaf"])
    table.add_row("Generalized Index", str(result["gindex_decimal"]))
    table.add_row("Generalized Index (bits)", result["gindex"])
    table.add_row("Witnesses", str(len(result["witnesses"])))

    for key, value in result["leaf_values"].items():
        if isinstance(value, dict):
            value = json.dumps(value)
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)

    console.print("\n[bold cyan]Witnesses (leaf to root):[/bold cyan]")
    for i, witness in enumerate(result["witnesses"]):
        console.print(f"  {i:2d}: {witness}")

    for warning in result["warnings"]:
        console.print(
            f"\n[bold red]Root mismatch at {warning['hop']}[/bold red]\n"
            f"  committed:  {warning['expected']}\n"
            f"  recomputed: {warning['actual']}\n"
            f"[red]This proof will not verify; check the slot pairing.[/red]"
        )


def run_proof(ctx, proof_type: ProofType, format_output: str, **params):
    """Generate and print one proof, turning domain errors into CLI errors."""
    settings: Settings = ctx.obj["settings"]
    service = ProofService(settings=settings)
    try:
        result = service.generate(proof_type, ProofParams(network=settings.network, **params))
    except (ProofError, RetrievalError, ProofServiceError, ValueError) as e:
        logger.error(f"Error generating {proof_type.value} proof: {e}")
        raise click.ClickException(str(e))
    print_proof_result(result, format_output)


@click.group()
@click.version_option(__version__, prog_name="stateproof")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--rpc", help="Beacon chain API endpoint (defaults to BEACON_CHAIN_API)")
@click.option(
    "--network", type=click.Choice(sorted(NETWORKS)), default=None,
    help="Network (defaults to STATEPROOF_NETWORK or mainnet)"
)
@click.option(
    "--cache-dir", default=None,
    help="Snapshot cache directory; empty string disables caching (defaults to STATEPROOF_CACHE_DIR or ./cache)"
)
@click.pass_context
def cli(ctx, verbose: bool, rpc: Optional[str], network: Optional[str], cache_dir: Optional[str]):
    """
    State Proofs CLI - Generate beacon state inclusion proofs.

    Proofs attest a slot, a validator record, a validator's pubkey and
    withdrawal credentials, a withdrawable epoch or a withdrawal against a
    beacon block root.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = Settings.from_env().override(
        beacon_api=rpc, network=network, cache_dir=cache_dir
    )


@cli.command("slot")
@slot_option
@format_option
@click.pass_context
def slot_proof(ctx, slot: str, format_output: str):
    """Generate a state proof for the slot number."""
    run_proof(ctx, ProofType.SLOT, format_output, slot=parse_slot(slot))


@cli.command("validator")
@click.argument("validator_index", type=click.IntRange(min=0))
@slot_option
@format_option
@click.pass_context
def validator_proof(ctx, validator_index: int, slot: str, format_output: str):
    """
    Generate a state proof for a validator record.

    VALIDATOR_INDEX: Index of the validator to prove
    """
    run_proof(ctx, ProofType.VALIDATOR, format_output, slot=parse_slot(slot), validator_index=validator_index)


@cli.command("validator_pubkey")
@click.argument("validator_index", type=click.IntRange(min=0))
@slot_option
@format_option
@click.pass_context
def validator_pubkey_proof(ctx, validator_index: int, slot: str, format_output: str):
    """
    Generate a state proof for a validator's pubkey/withdrawal_credentials.

    VALIDATOR_INDEX: Index of the validator to prove
    """
    run_proof(
        ctx, ProofType.VALIDATOR_PUBKEY, format_output, slot=parse_slot(slot), validator_index=validator_index
    )


@cli.command("withdrawable_epoch")
@click.argument("validator_index", type=click.IntRange(min=0))
@slot_option
@format_option
@click.pass_context
def withdrawable_epoch_proof(ctx, validator_index: int, slot: str, format_output: str):
    """
    Generate a state proof for a validator's withdrawable_epoch.

    VALIDATOR_INDEX: Index of the validator to prove
    """
    run_proof(
        ctx, ProofType.WITHDRAWABLE_EPOCH, format_output, slot=parse_slot(slot), validator_index=validator_index
    )


@cli.command("withdrawal")
@click.argument("proof_slot", type=click.IntRange(min=0))
@click.argument("withdrawal_slot", type=click.IntRange(min=0))
@click.argument("withdrawal_number", type=click.IntRange(min=0))
@format_option
@click.pass_context
def withdrawal_proof(ctx, proof_slot: int, withdrawal_slot: int, withdrawal_number: int, format_output: str):
    """
    Generate a state proof for a withdrawal.

    Withdrawals within 8192 slots of PROOF_SLOT are proven through the
    state's block_roots; older ones through historical_summaries.

    \b
    PROOF_SLOT: Slot to produce the proof for
    WITHDRAWAL_SLOT: Slot of the block that contains the withdrawal
    WITHDRAWAL_NUMBER: Index into that block's withdrawal list
    """
    run_proof(
        ctx, ProofType.WITHDRAWAL, format_output,
        slot=proof_slot, withdrawal_slot=withdrawal_slot, withdrawal_number=withdrawal_number,
    )


@cli.command("historical_withdrawal")
@click.argument("proof_slot", type=click.IntRange(min=0))
@click.argument("withdrawal_slot", type=click.IntRange(min=0))
@click.argument("withdrawal_number", type=click.IntRange(min=0))
@format_option
@click.pass_context
def historical_withdrawal_proof(ctx, proof_slot: int, withdrawal_slot: int, withdrawal_number: int,
                                format_output: str):
    """
    Generate a state proof for a withdrawal using historical block roots.

    \b
    PROOF_SLOT: Slot to produce the proof for
    WITHDRAWAL_SLOT: Slot of the block that contains the withdrawal
    WITHDRAWAL_NUMBER: Index into that block's withdrawal list
    """
    run_proof(
        ctx, ProofType.HISTORICAL_WITHDRAWAL, format_output,
        slot=proof_slot, withdrawal_slot=withdrawal_slot, withdrawal_number=withdrawal_number,
    )


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8000, type=int, help="Port to bind to")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: str, port: int, dev: bool):
    """Start the REST API server."""
    from .api.rest_api import run_server

    try:
        console.print(
            Panel(
                f"Starting State Proofs API Server\n\n"
                f"Server: http://{host}:{port}\n"
                f"Docs: http://{host}:{port}/docs\n"
                f"Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.pass_context
def health(ctx):
    """Check the health of the beacon API endpoint."""
    settings: Settings = ctx.obj["settings"]
    console.print("[cyan]Checking system health...[/cyan]")

    api_status = ProofService(settings=settings).health()

    table = Table(title="System Health Check")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")

    table.add_row(
        "Beacon API", "Healthy" if api_status else "Unhealthy", settings.beacon_api or "(not configured)"
    )
    table.add_row("Network", settings.network, "")
    table.add_row("Snapshot Cache", "Enabled" if settings.cache_dir else "Disabled", settings.cache_dir or "")
    console.print(table)

    if not api_status:
        sys.exit(1)


if __name__ == "__main__":
    cli()
