"""
hwsign CLI - inspect addresses, encode reference transactions, and check
device-signed transactions against a signing request.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from loguru import logger

from hwsign.address import address_to_script, decode_address
from hwsign.bip32 import HDPublicKey, account_chain_nodes
from hwsign.codec import transaction_from_hex
from hwsign.config import Settings, get_settings
from hwsign.conversion import decode_signed_tx, transaction_to_reference
from hwsign.errors import SigningError
from hwsign.models import TxInfo
from hwsign.network import NetworkParams, resolve_network
from hwsign.signer import build_sign_request
from hwsign.verification import verify_signed_tx

app = typer.Typer(
    name="hwsign",
    help="Hardware wallet transaction signing helpers",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _network(settings: Settings, coin: str | None) -> tuple[str, NetworkParams]:
    coin_name = coin or settings.coin_name
    return coin_name, resolve_network(coin_name, table=settings.network_table())


def _nodes(settings: Settings, xpub: str | None) -> list[HDPublicKey]:
    xpub = xpub or settings.account_xpub
    if not xpub:
        logger.error("Account xpub required (--xpub or HWSIGN_ACCOUNT_XPUB)")
        raise typer.Exit(1)
    return account_chain_nodes(HDPublicKey.from_xpub(xpub))


def _load_request(request_file: Path) -> TxInfo:
    if not request_file.exists():
        logger.error(f"Request file not found: {request_file}")
        raise typer.Exit(1)

    try:
        data = json.loads(request_file.read_text())
    except json.JSONDecodeError as e:
        logger.error(f"Request file is not valid JSON: {e}")
        raise typer.Exit(1) from e

    if not isinstance(data, dict):
        logger.error(f"Request must be a JSON object, got {type(data).__name__}")
        raise typer.Exit(1)
    return TxInfo.from_dict(data)


@app.command()
def address_info(
    address: str = typer.Argument(..., help="Base58-check address"),
    coin: str | None = typer.Option(None, "--coin", "-c", help="Coin name"),
    log_level: str = typer.Option("INFO", "--log-level", "-l"),
) -> None:
    """Show version, script type and output script of an address."""
    setup_logging(log_level)
    settings = get_settings()

    try:
        coin_name, network = _network(settings, coin)
        version, payload = decode_address(address, network.prefix_length)
        script_type, script = address_to_script(address, network)
    except SigningError as e:
        logger.error(f"{e}")
        raise typer.Exit(1) from e

    print(f"Coin:        {coin_name}")
    print(f"Version:     {version:#x}")
    print(f"Hash:        {payload.hex()}")
    print(f"Script type: {script_type.value}")
    print(f"Script:      {script.hex()}")


@app.command()
def reference_tx(
    tx_hex: str = typer.Argument(..., help="Raw transaction hex"),
    coin: str | None = typer.Option(None, "--coin", "-c", help="Coin name"),
    log_level: str = typer.Option("INFO", "--log-level", "-l"),
) -> None:
    """Encode a confirmed transaction as a device reference transaction."""
    setup_logging(log_level)
    settings = get_settings()

    try:
        _, network = _network(settings, coin)
        tx = transaction_from_hex(tx_hex, shielded=network.shielded)
    except SigningError as e:
        logger.error(f"{e}")
        raise typer.Exit(1) from e

    print(transaction_to_reference(tx).model_dump_json(indent=2))


@app.command()
def prepare(
    request_file: Path = typer.Argument(..., help="Signing request JSON file"),
    coin: str | None = typer.Option(None, "--coin", "-c", help="Coin name"),
    xpub: str | None = typer.Option(None, "--xpub", help="Account extended public key"),
    log_level: str = typer.Option("INFO", "--log-level", "-l"),
) -> None:
    """Show the wire inputs and outputs that would be sent to the device."""
    setup_logging(log_level)
    settings = get_settings()

    try:
        _, network = _network(settings, coin)
        nodes = _nodes(settings, xpub)
        info = _load_request(request_file)
        request = build_sign_request(info, [], nodes, network)
    except (SigningError, ValueError) as e:
        logger.error(f"{e}")
        raise typer.Exit(1) from e

    result = {
        "inputs": [inp.model_dump(exclude_none=True) for inp in request.inputs],
        "outputs": [out.model_dump(mode="json", exclude_none=True) for out in request.outputs],
    }
    print(json.dumps(result, indent=2))


@app.command()
def verify(
    request_file: Path = typer.Argument(..., help="Signing request JSON file"),
    signed_tx: str = typer.Argument(..., help="Signed transaction hex returned by the device"),
    coin: str | None = typer.Option(None, "--coin", "-c", help="Coin name"),
    xpub: str | None = typer.Option(None, "--xpub", help="Account extended public key"),
    log_level: str = typer.Option("INFO", "--log-level", "-l"),
) -> None:
    """Check a signed transaction against the request it was built from."""
    setup_logging(log_level)
    settings = get_settings()

    try:
        _, network = _network(settings, coin)
        nodes = _nodes(settings, xpub)
        info = _load_request(request_file)
        tx = decode_signed_tx(signed_tx, network)
        verify_signed_tx(info, tx, network, nodes)
    except (SigningError, ValueError) as e:
        logger.error(f"Verification failed: {e}")
        raise typer.Exit(1) from e

    print(f"OK {tx.txid}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
