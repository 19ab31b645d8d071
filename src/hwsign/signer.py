"""
Signing a wallet transaction on an external device.

Flow of one signing attempt:
1. Resolve the coin's network parameters
2. Map inputs, outputs and reference transactions to wire messages
3. Send them to the device in a single round trip
4. Decode the returned transaction
5. Verify every output against the request before handing the result back

Any failure, including errors raised by the device session, aborts the
attempt and propagates to the caller. Nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from hwsign.bip32 import HDPublicKey
from hwsign.codec import Transaction
from hwsign.conversion import decode_signed_tx, input_to_wire, transaction_to_reference
from hwsign.derivation import derive_output
from hwsign.messages import RefTransaction, TransactionInput, TransactionOutput
from hwsign.models import TxInfo
from hwsign.network import DEFAULT_NETWORKS, NetworkParams, NetworkTable, resolve_network
from hwsign.session import DeviceSession
from hwsign.verification import verify_signed_tx


@dataclass
class SignRequest:
    """Wire messages for one signing round trip."""

    inputs: list[TransactionInput]
    outputs: list[TransactionOutput]
    ref_txs: list[RefTransaction]


def build_sign_request(
    info: TxInfo,
    ref_txs: list[Transaction],
    nodes: list[HDPublicKey],
    network: NetworkParams,
) -> SignRequest:
    return SignRequest(
        inputs=[input_to_wire(inp) for inp in info.inputs],
        outputs=[derive_output(out, network, nodes).wire for out in info.outputs],
        ref_txs=[transaction_to_reference(tx) for tx in ref_txs],
    )


async def sign_tx(
    session: DeviceSession,
    info: TxInfo,
    ref_txs: list[Transaction],
    nodes: list[HDPublicKey],
    coin_name: str,
    network: NetworkParams | None = None,
    table: NetworkTable = DEFAULT_NETWORKS,
) -> Transaction:
    """
    Sign a transaction on the device and verify the result.

    Args:
        session: Device session
        info: Inputs and outputs to sign
        ref_txs: Previous transactions whose outputs are spent by ``info.inputs``
        nodes: Account chain nodes (external, change) used for path outputs
        coin_name: Coin name as understood by the device
        network: Explicit network parameters, overrides the table lookup
        table: Network table used when no override is given

    Returns:
        The verified signed transaction
    """
    params = resolve_network(coin_name, network, table)

    request = build_sign_request(info, ref_txs, nodes, params)
    logger.debug(
        f"Requesting {coin_name} signature: {len(request.inputs)} inputs, "
        f"{len(request.outputs)} outputs, {len(request.ref_txs)} reference txs"
    )

    response = await session.sign_tx(request.inputs, request.outputs, request.ref_txs, coin_name)

    tx = decode_signed_tx(response.serialized_tx, params)
    verify_signed_tx(info, tx, params, nodes)

    logger.info(f"Device-signed transaction {tx.txid} verified")
    return tx
