"""
Signing device session interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hwsign.messages import RefTransaction, SignedTx, TransactionInput, TransactionOutput


class DeviceSession(ABC):
    """
    Abstract connection to a signing device.

    Implementations own the transport. Concurrent signing attempts on one
    session must be serialized by the implementation.
    """

    @abstractmethod
    async def sign_tx(
        self,
        inputs: list[TransactionInput],
        outputs: list[TransactionOutput],
        ref_txs: list[RefTransaction],
        coin_name: str,
    ) -> SignedTx:
        """Ask the device to sign a transaction, returns the serialized result"""
