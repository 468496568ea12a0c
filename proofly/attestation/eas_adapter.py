"""Attestation publishing through the Ethereum Attestation Service contract.

The contract is called directly: build ``attest(request)``, sign it with the
service key, wait for one confirmation, then read the ``Attested`` event from
the receipt. The uid is not an indexed topic, so it has to come from the
decoded event data rather than from the submission call.
"""

import threading
from typing import Any, ClassVar

from eth_abi import encode
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception
from web3.logs import DISCARD

from proofly.attestation.base import BaseLedgerClient
from proofly.attestation.exceptions import LedgerError
from proofly.attestation.models import AttestationRecord
from proofly.attestation.records import ZERO_ADDRESS
from proofly.logging.logger import Log

ZERO_BYTES32 = b"\x00" * 32

EAS_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "attest",
        "stateMutability": "payable",
        "inputs": [
            {
                "name": "request",
                "type": "tuple",
                "components": [
                    {"name": "schema", "type": "bytes32"},
                    {
                        "name": "data",
                        "type": "tuple",
                        "components": [
                            {"name": "recipient", "type": "address"},
                            {"name": "expirationTime", "type": "uint64"},
                            {"name": "revocable", "type": "bool"},
                            {"name": "refUID", "type": "bytes32"},
                            {"name": "data", "type": "bytes"},
                            {"name": "value", "type": "uint256"},
                        ],
                    },
                ],
            }
        ],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "type": "event",
        "name": "Attested",
        "anonymous": False,
        "inputs": [
            {"name": "recipient", "type": "address", "indexed": True},
            {"name": "attester", "type": "address", "indexed": True},
            {"name": "uid", "type": "bytes32", "indexed": False},
            {"name": "schemaUID", "type": "bytes32", "indexed": True},
        ],
    },
]


class EasLedgerClient(BaseLedgerClient):
    """Publishes schema-encoded attestations to an EAS contract."""

    SUCCESS_STATUS: ClassVar[int] = 1

    def __init__(
        self,
        *,
        web3: Web3,
        contract_address: str,
        private_key: str,
        receipt_timeout_seconds: int = 120,
    ) -> None:
        self._web3 = web3
        self._account = web3.eth.account.from_key(private_key)
        self._contract = web3.eth.contract(
            address=Web3.to_checksum_address(contract_address),
            abi=EAS_ABI,
        )
        self._receipt_timeout = receipt_timeout_seconds
        # one signer shared by concurrent runs; nonce read and send must not interleave
        self._nonce_lock = threading.Lock()

    def publish(self, schema_id: str, record: AttestationRecord, revocable: bool) -> str | None:
        request = (
            _bytes32(schema_id),
            (
                ZERO_ADDRESS,
                0,
                revocable,
                ZERO_BYTES32,
                encode_record(record),
                0,
            ),
        )
        try:
            with self._nonce_lock:
                tx = self._contract.functions.attest(request).build_transaction(
                    {
                        "from": self._account.address,
                        "nonce": self._web3.eth.get_transaction_count(
                            self._account.address, "pending"
                        ),
                    }
                )
                signed = self._account.sign_transaction(tx)
                tx_hash = Web3.to_hex(self._web3.eth.send_raw_transaction(signed.raw_transaction))
        except (Web3Exception, ValueError) as exc:
            raise LedgerError(f"{record.kind} attestation submission failed: {exc}") from exc

        try:
            receipt = self._web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except TimeExhausted:
            Log.warning(f"No receipt for {record.kind} attestation tx {tx_hash}, returning tx hash")
            return tx_hash

        if receipt.get("status") != self.SUCCESS_STATUS:
            raise LedgerError(f"{record.kind} attestation tx {tx_hash} reverted")

        uid = self._uid_from_receipt(receipt)
        if uid is None:
            Log.warning(
                f"Attested event not found for {record.kind} tx {tx_hash}, returning tx hash"
            )
            return tx_hash
        return uid

    def _uid_from_receipt(self, receipt: Any) -> str | None:
        events = self._contract.events.Attested().process_receipt(receipt, errors=DISCARD)
        for event in events:
            uid = event["args"].get("uid")
            if uid:
                return Web3.to_hex(uid)
        return None


def encode_record(record: AttestationRecord) -> bytes:
    """ABI-encode a record's field values in schema order."""
    types = [f.abi_type for f in record.fields]
    values = [_abi_value(f.abi_type, f.value) for f in record.fields]
    return encode(types, values)


def _abi_value(abi_type: str, value: object) -> object:
    if abi_type == "bytes32":
        return _bytes32(str(value))
    if abi_type == "bytes32[]":
        return [_bytes32(str(v)) for v in value]  # type: ignore[attr-defined]
    if abi_type == "address":
        return Web3.to_checksum_address(str(value))
    return value


def _bytes32(hex_value: str) -> bytes:
    raw = bytes.fromhex(hex_value.removeprefix("0x"))
    if len(raw) != 32:
        raise LedgerError(f"Expected a 32-byte value, got {len(raw)} bytes")
    return raw
