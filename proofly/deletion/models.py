"""Transient buffers and the deletion receipt.

Receipt canonicalization: the self-fingerprint is the sha256 hex digest of the
UTF-8 JSON encoding of every receipt field except ``receipt_hash``, with keys
sorted and separators ``(",", ":")``. ``file_hashes`` is a list of
``{"label": ..., "sha256": ...}`` objects in the order the buffers were given.
Anyone holding the visible fields can recompute it.
"""

import json
from dataclasses import asdict, dataclass

from proofly.integrity.fingerprint import content_fingerprint


class TransientBuffer:
    """A named, owned byte buffer holding one sensitive artifact.

    The contents live in a bytearray so they can be overwritten in place.
    """

    __slots__ = ("label", "_data")

    def __init__(self, label: str, data: bytes | bytearray) -> None:
        self.label = label
        self._data = bytearray(data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"TransientBuffer(label={self.label!r}, size={len(self._data)})"

    @property
    def data(self) -> bytearray:
        return self._data

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    @property
    def is_zeroed(self) -> bool:
        return not any(self._data)

    def zeroize(self) -> bool:
        """Overwrite the contents with zero bytes in place.

        Returns False when the memory could not be written.
        """
        try:
            memoryview(self._data)[:] = bytes(len(self._data))
        except (BufferError, ValueError, TypeError):
            return False
        return True


@dataclass(frozen=True)
class FileFingerprint:
    label: str
    sha256: str


@dataclass(frozen=True)
class DeletionCorrelation:
    """Identifiers tying a receipt to the run and its mail pieces."""

    request_ref: str
    mail_id: str
    fee_id: str


@dataclass(frozen=True)
class DeletionReceipt:
    request_ref: str
    file_hashes: tuple[FileFingerprint, ...]
    deleted_at: int  # unix milliseconds
    mail_id: str
    fee_id: str
    deletion_method: str
    all_files_deleted: bool
    receipt_hash: str

    @classmethod
    def issue(
        cls,
        *,
        correlation: DeletionCorrelation,
        file_hashes: tuple[FileFingerprint, ...],
        deleted_at: int,
        deletion_method: str,
        all_files_deleted: bool,
    ) -> "DeletionReceipt":
        """Build a receipt and fix its self-fingerprint from the other fields."""
        body = {
            "request_ref": correlation.request_ref,
            "file_hashes": [asdict(h) for h in file_hashes],
            "deleted_at": deleted_at,
            "mail_id": correlation.mail_id,
            "fee_id": correlation.fee_id,
            "deletion_method": deletion_method,
            "all_files_deleted": all_files_deleted,
        }
        return cls(
            request_ref=correlation.request_ref,
            file_hashes=file_hashes,
            deleted_at=deleted_at,
            mail_id=correlation.mail_id,
            fee_id=correlation.fee_id,
            deletion_method=deletion_method,
            all_files_deleted=all_files_deleted,
            receipt_hash=content_fingerprint(canonical_bytes(body)),
        )

    def canonical_fields(self) -> dict[str, object]:
        data = asdict(self)
        data.pop("receipt_hash")
        data["file_hashes"] = [dict(h) for h in data["file_hashes"]]
        return data

    def compute_hash(self) -> str:
        return content_fingerprint(canonical_bytes(self.canonical_fields()))

    def is_consistent(self) -> bool:
        return self.compute_hash() == self.receipt_hash


def canonical_bytes(body: dict[str, object]) -> bytes:
    return json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")
