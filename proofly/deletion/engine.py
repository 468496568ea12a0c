"""Verifiable deletion of transient fulfillment artifacts.

Order matters and is fixed:
1. Fingerprint every buffer. All fingerprints exist before anything is
   destroyed, so a receipt can always be issued.
2. Delete the one persistent copy (the uploaded identity file).
3. Overwrite every buffer with zero bytes in place.
4. Issue the receipt and its self-fingerprint.

Only step 1 can raise. A failed remote delete is recorded in the receipt as
``all_files_deleted=False`` and a buffer that cannot be overwritten is logged
and skipped.
"""

import time
from collections.abc import Callable, Sequence

from proofly.deletion.exceptions import FingerprintError
from proofly.deletion.models import (
    DeletionCorrelation,
    DeletionReceipt,
    FileFingerprint,
    TransientBuffer,
)
from proofly.integrity.fingerprint import content_fingerprint
from proofly.logging.logger import Log
from proofly.storage.base import BaseBlobStore


def _now_millis() -> int:
    return int(time.time() * 1000)


class DeletionEngine:
    """Hashes, destroys and receipts the transient data of one run."""

    DELETION_METHOD = "blob_delete_plus_buffer_zeroize"

    def __init__(
        self,
        store: BaseBlobStore,
        clock: Callable[[], int] = _now_millis,
    ) -> None:
        self._store = store
        self._clock = clock

    def run(
        self,
        persistent_ref: str,
        buffers: Sequence[TransientBuffer],
        correlation: DeletionCorrelation,
        scratch: Sequence[TransientBuffer] = (),
    ) -> DeletionReceipt:
        """Destroy ``buffers`` and the stored object behind ``persistent_ref``.

        Args:
            persistent_ref: Storage URL of the uploaded identity file.
            buffers: Artifacts to fingerprint, then zero.
            correlation: Request reference and mail identifiers for the receipt.
            scratch: Derived buffers (e.g. the merged packet) that are zeroed
                but not receipted.

        Raises:
            FingerprintError: if any buffer is empty or already scrubbed.
        """
        file_hashes = self._fingerprint_all(buffers)
        Log.info(
            f"Fingerprinted {len(file_hashes)} artifacts for {correlation.request_ref}"
        )

        remote_deleted = self._delete_remote(persistent_ref, correlation.request_ref)

        for buffer in (*buffers, *scratch):
            if not buffer.zeroize():
                Log.warning(
                    f"Could not overwrite buffer '{buffer.label}' for {correlation.request_ref}"
                )

        receipt = DeletionReceipt.issue(
            correlation=correlation,
            file_hashes=file_hashes,
            deleted_at=self._clock(),
            deletion_method=self.DELETION_METHOD,
            all_files_deleted=remote_deleted,
        )
        Log.info(
            f"Deletion receipt {receipt.receipt_hash} issued for {correlation.request_ref} "
            f"(all_files_deleted={receipt.all_files_deleted})"
        )
        return receipt

    @staticmethod
    def _fingerprint_all(buffers: Sequence[TransientBuffer]) -> tuple[FileFingerprint, ...]:
        if not buffers:
            raise FingerprintError("No buffers supplied for deletion")
        hashes = []
        for buffer in buffers:
            if len(buffer) == 0 or buffer.is_zeroed:
                raise FingerprintError(
                    f"Buffer '{buffer.label}' is empty or already scrubbed"
                )
            hashes.append(FileFingerprint(label=buffer.label, sha256=content_fingerprint(buffer.data)))
        return tuple(hashes)

    def _delete_remote(self, persistent_ref: str, request_ref: str) -> bool:
        try:
            deleted = self._store.delete(persistent_ref)
        except Exception as exc:
            Log.error(f"Stored upload delete raised for {request_ref}: {exc}")
            deleted = False
        if not deleted:
            Log.error(
                f"Stored upload was not deleted for {request_ref}; "
                "receipt will record all_files_deleted=False"
            )
        return deleted
