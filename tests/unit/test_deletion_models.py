import json
from dataclasses import replace

from proofly.deletion.models import (
    DeletionCorrelation,
    DeletionReceipt,
    FileFingerprint,
    TransientBuffer,
    canonical_bytes,
)
from proofly.integrity.fingerprint import content_fingerprint


def _make_receipt(all_files_deleted: bool = True) -> DeletionReceipt:
    return DeletionReceipt.issue(
        correlation=DeletionCorrelation(request_ref="PRF-2026-ABCD", mail_id="ltr_1", fee_id="chk_1"),
        file_hashes=(
            FileFingerprint(label="photoId", sha256="a" * 64),
            FileFingerprint(label="filledForm", sha256="b" * 64),
        ),
        deleted_at=1_760_000_000_000,
        deletion_method="blob_delete_plus_buffer_zeroize",
        all_files_deleted=all_files_deleted,
    )


class TestTransientBuffer:
    def test_copies_input_into_owned_buffer(self) -> None:
        source = b"hello"
        buffer = TransientBuffer("photoId", source)
        assert buffer.to_bytes() == source
        assert len(buffer) == 5

    def test_zeroize_overwrites_in_place(self) -> None:
        buffer = TransientBuffer("photoId", b"sensitive")
        view = buffer.data
        assert buffer.zeroize() is True
        assert buffer.is_zeroed
        assert view == bytearray(len(b"sensitive"))

    def test_zeroize_keeps_length(self) -> None:
        buffer = TransientBuffer("photoId", b"\x01" * 100)
        buffer.zeroize()
        assert len(buffer) == 100

    def test_repr_hides_content(self) -> None:
        buffer = TransientBuffer("photoId", b"secret")
        assert "secret" not in repr(buffer)
        assert "photoId" in repr(buffer)


class TestDeletionReceipt:
    def test_receipt_hash_is_64_hex(self) -> None:
        receipt = _make_receipt()
        assert len(receipt.receipt_hash) == 64
        int(receipt.receipt_hash, 16)

    def test_receipt_is_self_consistent(self) -> None:
        assert _make_receipt().is_consistent()

    def test_hash_recomputable_from_visible_fields(self) -> None:
        receipt = _make_receipt()
        body = {
            "request_ref": receipt.request_ref,
            "file_hashes": [{"label": h.label, "sha256": h.sha256} for h in receipt.file_hashes],
            "deleted_at": receipt.deleted_at,
            "mail_id": receipt.mail_id,
            "fee_id": receipt.fee_id,
            "deletion_method": receipt.deletion_method,
            "all_files_deleted": receipt.all_files_deleted,
        }
        encoded = json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")
        assert content_fingerprint(encoded) == receipt.receipt_hash

    def test_tampered_field_breaks_consistency(self) -> None:
        receipt = _make_receipt()
        assert not replace(receipt, all_files_deleted=False).is_consistent()

    def test_degraded_flag_changes_hash(self) -> None:
        assert _make_receipt(True).receipt_hash != _make_receipt(False).receipt_hash


class TestCanonicalBytes:
    def test_sorted_compact(self) -> None:
        assert canonical_bytes({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'
