from proofly.deletion.engine import DeletionEngine
from proofly.deletion.models import (
    DeletionCorrelation,
    DeletionReceipt,
    FileFingerprint,
    TransientBuffer,
)

__all__ = [
    "DeletionCorrelation",
    "DeletionEngine",
    "DeletionReceipt",
    "FileFingerprint",
    "TransientBuffer",
]
