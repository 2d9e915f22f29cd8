"""
Data preparation — loading and saving the stored document, validation, and
copy-on-write edits that produce the next snapshot.
"""

from .loader import SnapshotError, load_snapshot, parse_snapshot, save_snapshot
from .snapshot import CashFlowDocument, snapshot_to_document, to_snapshot
from .validators import ValidationResult, validate_snapshot
from .edits import (
    add_item,
    update_item,
    delete_item,
    update_account,
    save_instance_override,
    remove_instance_override,
    build_instance_override,
    skip_instance,
    restore_instance,
    is_stale_edit,
)

__all__ = [
    "SnapshotError",
    "load_snapshot",
    "parse_snapshot",
    "save_snapshot",
    "CashFlowDocument",
    "snapshot_to_document",
    "to_snapshot",
    "ValidationResult",
    "validate_snapshot",
    "add_item",
    "update_item",
    "delete_item",
    "update_account",
    "save_instance_override",
    "remove_instance_override",
    "build_instance_override",
    "skip_instance",
    "restore_instance",
    "is_stale_edit",
]
