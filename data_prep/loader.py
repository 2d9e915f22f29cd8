from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from core.config import DEFAULT_CONFIG, ProjectionConfig
from core.models import CashFlowSnapshot

from .snapshot import CashFlowDocument, snapshot_to_document, to_snapshot

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Stored document is structurally unusable (wrong types, missing ids)."""


def parse_snapshot(
    data: Mapping[str, Any],
    *,
    today: Optional[date] = None,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> CashFlowSnapshot:
    """
    Build a snapshot from a stored document.

    Accepts the camelCase document or a storage row with snake_case columns
    (starting_balance, warning_threshold, ...). `today` fills a missing
    starting date and legacy credit cards without a balance date.
    """
    try:
        doc = CashFlowDocument.model_validate(dict(data))
    except ValidationError as exc:
        raise SnapshotError(f"Invalid cash-flow document: {exc}") from exc

    snapshot = to_snapshot(doc, today=today or date.today(), config=config)
    logger.debug(
        "Parsed snapshot: %d income(s), %d expense(s)",
        len(snapshot.incomes), len(snapshot.expenses),
    )
    return snapshot


def load_snapshot(
    path: Union[str, Path],
    *,
    today: Optional[date] = None,
    config: ProjectionConfig = DEFAULT_CONFIG,
) -> CashFlowSnapshot:
    """Load a JSON document from disk. A missing file raises FileNotFoundError."""
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotError(f"{path} must hold a JSON object, got {type(data).__name__}")

    snapshot = parse_snapshot(data, today=today, config=config)
    logger.info("Loaded snapshot from %s", path)
    return snapshot


def save_snapshot(snapshot: CashFlowSnapshot, path: Union[str, Path]) -> None:
    """Write the snapshot back in the stored camelCase shape."""
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(snapshot_to_document(snapshot), fh, indent=2)
    logger.info("Saved snapshot to %s", path)
