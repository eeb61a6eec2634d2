"""Model document export/import and file persistence.

The document is ``{"logicalFiles": [...], "elementaryProcesses": [...]}``
with the camelCase field names of :mod:`analysis.schema`.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from .schema import ElementaryProcess, FunctionPointModel, LogicalFile

if TYPE_CHECKING:
    from .store import FPAnalysis

logger = logging.getLogger(__name__)


def dump_document(logical_files: Iterable[LogicalFile],
                  processes: Iterable[ElementaryProcess]) -> Dict[str, Any]:
    """Deep, JSON-ready copy of both collections."""
    model = FunctionPointModel(
        logical_files=list(logical_files),
        elementary_processes=list(processes),
    )
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_document(doc: Dict[str, Any]) -> FunctionPointModel:
    """Validate a document; raises ``pydantic.ValidationError`` if it does not fit."""
    return FunctionPointModel.model_validate(doc)


def save_model(store: "FPAnalysis", path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(store.export_model(), f, indent=2, ensure_ascii=False)
    logger.info("Saved model to %s", path)
    return path


def load_model(path: Path | str, store: Optional["FPAnalysis"] = None) -> "FPAnalysis":
    """Read a model document into ``store`` (a new one by default).

    Raises ``OSError`` or ``json.JSONDecodeError`` when the file cannot be
    read, and ``ValueError`` when its content does not fit the model.
    """
    from .store import FPAnalysis

    with open(path, 'r', encoding='utf-8') as f:
        doc = json.load(f)

    store = store if store is not None else FPAnalysis()
    outcome = store.import_model(doc)
    if not outcome:
        raise ValueError(outcome.message)
    return store
