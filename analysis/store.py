"""Entity store for Logical Files and Elementary Processes.

All mutation goes through the name-keyed operations below. Each returns an
:class:`~analysis.outcome.Outcome`; a rejected operation leaves both
collections untouched and logs a diagnostic (WARNING for duplicates and
no-ops, ERROR for missing entities and invalid references).

Scores are derived state. Any structural mutation clears them, so callers run
:meth:`FPAnalysis.evaluate` before reading totals.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from . import serialization
from .engine import ScoringEngine
from .extractor import extract_schema
from .outcome import FailureKind, Outcome
from .schema import (
    DataElement, ElementaryProcess, FunctionPointSummary, LogicalFile,
    LogicalFileType, ProcessDataElement, ProcessType,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_ID_PATTERN = re.compile(r"^(EI|EO|EQ)_(\d+)$")


def _coerce(model_cls: Type[M], value: Union[M, Dict[str, Any]]) -> M:
    if isinstance(value, model_cls):
        return value.model_copy(deep=True)
    return model_cls.model_validate(value)


class FPAnalysis:
    """Owns the Logical File and Elementary Process collections."""

    def __init__(self, engine: Optional[ScoringEngine] = None):
        self._logical_files: List[LogicalFile] = []
        self._elementary_processes: List[ElementaryProcess] = []
        self._sequences: Dict[ProcessType, int] = {t: 0 for t in ProcessType}
        self._engine = engine or ScoringEngine()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def _reject(self, kind: FailureKind, message: str, level: int = logging.ERROR) -> Outcome:
        logger.log(level, message)
        return Outcome.failure(kind, message)

    def _invalidate_scores(self) -> None:
        for lf in self._logical_files:
            lf.function_points = None
        for ep in self._elementary_processes:
            ep.function_points = None

    def _find_lf(self, name: str) -> Optional[LogicalFile]:
        return next((lf for lf in self._logical_files if lf.name == name), None)

    def _find_ep(self, ep_id: str) -> Optional[ElementaryProcess]:
        return next((ep for ep in self._elementary_processes if ep.id == ep_id), None)

    def _resolves(self, ref: ProcessDataElement) -> bool:
        lf = self._find_lf(ref.logical_file_name)
        return lf is not None and lf.has_data_element(ref.name)

    def _drop_ep_references(self, logical_file_name: str, name: Optional[str] = None) -> int:
        """Remove process references to a file, or to one field of it; returns how many went."""
        dropped = 0
        for ep in self._elementary_processes:
            kept = [
                ref for ref in ep.data_elements
                if not (ref.logical_file_name == logical_file_name
                        and (name is None or ref.name == name))
            ]
            dropped += len(ep.data_elements) - len(kept)
            ep.data_elements = kept
        return dropped

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    def get_logical_files(self) -> List[LogicalFile]:
        """Copies of every Logical File, in insertion order."""
        return [lf.model_copy(deep=True) for lf in self._logical_files]

    def get_elementary_processes(self) -> List[ElementaryProcess]:
        """Copies of every Elementary Process, in insertion order."""
        return [ep.model_copy(deep=True) for ep in self._elementary_processes]

    def get_logical_file(self, name: str) -> Optional[LogicalFile]:
        """Copy of the named Logical File, or None."""
        lf = self._find_lf(name)
        return lf.model_copy(deep=True) if lf else None

    def get_elementary_process(self, ep_id: str) -> Optional[ElementaryProcess]:
        """Copy of the process with this id, or None."""
        ep = self._find_ep(ep_id)
        return ep.model_copy(deep=True) if ep else None

    # ------------------------------------------------------------------
    # Schema extraction
    # ------------------------------------------------------------------
    def extract_schema(self, sql: str) -> List[LogicalFile]:
        """Replace every Logical File with those declared in ``sql``.

        Manually entered files are lost. Process references that no longer
        resolve afterwards are pruned.
        """
        self._logical_files = extract_schema(sql)
        for ep in self._elementary_processes:
            ep.data_elements = [ref for ref in ep.data_elements if self._resolves(ref)]
        self._invalidate_scores()
        logger.info("Extracted %d logical files from SQL", len(self._logical_files))
        return self.get_logical_files()

    # ------------------------------------------------------------------
    # Logical Files
    # ------------------------------------------------------------------
    def add_logical_file(self, name: str, type: Union[LogicalFileType, str] = LogicalFileType.ILF,
                         data_elements: Optional[Iterable[Union[DataElement, Dict[str, Any]]]] = None,
                         description: str = "", parent_name: Optional[str] = None) -> Outcome:
        """Append a Logical File; a RET must name an existing non-RET parent."""
        if self._find_lf(name):
            return self._reject(
                FailureKind.DUPLICATE,
                f'Logical File with name "{name}" already exists. Skipping addition.',
                logging.WARNING,
            )
        try:
            lf_type = LogicalFileType(type)
            elements = [_coerce(DataElement, de) for de in (data_elements or [])]
        except (ValueError, ValidationError) as exc:
            return self._reject(FailureKind.MALFORMED_INPUT, f'Invalid Logical File "{name}": {exc}')

        seen = set()
        for de in elements:
            if de.name in seen:
                return self._reject(
                    FailureKind.DUPLICATE,
                    f'Data Element "{de.name}" appears twice in Logical File "{name}".',
                    logging.WARNING,
                )
            seen.add(de.name)

        if lf_type == LogicalFileType.RET:
            parent = self._find_lf(parent_name) if parent_name else None
            if parent is None:
                return self._reject(
                    FailureKind.INVALID_REFERENCE,
                    f'RET "{name}" must reference an existing parent Logical File, got "{parent_name}".',
                )
            if parent.type == LogicalFileType.RET:
                return self._reject(
                    FailureKind.INVALID_REFERENCE,
                    f'RET "{name}" cannot be nested under RET "{parent_name}".',
                )
        elif parent_name is not None:
            return self._reject(
                FailureKind.INVALID_REFERENCE,
                f'Only RET files take a parent; "{name}" is {lf_type.value}.',
            )

        self._logical_files.append(LogicalFile(
            name=name,
            type=lf_type,
            parent_name=parent_name,
            data_elements=elements,
            description=description or "",
        ))
        self._invalidate_scores()
        logger.debug("Added Logical File %s (%s)", name, lf_type.value)
        return Outcome.success(name)

    def add_data_element(self, lf_name: str, element: Union[DataElement, Dict[str, Any]]) -> Outcome:
        """Append a field to an existing Logical File."""
        lf = self._find_lf(lf_name)
        if not lf:
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Logical File "{lf_name}" not found. Cannot add data element.',
            )
        try:
            element = _coerce(DataElement, element)
        except ValidationError as exc:
            return self._reject(FailureKind.MALFORMED_INPUT, f"Invalid data element: {exc}")
        if lf.has_data_element(element.name):
            return self._reject(
                FailureKind.DUPLICATE,
                f'Data Element "{element.name}" already exists in Logical File "{lf_name}". Skipping addition.',
                logging.WARNING,
            )

        lf.data_elements.append(element)
        self._invalidate_scores()
        return Outcome.success()

    def remove_data_element(self, lf_name: str, element_name: str) -> Outcome:
        """Remove a field and every process reference to it.

        Process references are swept even when the field itself is already
        gone, so an imported dangling reference can still be cleared.
        """
        lf = self._find_lf(lf_name)
        if not lf:
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Logical File "{lf_name}" not found. Cannot remove data element.',
            )

        dropped = self._drop_ep_references(lf_name, element_name)
        had_element = lf.has_data_element(element_name)
        if not had_element and not dropped:
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Data Element "{element_name}" not found in Logical File "{lf_name}". Nothing to remove.',
                logging.WARNING,
            )

        lf.data_elements = [de for de in lf.data_elements if de.name != element_name]
        self._invalidate_scores()
        return Outcome.success()

    def remove_logical_file(self, name: str) -> Outcome:
        """Remove a file, its direct RET children, and process references to both.

        The cascade runs even when the file itself is absent; NOT_FOUND is
        returned only when nothing at all was removed.
        """
        children = [
            lf.name for lf in self._logical_files
            if lf.type == LogicalFileType.RET and lf.parent_name == name
        ]
        dropped = sum(self._drop_ep_references(removed) for removed in [name, *children])
        remaining = [
            lf for lf in self._logical_files
            if lf.name != name and lf.name not in children
        ]
        if len(remaining) == len(self._logical_files) and not dropped:
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Logical File "{name}" not found. Cannot remove.',
            )

        self._logical_files = remaining
        self._invalidate_scores()
        if children:
            logger.info("Removed Logical File %s with RETs: %s", name, ", ".join(children))
        return Outcome.success()

    def set_logical_file_description(self, name: str, description: str) -> Outcome:
        """Replace a Logical File's description."""
        lf = self._find_lf(name)
        if not lf:
            return self._reject(FailureKind.NOT_FOUND, f'Logical File "{name}" not found.')
        lf.description = description
        return Outcome.success()

    # ------------------------------------------------------------------
    # Elementary Processes
    # ------------------------------------------------------------------
    def _check_reference(self, ref: ProcessDataElement, context: str) -> Optional[Outcome]:
        lf = self._find_lf(ref.logical_file_name)
        if not lf:
            return self._reject(
                FailureKind.INVALID_REFERENCE,
                f'Logical File "{ref.logical_file_name}" referenced in Elementary Process "{context}" does not exist.',
            )
        if not lf.has_data_element(ref.name):
            return self._reject(
                FailureKind.INVALID_REFERENCE,
                f'Data Element "{ref.name}" in Logical File "{ref.logical_file_name}" '
                f'referenced in Elementary Process "{context}" does not exist.',
            )
        return None

    def _next_id(self, process_type: ProcessType) -> str:
        count = sum(1 for ep in self._elementary_processes if ep.type == process_type)
        sequence = max(self._sequences[process_type], count) + 1
        self._sequences[process_type] = sequence
        return f"{process_type.value}_{sequence}"

    def add_elementary_process(self, description: str, type: Union[ProcessType, str],
                               data_elements: Iterable[Union[ProcessDataElement, Dict[str, Any]]] = ()) -> Outcome:
        """Add a process; every reference must resolve or nothing is added.

        On success the outcome's ``value`` is the assigned id.
        """
        try:
            process_type = ProcessType(type)
            refs = [_coerce(ProcessDataElement, ref) for ref in data_elements]
        except (ValueError, ValidationError) as exc:
            return self._reject(FailureKind.MALFORMED_INPUT, f'Invalid Elementary Process "{description}": {exc}')

        for ref in refs:
            rejected = self._check_reference(ref, description)
            if rejected:
                return rejected

        ep_id = self._next_id(process_type)
        self._elementary_processes.append(ElementaryProcess(
            id=ep_id,
            description=description,
            type=process_type,
            data_elements=refs,
        ))
        self._invalidate_scores()
        logger.debug("Added Elementary Process %s with %d DETs", ep_id, len(refs))
        return Outcome.success(ep_id)

    def remove_elementary_process(self, ep_id: str) -> Outcome:
        """Remove the process with this id."""
        if not self._find_ep(ep_id):
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Elementary Process "{ep_id}" not found. Nothing to remove.',
                logging.WARNING,
            )
        self._elementary_processes = [ep for ep in self._elementary_processes if ep.id != ep_id]
        self._invalidate_scores()
        return Outcome.success()

    def add_data_element_to_ep(self, ep_id: str, ref: Union[ProcessDataElement, Dict[str, Any]]) -> Outcome:
        """Add one field reference to a process."""
        ep = self._find_ep(ep_id)
        if not ep:
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Elementary Process "{ep_id}" not found. Cannot add DET.',
            )
        try:
            ref = _coerce(ProcessDataElement, ref)
        except ValidationError as exc:
            return self._reject(FailureKind.MALFORMED_INPUT, f"Invalid DET reference: {exc}")

        rejected = self._check_reference(ref, ep.description)
        if rejected:
            return rejected
        if ep.references(ref.logical_file_name, ref.name):
            return self._reject(
                FailureKind.DUPLICATE,
                f'DET "{ref.name}" from "{ref.logical_file_name}" already exists in EP "{ep_id}". Skipping addition.',
                logging.WARNING,
            )

        ep.data_elements.append(ref)
        self._invalidate_scores()
        return Outcome.success()

    def remove_data_element_from_ep(self, ep_id: str, logical_file_name: str, name: str) -> Outcome:
        """Remove one field reference from a process."""
        ep = self._find_ep(ep_id)
        if not ep:
            return self._reject(
                FailureKind.NOT_FOUND,
                f'Elementary Process "{ep_id}" not found. Cannot remove DET.',
            )
        if not ep.references(logical_file_name, name):
            return self._reject(
                FailureKind.NOT_FOUND,
                f'DET "{name}" from "{logical_file_name}" is not part of EP "{ep_id}". Nothing to remove.',
                logging.WARNING,
            )

        ep.data_elements = [
            ref for ref in ep.data_elements
            if not (ref.logical_file_name == logical_file_name and ref.name == name)
        ]
        self._invalidate_scores()
        return Outcome.success()

    def set_elementary_process_description(self, ep_id: str, description: str) -> Outcome:
        """Replace a process's description."""
        ep = self._find_ep(ep_id)
        if not ep:
            return self._reject(FailureKind.NOT_FOUND, f'Elementary Process "{ep_id}" not found.')
        ep.description = description
        return Outcome.success()

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def evaluate(self) -> FunctionPointSummary:
        """Recompute every score from scratch."""
        return self._engine.evaluate(self._logical_files, self._elementary_processes)

    def get_total_function_points(self) -> int:
        """Sum of current scores; 0 until :meth:`evaluate` runs after a mutation."""
        return (
            sum(lf.function_points or 0 for lf in self._logical_files)
            + sum(ep.function_points or 0 for ep in self._elementary_processes)
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def export_model(self) -> Dict[str, Any]:
        """Deep, JSON-ready snapshot of both collections."""
        return serialization.dump_document(self._logical_files, self._elementary_processes)

    def import_model(self, doc: Dict[str, Any]) -> Outcome:
        """Replace both collections with those of ``doc``.

        Missing keys mean empty collections. A document that does not fit
        the model is rejected and the store keeps its current content.
        Scores carried by the document are discarded; run :meth:`evaluate`
        before reading totals.
        """
        try:
            model = serialization.parse_document(doc if doc is not None else {})
        except ValidationError as exc:
            return self._reject(FailureKind.MALFORMED_INPUT, f"Cannot import model document: {exc}")

        self._logical_files = model.logical_files
        self._elementary_processes = model.elementary_processes
        self._invalidate_scores()
        self._sequences = {t: 0 for t in ProcessType}
        for ep in self._elementary_processes:
            match = _ID_PATTERN.match(ep.id)
            if match:
                process_type = ProcessType(match.group(1))
                self._sequences[process_type] = max(self._sequences[process_type], int(match.group(2)))
        logger.info(
            "Imported %d logical files and %d elementary processes",
            len(self._logical_files), len(self._elementary_processes),
        )
        return Outcome.success()
