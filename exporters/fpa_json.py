"""JSON exporter for the persisted model document."""
from __future__ import annotations

import json
from typing import Any, Dict

from .base import Exporter, register_exporter
from analysis.serialization import dump_document, parse_document


@register_exporter
class FPAJSONExporter(Exporter):
    """The durable ``{logicalFiles, elementaryProcesses}`` document."""

    @property
    def name(self) -> str:
        return "fpa-json"

    def render(self, document: Dict[str, Any], options: Dict[str, Any]) -> str:
        """Render the model as indented JSON.

        The document is normalised through the schema so field names and
        optional keys match what ``import_model`` expects.
        """
        model = parse_document(document)
        result = dump_document(model.logical_files, model.elementary_processes)
        indent = None if options.get('compact') else 2
        return json.dumps(result, indent=indent, ensure_ascii=False)

    def mimetype(self) -> str:
        return "application/json"

    def is_lossless(self) -> bool:
        return True

    def is_human_readable(self) -> bool:
        return False
