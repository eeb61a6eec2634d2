"""Markdown exporter for a human-readable Function Point report."""
from __future__ import annotations

from typing import Any, Dict, Optional

from .base import Exporter, register_exporter
from analysis.schema import ProcessType
from analysis.store import FPAnalysis


def _cell(text: Optional[str]) -> str:
    """Flatten free text so it stays inside one table cell."""
    flat = " ".join((text or "").split())
    return flat.replace("|", "\\|") if flat else "—"


@register_exporter
class FPAMarkdownExporter(Exporter):
    """Function Point report with per-entity tiers and totals."""

    @property
    def name(self) -> str:
        return "fpa-markdown"

    def render(self, document: Dict[str, Any], options: Dict[str, Any]) -> str:
        """Score the document and render it as Markdown."""
        store = FPAnalysis()
        outcome = store.import_model(document)
        if not outcome:
            raise ValueError(outcome.message)
        summary = store.evaluate()

        logical_files = {lf.name: lf for lf in store.get_logical_files()}
        processes = {ep.id: ep for ep in store.get_elementary_processes()}

        lines = []

        # Header
        lines.append(f"# {options.get('title') or 'Function Point Analysis'}")
        lines.append("")
        if options.get('source'):
            lines.append(f"**Source:** {options['source']}")
            lines.append("")

        # Summary
        lines.append("## Summary")
        lines.append("")
        lines.append(f"- **Logical Files:** {len(summary.logical_files)}")
        lines.append(f"- **Elementary Processes:** {len(summary.elementary_processes)}")
        lines.append(f"- **Data Function Points:** {summary.data_function_points}")
        lines.append(f"- **Transaction Function Points:** {summary.transaction_function_points}")
        lines.append(f"- **Total Function Points:** {summary.total}")
        lines.append("")

        # Data functions
        lines.append("## Logical Files")
        lines.append("")
        if summary.logical_files:
            lines.append("| Name | Type | RETs | DETs | Complexity | FP | Description |")
            lines.append("|------|------|------|------|------------|----|-------------|")
            for score in summary.logical_files:
                description = _cell(logical_files[score.key].description)
                lines.append(
                    f"| `{score.key}` | {score.kind} | {score.references} | {score.det_count} "
                    f"| {score.tier.value} | {score.points} | {description} |"
                )
        else:
            lines.append("_No Logical Files._")
        lines.append("")

        rets = [lf for lf in logical_files.values() if lf.parent_name is not None]
        if rets:
            lines.append("**Record Element Types:**")
            lines.append("")
            for ret in rets:
                lines.append(f"- `{ret.name}` in `{ret.parent_name}` ({len(ret.data_elements)} DETs)")
            lines.append("")

        # Transactional functions
        lines.append("## Elementary Processes")
        lines.append("")
        if summary.elementary_processes:
            lines.append("| Id | Type | Description | FTRs | DETs | Complexity | FP |")
            lines.append("|----|------|-------------|------|------|------------|----|")
            for score in summary.elementary_processes:
                ep = processes[score.key]
                label = ProcessType(score.kind).label
                lines.append(
                    f"| `{score.key}` | {label} | {_cell(ep.description)} | {score.references} "
                    f"| {score.det_count} | {score.tier.value} | {score.points} |"
                )
        else:
            lines.append("_No Elementary Processes._")
        lines.append("")

        if options.get('include_attributes'):
            lines.append("## Data Elements")
            lines.append("")
            for lf in logical_files.values():
                lines.append(f"### {lf.name}")
                lines.append("")
                for de in lf.data_elements:
                    lines.append(f"- `{de.name}` {de.dtype}")
                lines.append("")

        return "\n".join(lines)

    def mimetype(self) -> str:
        return "text/markdown"

    def is_lossless(self) -> bool:
        return False  # Report only; cannot be imported back

    def is_human_readable(self) -> bool:
        return True
