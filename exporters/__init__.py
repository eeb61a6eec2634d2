"""Exporters package initialization and registry."""
from __future__ import annotations

from .base import ExporterRegistry, Exporter, register_exporter

# Import all exporters to ensure they're registered
from .fpa_json import FPAJSONExporter
from .fpa_markdown import FPAMarkdownExporter

# Export main classes and functions
__all__ = [
    'ExporterRegistry',
    'Exporter',
    'register_exporter',
    'FPAJSONExporter',
    'FPAMarkdownExporter',
]


def get_exporter(format_name: str) -> Exporter | None:
    """Get an exporter instance by format name."""
    exporter_class = ExporterRegistry.get(format_name)
    if exporter_class:
        return exporter_class()
    return None


def list_available_formats() -> list[str]:
    """List all available export formats."""
    return ExporterRegistry.list_formats()


def get_human_readable_formats() -> list[str]:
    """Get report formats."""
    return ExporterRegistry.get_human_readable_formats()


def get_lossless_formats() -> list[str]:
    """Get lossless formats."""
    return ExporterRegistry.get_lossless_formats()
