"""Function Point Analysis engine: data model, extraction, CRUD and scoring."""

from .schema import (
    DataElement, LogicalFile, LogicalFileType, ElementaryProcess,
    ProcessDataElement, ProcessType, ComplexityTier, FunctionPointModel,
    EntityScore, FunctionPointSummary
)
from .outcome import FailureKind, Outcome
from .extractor import extract_schema
from .engine import ScoringEngine, classify_logical_file, classify_process
from .store import FPAnalysis
from .serialization import load_model, save_model

__all__ = [
    'DataElement', 'LogicalFile', 'LogicalFileType', 'ElementaryProcess',
    'ProcessDataElement', 'ProcessType', 'ComplexityTier', 'FunctionPointModel',
    'EntityScore', 'FunctionPointSummary',
    'FailureKind', 'Outcome',
    'extract_schema',
    'ScoringEngine', 'classify_logical_file', 'classify_process',
    'FPAnalysis',
    'load_model', 'save_model',
]
