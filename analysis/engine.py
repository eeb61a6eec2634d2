"""Scoring engine: complexity tiers and Function Points."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .schema import (
    ComplexityTier, ElementaryProcess, EntityScore, FunctionPointSummary,
    LogicalFile, LogicalFileType, ProcessType,
)

logger = logging.getLogger(__name__)

LOW, AVERAGE, HIGH = ComplexityTier.LOW, ComplexityTier.AVERAGE, ComplexityTier.HIGH

LOGICAL_FILE_WEIGHTS: Dict[LogicalFileType, Dict[ComplexityTier, int]] = {
    LogicalFileType.ILF: {LOW: 7, AVERAGE: 10, HIGH: 15},
    LogicalFileType.EIF: {LOW: 5, AVERAGE: 7, HIGH: 10},
}

_EI_EO_WEIGHTS = {LOW: 3, AVERAGE: 4, HIGH: 6}
PROCESS_WEIGHTS: Dict[ProcessType, Dict[ComplexityTier, int]] = {
    ProcessType.EI: _EI_EO_WEIGHTS,
    ProcessType.EO: _EI_EO_WEIGHTS,
    ProcessType.EQ: {LOW: 4, AVERAGE: 5, HIGH: 7},
}

# (single file, two files low-cut, two files high-cut / three or more high-cut)
PROCESS_THRESHOLDS: Dict[ProcessType, tuple] = {
    ProcessType.EI: (5, 5, 15),
    ProcessType.EO: (20, 7, 20),
    ProcessType.EQ: (20, 7, 20),
}


def classify_logical_file(n_rets: int, n_dets: int) -> ComplexityTier:
    """Tier for a data function from its RET and DET counts.

    A file with a single RET never reaches High.
    """
    if n_rets <= 1:
        return LOW if n_dets < 50 else AVERAGE
    if n_rets <= 5:
        if n_dets < 20:
            return LOW
        return AVERAGE if n_dets < 50 else HIGH
    return AVERAGE if n_dets < 50 else HIGH


def classify_process(process_type: ProcessType, n_lfs: int, n_dets: int) -> ComplexityTier:
    """Tier for a transaction from referenced file and DET counts.

    Processes referencing no file at all are rated like single-file ones.
    """
    single, pair_low, upper = PROCESS_THRESHOLDS[ProcessType(process_type)]
    if n_lfs <= 1:
        return LOW if n_dets < single else AVERAGE
    if n_lfs == 2:
        if n_dets < pair_low:
            return LOW
        return AVERAGE if n_dets < upper else HIGH
    return AVERAGE if n_dets < upper else HIGH


class ScoringEngine:
    """Computes Function Points for every entity of a model from scratch."""

    def score_logical_files(self, logical_files: Iterable[LogicalFile]) -> List[EntityScore]:
        logical_files = list(logical_files)
        children: Dict[str, List[LogicalFile]] = {}
        for lf in logical_files:
            if lf.type == LogicalFileType.RET and lf.parent_name is not None:
                children.setdefault(lf.parent_name, []).append(lf)

        scores = []
        for lf in logical_files:
            if lf.type == LogicalFileType.RET:
                continue
            rets = children.get(lf.name, [])
            n_rets = 1 + len(rets)
            n_dets = len(lf.data_elements) + sum(len(ret.data_elements) for ret in rets)
            tier = classify_logical_file(n_rets, n_dets)
            scores.append(EntityScore(
                key=lf.name,
                kind=lf.type.value,
                tier=tier,
                references=n_rets,
                det_count=n_dets,
                points=LOGICAL_FILE_WEIGHTS[lf.type][tier],
            ))
        return scores

    def score_processes(self, processes: Iterable[ElementaryProcess]) -> List[EntityScore]:
        scores = []
        for ep in processes:
            n_lfs = len({ref.logical_file_name for ref in ep.data_elements})
            n_dets = len(ep.data_elements)
            tier = classify_process(ep.type, n_lfs, n_dets)
            scores.append(EntityScore(
                key=ep.id,
                kind=ep.type.value,
                tier=tier,
                references=n_lfs,
                det_count=n_dets,
                points=PROCESS_WEIGHTS[ep.type][tier],
            ))
        return scores

    def evaluate(self, logical_files: Iterable[LogicalFile],
                 processes: Iterable[ElementaryProcess]) -> FunctionPointSummary:
        """Score both collections and write the points back onto each entity.

        RET files are left with no score of their own.
        """
        logical_files = list(logical_files)
        processes = list(processes)

        summary = FunctionPointSummary(
            logical_files=self.score_logical_files(logical_files),
            elementary_processes=self.score_processes(processes),
        )

        lf_points = {s.key: s.points for s in summary.logical_files}
        for lf in logical_files:
            lf.function_points = lf_points.get(lf.name)
        ep_points = {s.key: s.points for s in summary.elementary_processes}
        for ep in processes:
            ep.function_points = ep_points[ep.id]

        logger.info(
            "Evaluated %d logical files and %d elementary processes: %d FP",
            len(summary.logical_files), len(summary.elementary_processes), summary.total,
        )
        return summary
