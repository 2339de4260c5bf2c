"""Persisted analysis history schemas."""

# ruff: noqa: N815

from pydantic import BaseModel

from civic_lens.schemas.analysis import AnalysisResult
from civic_lens.schemas.election import ElectionRecord


class HistoryEntry(BaseModel):
    """An (election, analysis) pair saved for one session."""

    id: str
    electionData: ElectionRecord
    analysisData: AnalysisResult
    timestamp: str
