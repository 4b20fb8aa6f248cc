from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AnalysisSource = Literal["model", "fallback"]


class RiskAnalysis(BaseModel):
    risk_factors: List[str] = Field(default_factory=list)
    predictions: str
    recommendations: str
    risk_score: int = Field(..., ge=1, le=10)


class StoredRiskAnalysis(RiskAnalysis):
    """A RiskAnalysis as persisted in `ai_analyses`; never updated after creation."""
    id: Optional[str] = None
    patient_id: str
    source: AnalysisSource
    analyzed_at: datetime
