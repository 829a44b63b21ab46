"""Structured screening output."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Recommendation(str, Enum):
    """Closed set of screening verdicts."""

    STRONG_MATCH = "Strong Match"
    MODERATE_MATCH = "Moderate Match"
    WEAK_MATCH = "Weak Match"


class MatchAssessment(BaseModel):
    """Candidate/job fit as produced by the scoring engine."""

    score: int = Field(ge=0, le=100, description="Overall match percentage")
    recommendation: Recommendation
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)

    @field_validator("strengths", "gaps", "highlights", mode="before")
    @classmethod
    def drop_blank_items(cls, v: Any) -> Any:
        """Strip entries and drop empty ones."""
        if isinstance(v, list):
            return [str(item).strip() for item in v if item is not None and str(item).strip()]
        return v

    def to_analysis(self) -> dict[str, Any]:
        """Analysis payload stored alongside the score."""
        return {
            "recommendation": self.recommendation.value,
            "strengths": self.strengths,
            "gaps": self.gaps,
            "highlights": self.highlights,
        }
