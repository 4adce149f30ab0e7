"""Credit score models (static profile shown on the Credit screen)."""

from enum import Enum

from pydantic import BaseModel, Field


class CreditRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class CreditFactor(BaseModel):
    label: str
    score: int = Field(..., ge=0, le=100, description="Percent")
    impact: str = Field(..., pattern="^(High|Medium|Low)$")


class CreditProfile(BaseModel):
    score: int = Field(..., ge=0)
    max_score: int = Field(..., gt=0)
    rating: CreditRating
    factors: list[CreditFactor] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)

    @property
    def score_percentage(self) -> float:
        return self.score / self.max_score * 100
