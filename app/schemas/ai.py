"""Pydantic schemas for AI insights."""
from typing import List

from pydantic import BaseModel, Field


class AttritionRiskResponse(BaseModel):
    """Attrition risk score (0-100) with the reasons behind it."""
    score: float = Field(..., ge=0, le=100)
    reasons: List[str] = []


class SalesForecastResponse(BaseModel):
    """Short sales outlook with suggestions."""
    forecast: str
    suggestions: List[str] = []
