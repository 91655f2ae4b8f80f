"""
AI Services Module for PEPL HRMS

This module provides Gemini-backed insights:
- Attrition risk (attendance, leave and tenure signals)
- Sales forecast (revenue vs. target)
"""

from app.services.ai.gemini_client import GeminiClient, GeminiError
from app.services.ai.insights_service import AIInsightsService

__all__ = [
    "GeminiClient",
    "GeminiError",
    "AIInsightsService",
]
