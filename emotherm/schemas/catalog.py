"""
Catalog response schemas.

GET /catalog        → list[EmotionScaleSummary]
GET /catalog/{key}  → EmotionScaleResponse
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EmotionLevelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: int
    label: str
    valence: float = Field(description="Pleasantness on a 0-10 scale.")
    arousal: float = Field(description="Activation on a 0-10 scale.")
    description: str
    examples: str
    regulation: str = Field(description="Suggested regulation strategy for this rung.")


class EmotionScaleSummary(BaseModel):
    key: str
    name: str
    valence_base: float
    level_count: int


class EmotionScaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    name: str
    valence_base: float
    levels: list[EmotionLevelResponse]
