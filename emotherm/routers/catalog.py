"""
Catalog router — read-only reference data.

GET /catalog         — the six scales, without their levels
GET /catalog/{key}   — one scale with every level
"""
from __future__ import annotations

from fastapi import APIRouter

from emotherm.core.errors import UnknownEmotionError
from emotherm.schemas.catalog import EmotionLevelResponse, EmotionScaleResponse, EmotionScaleSummary
from emotherm.schemas.common import ErrorResponse
from emotherm.services.catalog import EMOTIONAL_SCALES, EmotionScale, get_scale

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _scale_to_response(scale: EmotionScale) -> EmotionScaleResponse:
    return EmotionScaleResponse(
        key=scale.key,
        name=scale.name,
        valence_base=scale.valence_base,
        levels=[
            EmotionLevelResponse(
                level=lvl.level,
                label=lvl.label,
                valence=lvl.valence,
                arousal=lvl.arousal,
                description=lvl.description,
                examples=lvl.examples,
                regulation=lvl.regulation,
            )
            for lvl in scale.levels
        ],
    )


@router.get("", response_model=list[EmotionScaleSummary], summary="List emotion scales")
def list_scales():
    return [
        EmotionScaleSummary(
            key=s.key,
            name=s.name,
            valence_base=s.valence_base,
            level_count=len(s.levels),
        )
        for s in EMOTIONAL_SCALES.values()
    ]


@router.get(
    "/{key}",
    response_model=EmotionScaleResponse,
    summary="One emotion scale with its levels",
    responses={404: {"model": ErrorResponse, "description": "Emotion key not in the catalog."}},
)
def read_scale(key: str):
    scale = get_scale(key)
    if scale is None:
        raise UnknownEmotionError(key)
    return _scale_to_response(scale)
