"""
Emotion catalog — fixed reference data for the six emotion scales.

Each scale owns an ordered list of intensity levels with valence
(unpleasant → pleasant) and arousal (calm → intense) on a 0–10 axis.
The catalog is immutable; nothing at runtime edits it.

Lookups never raise. `resolve()` returns either a ResolvedLevel or an
Unresolved marker carrying the reason, so callers must decide explicitly
what an unknown emotion/level means for them.

Public API
----------
get_scale(key)          -> EmotionScale | None
resolve(emotion, level) -> ResolvedLevel | Unresolved
emotion_name(key)       -> str   (raw key when unknown)
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union


@dataclass(frozen=True)
class EmotionLevel:
    level: int
    label: str
    valence: float
    arousal: float
    description: str
    examples: str
    regulation: str


@dataclass(frozen=True)
class EmotionScale:
    key: str
    name: str
    valence_base: float
    levels: tuple[EmotionLevel, ...]

    def level(self, number: int) -> Optional[EmotionLevel]:
        for lvl in self.levels:
            if lvl.level == number:
                return lvl
        return None


# ---------------------------------------------------------------------------
# Lookup results
# ---------------------------------------------------------------------------

class UnresolvedReason:
    UNKNOWN_EMOTION = "unknown_emotion"
    UNKNOWN_LEVEL   = "unknown_level"


@dataclass(frozen=True)
class ResolvedLevel:
    scale: EmotionScale
    level: EmotionLevel

    @property
    def resolved(self) -> bool:
        return True


@dataclass(frozen=True)
class Unresolved:
    emotion: str
    level: object
    reason: str
    scale: Optional[EmotionScale] = None

    @property
    def resolved(self) -> bool:
        return False


Resolution = Union[ResolvedLevel, Unresolved]


# ---------------------------------------------------------------------------
# Catalog data
# ---------------------------------------------------------------------------

_SCALES: tuple[EmotionScale, ...] = (
    EmotionScale("alegria", "Alegria", 7.5, (
        EmotionLevel(1, "Alívio", 6.5, 3.0, "Sensação de 'ufa!'", "Terminar prova", "Respiração profunda"),
        EmotionLevel(2, "Serenidade", 7.0, 2.5, "Paz interior", "Meditar", "Mindfulness"),
        EmotionLevel(3, "Gratidão", 7.5, 4.0, "Apreciar coisas boas", "Ajuda", "Diário"),
        EmotionLevel(4, "Contentamento", 8.0, 4.5, "Satisfação", "Projeto", "Compartilhar"),
        EmotionLevel(5, "Prazer", 8.5, 6.5, "Bem-estar", "Comida", "Exercício"),
        EmotionLevel(6, "Êxtase", 9.0, 8.0, "Imersão profunda", "Flow", "Flow"),
        EmotionLevel(7, "Euforia", 9.5, 9.5, "Pico máximo", "Grande conquista", "Cautela"),
    )),
    EmotionScale("tristeza", "Tristeza", 3.0, (
        EmotionLevel(1, "Desapontamento", 4.0, 3.5, "Expectativas não atendidas", "Plano cancelado", "Reestruturação"),
        EmotionLevel(2, "Decepção", 3.5, 4.0, "Quebra de confiança", "Promessa quebrada", "Conversar"),
        EmotionLevel(3, "Melancolia", 3.0, 3.0, "Tristeza pensativa", "Nostalgia", "Arte"),
        EmotionLevel(4, "Mágoa", 2.5, 5.0, "Dor emocional", "Rejeição", "Comunicação"),
        EmotionLevel(5, "Sofrimento", 2.0, 6.0, "Dor profunda", "Perda", "Ajuda profissional"),
        EmotionLevel(6, "Angústia", 1.5, 7.0, "Tempestade interna", "Crise", "Profissional"),
        EmotionLevel(7, "Desespero", 1.0, 5.5, "Sem esperança", "Depressão", "Ajuda imediata"),
    )),
    EmotionScale("raiva", "Raiva", 3.0, (
        EmotionLevel(1, "Aversão", 4.5, 4.0, "Repulsa leve", "Inconveniente", "Afastamento"),
        EmotionLevel(2, "Irritação", 4.0, 5.5, "Agitação", "Trânsito", "Pausas"),
        EmotionLevel(3, "Ressentimento", 3.5, 5.0, "Raiva reaquecida", "Injustiça", "Terapia"),
        EmotionLevel(4, "Raiva", 3.0, 7.0, "Resposta forte", "Desrespeito", "Time-out"),
        EmotionLevel(5, "Rancor", 2.5, 6.5, "Raiva amarga", "Traição", "Perdão"),
        EmotionLevel(6, "Ódio", 2.0, 7.5, "Aversão profunda", "Animosidade", "Profissional"),
        EmotionLevel(7, "Fúria", 1.5, 9.5, "Explosão", "Agressividade", "Afastamento imediato"),
    )),
    EmotionScale("medo", "Medo", 3.0, (
        EmotionLevel(1, "Nervosismo", 4.5, 5.0, "Agitação pré-evento", "Apresentação", "Preparação"),
        EmotionLevel(2, "Insegurança", 4.0, 5.5, "Dúvida", "Capacidades", "Autoeficácia"),
        EmotionLevel(3, "Preocupação", 3.5, 6.0, "Pensamento repetido", "Futuro", "Cognitiva"),
        EmotionLevel(4, "Ansiedade", 3.0, 7.0, "Medo futuro", "Generalizada", "TCC"),
        EmotionLevel(5, "Medo", 2.5, 8.0, "Perigo real", "Ameaça", "Segurança"),
        EmotionLevel(6, "Terror", 2.0, 9.0, "Medo paralisante", "Extremo", "Garantir segurança"),
        EmotionLevel(7, "Pânico", 1.0, 10.0, "Onda avassaladora", "Ataque", "Grounding"),
    )),
    EmotionScale("surpresa", "Surpresa", 5.0, (
        EmotionLevel(1, "Surpresa", 5.0, 5.5, "Reação instantânea", "Inesperado", "Avaliar"),
        EmotionLevel(2, "Curiosidade", 6.5, 6.0, "Desejo de saber", "Descoberta", "Explorar"),
        EmotionLevel(3, "Fascínio", 7.0, 6.5, "Atenção capturada", "Impressionante", "Imersão"),
        EmotionLevel(4, "Admiração", 7.5, 6.0, "Algo grandioso", "Arte", "Contemplação"),
        EmotionLevel(5, "Assombro", 8.0, 7.0, "Surpresa positiva", "Transcendente", "Integração"),
        EmotionLevel(6, "Pasmo", 5.0, 8.0, "Evento chocante", "Choque", "Processar"),
        EmotionLevel(7, "Espanto", 5.0, 9.0, "Reação máxima", "Extraordinário", "Verificar"),
    )),
    EmotionScale("nojo", "Nojo", 3.0, (
        EmotionLevel(1, "Desprezo", 4.0, 4.5, "Nojo social", "Antiético", "Limites"),
        EmotionLevel(2, "Desgosto", 3.5, 5.0, "Ofende sentidos", "Comida", "Afastamento"),
        EmotionLevel(3, "Repulsa", 3.0, 6.5, "Vontade forte", "Contaminação", "Afastar"),
        EmotionLevel(4, "Indignação", 2.5, 7.0, "Nojo + raiva", "Injustiça", "Ação"),
        EmotionLevel(5, "Aversão", 2.0, 8.0, "Nojo máximo", "Náusea", "Remover"),
    )),
)

EMOTIONAL_SCALES: Mapping[str, EmotionScale] = MappingProxyType({s.key: s for s in _SCALES})


# ---------------------------------------------------------------------------
# Public lookups
# ---------------------------------------------------------------------------

def get_scale(key: str) -> Optional[EmotionScale]:
    return EMOTIONAL_SCALES.get(key)


def is_known_emotion(key: str) -> bool:
    return key in EMOTIONAL_SCALES


def resolve(emotion: str, level: object) -> Resolution:
    """Look up (emotion, level) without ever raising."""
    scale = EMOTIONAL_SCALES.get(emotion)
    if scale is None:
        return Unresolved(emotion, level, UnresolvedReason.UNKNOWN_EMOTION)
    if isinstance(level, bool) or not isinstance(level, int):
        return Unresolved(emotion, level, UnresolvedReason.UNKNOWN_LEVEL, scale)
    lvl = scale.level(level)
    if lvl is None:
        return Unresolved(emotion, level, UnresolvedReason.UNKNOWN_LEVEL, scale)
    return ResolvedLevel(scale, lvl)


def emotion_name(key: str) -> str:
    """Display name of an emotion; the raw key when the catalog lacks it."""
    scale = EMOTIONAL_SCALES.get(key)
    return scale.name if scale else key
