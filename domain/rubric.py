"""Composite scoring rubric.

Risk is scored 1 (low) .. 5 (high) by the model. The active rubric inverts it
(``6 - risk``) before weighting so a low-risk candidate gains points; there is
no separate penalty term. Weights are fixed per version and never changed per
request: a new weighting means a new version string.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Mapping

from domain.schemas import DimensionResult

MIN_FINAL_SCORE = 0.0
MAX_FINAL_SCORE = 5.0
RISK_INVERSION_BASE = 6


def round_half_up(value: float, ndigits: int = 2) -> float:
    # decimal on the repr so 2.345 rounds to 2.35, not 2.34
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Rubric:
    version: str
    weights: Mapping[str, float]
    notes: str = ""

    def compose(
        self,
        relevance: DimensionResult,
        experience: DimensionResult,
        motivation: DimensionResult,
        risk: DimensionResult,
    ) -> float:
        risk_inversion = RISK_INVERSION_BASE - risk.score  # 5 -> 1, 1 -> 5
        final = (
            self.weights["relevance"] * relevance.score
            + self.weights["experience"] * experience.score
            + self.weights["motivation"] * motivation.score
            + self.weights["risk"] * risk_inversion
        )
        return round_half_up(clamp(final, MIN_FINAL_SCORE, MAX_FINAL_SCORE))

    def describe(self) -> dict:
        return {
            "version": self.version,
            "weights": dict(self.weights),
            "notes": self.notes,
        }


ACTIVE_RUBRIC = Rubric(
    version="v1.1-inverted-risk",
    weights=MappingProxyType({
        "relevance": 0.35,
        "experience": 0.25,
        "motivation": 0.25,
        "risk": 0.15,
    }),
    notes=(
        "Weights calibrated for fintech operations profiles. Applied to 1-5 "
        "dimension scores; risk contributes as (6 - risk) so lower risk scores higher."
    ),
)
