"""Map simulation outcomes to a viability tier, a composite score and a 0-10 rating."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

VERY_VIABLE = "Very viable and stable"
VIABLE = "Viable"
EXTREME_CARE = "Viable with extreme care"
HIGHER_ALLOCATION = "Viable with a higher % allocated"
RENTING_ONLY = "Viable only when renting"
NO_VIABLE_PATH = "No viable path"

# (minimum composite score, tier); the first satisfied row wins.
TIER_LADDER: Tuple[Tuple[float, str], ...] = (
    (80, VERY_VIABLE),
    (60, VIABLE),
    (40, EXTREME_CARE),
    (20, RENTING_ONLY),
)

TIER_BASE_SCORES = {
    VERY_VIABLE: 10.0,
    VIABLE: 8.0,
    HIGHER_ALLOCATION: 6.0,
    EXTREME_CARE: 5.0,
    RENTING_ONLY: 3.0,
    NO_VIABLE_PATH: 0.0,
}

HOME_SPEED_POINTS = ((5, 40), (10, 30), (15, 20), (20, 10))
HOME_SPEED_FALLBACK = 5
DEBT_SPEED_POINTS = ((5, 30), (10, 22), (15, 15), (20, 8))
DEBT_SPEED_FALLBACK = 3
BUFFER_POINTS = ((0.20, 20), (0.15, 15), (0.10, 10), (0.05, 5))
DISPOSABLE_POINTS = ((50_000, 10), (30_000, 7), (15_000, 5), (5_000, 3))


@dataclass
class Classification:
    tier: str
    score: float
    rating: float
    gap: float


def _speed_points(years: Optional[float], ladder: Sequence[Tuple[int, int]], fallback: int) -> int:
    if years is None:
        return 0
    for limit, points in ladder:
        if years <= limit:
            return points
    return fallback


def _buffer_points(gap: float) -> int:
    if gap <= 0:
        return 0
    for minimum, points in BUFFER_POINTS:
        if gap >= minimum:
            return points
    return 0


def _disposable_points(disposable_income: float) -> int:
    for minimum, points in DISPOSABLE_POINTS:
        if disposable_income >= minimum:
            return points
    return 1 if disposable_income > 0 else 0


def composite_score(
    years_to_home: Optional[float],
    years_to_debt_free: Optional[float],
    gap: float,
    disposable_income: float,
) -> float:
    return float(
        _speed_points(years_to_home, HOME_SPEED_POINTS, HOME_SPEED_FALLBACK)
        + _speed_points(years_to_debt_free, DEBT_SPEED_POINTS, DEBT_SPEED_FALLBACK)
        + _buffer_points(gap)
        + _disposable_points(disposable_income)
    )


def tier_for_score(score: float) -> str:
    for threshold, tier in TIER_LADDER:
        if score >= threshold:
            return tier
    return NO_VIABLE_PATH


def viability_rating(tier: str, years_to_home: Optional[float], years_to_debt_free: Optional[float]) -> float:
    rating = TIER_BASE_SCORES.get(tier, 0.0)
    if years_to_debt_free is None:
        rating -= 1.0
    elif years_to_debt_free <= 5:
        rating += 0.5
    elif years_to_debt_free <= 10:
        rating += 0.2
    if years_to_home is None:
        rating -= 0.5
    elif years_to_home <= 5:
        rating += 0.3
    elif years_to_home <= 10:
        rating += 0.1
    return round(float(np.clip(rating, 0.0, 10.0)), 1)


def classify(
    years_to_home: Optional[float],
    years_to_debt_free: Optional[float],
    required_allocation_percent: float,
    allocation_percent: float,
    disposable_income: float,
) -> Classification:
    """Gap check first, then the composite score ladder."""
    gap = round(allocation_percent - required_allocation_percent, 9)
    if disposable_income <= 0:
        return Classification(tier=NO_VIABLE_PATH, score=0.0, rating=0.0, gap=gap)
    score = composite_score(years_to_home, years_to_debt_free, gap, disposable_income)
    tier = HIGHER_ALLOCATION if gap < 0 else tier_for_score(score)
    return Classification(
        tier=tier,
        score=score,
        rating=viability_rating(tier, years_to_home, years_to_debt_free),
        gap=gap,
    )
