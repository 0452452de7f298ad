import pytest

from state_affordability.core.classification import (
    EXTREME_CARE,
    HIGHER_ALLOCATION,
    NO_VIABLE_PATH,
    RENTING_ONLY,
    VERY_VIABLE,
    VIABLE,
    classify,
    composite_score,
    tier_for_score,
    viability_rating,
)


@pytest.mark.parametrize(
    "score, tier",
    [
        (100, VERY_VIABLE),
        (80, VERY_VIABLE),
        (79, VIABLE),
        (60, VIABLE),
        (59, EXTREME_CARE),
        (40, EXTREME_CARE),
        (39, RENTING_ONLY),
        (20, RENTING_ONLY),
        (19, NO_VIABLE_PATH),
        (0, NO_VIABLE_PATH),
    ],
)
def test_tier_ladder_boundaries(score, tier):
    assert tier_for_score(score) == tier


@pytest.mark.parametrize(
    "home, debt, gap, disposable, expected",
    [
        (5, 5, 0.20, 50_000, 100),
        (10, 10, 0.15, 30_000, 30 + 22 + 15 + 7),
        (15, 15, 0.10, 15_000, 20 + 15 + 10 + 5),
        (20, 20, 0.05, 5_000, 10 + 8 + 5 + 3),
        (35, 40, 0.01, 100, 5 + 3 + 0 + 1),
        (None, None, 0.0, 0, 0),
    ],
)
def test_composite_score_components(home, debt, gap, disposable, expected):
    assert composite_score(home, debt, gap, disposable) == expected


def test_negative_gap_overrides_score():
    outcome = classify(1, 0, 0.62, 0.5, 80_000)
    assert outcome.tier == HIGHER_ALLOCATION
    assert outcome.gap == pytest.approx(-0.12)
    assert outcome.rating == pytest.approx(6.8)


def test_float_noise_does_not_create_negative_gap():
    outcome = classify(3, 3, 0.1 + 0.2, 0.3, 60_000)
    assert outcome.gap == 0
    assert outcome.tier == VERY_VIABLE


def test_no_disposable_income_is_never_viable():
    outcome = classify(None, None, 0.0, 0.8, 0.0)
    assert outcome.tier == NO_VIABLE_PATH
    assert outcome.rating == 0.0
    assert outcome.score == 0.0


def test_fast_milestones_with_buffer_are_very_viable():
    outcome = classify(2, 0, 0.29, 0.5, 60_000)
    assert outcome.score == 100
    assert outcome.tier == VERY_VIABLE
    assert outcome.rating == 10.0


@pytest.mark.parametrize(
    "tier, home, debt, rating",
    [
        (VIABLE, 8, 7, 8.3),
        (EXTREME_CARE, 4, 3, 5.8),
        (RENTING_ONLY, None, None, 1.5),
        (NO_VIABLE_PATH, None, None, 0.0),
        (VERY_VIABLE, 1, 1, 10.0),
    ],
)
def test_viability_rating_adjusts_and_clamps(tier, home, debt, rating):
    assert viability_rating(tier, home, debt) == pytest.approx(rating)


@pytest.mark.parametrize("home, debt", [(None, None), (4, 3), (12, 8)])
def test_higher_allocation_ranks_above_extreme_care(home, debt):
    assert viability_rating(HIGHER_ALLOCATION, home, debt) > viability_rating(EXTREME_CARE, home, debt)
    assert viability_rating(VIABLE, home, debt) > viability_rating(HIGHER_ALLOCATION, home, debt)
