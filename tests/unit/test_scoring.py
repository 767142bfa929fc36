"""Unit tests for credit scoring logic"""

import pytest
from dataclasses import replace
from cibil_analyzer.domain.models import FinancialProfile
from cibil_analyzer.domain.scoring import (
    STRONG_PROFILE_MESSAGE,
    _round_half_up,
    calculate_score,
    determine_risk_tier,
    generate_suggestions,
    score_profile,
)


def make_profile(**overrides) -> FinancialProfile:
    values = dict(
        owner_label="Test",
        payment_history_pct=100,
        credit_utilization_pct=30,
        credit_age_years=5,
        credit_mix="good",
        hard_inquiries=0,
    )
    values.update(overrides)
    return FinancialProfile(**values)


def test_score_strong_profile():
    """Test worked example: 300 + 210 + 126 + 45 + 60 + 60"""
    result = score_profile(make_profile())

    assert result.score == 801
    assert result.risk_tier == "Excellent"
    assert result.suggestions == [STRONG_PROFILE_MESSAGE]


def test_score_weak_profile(weak_profile: FinancialProfile):
    """Test worked example: 300 + 126 + 36 + 9 + 0 + 0"""
    result = score_profile(weak_profile)

    assert result.score == 471
    assert result.risk_tier == "Very Poor"


def test_score_extremes_hit_range_bounds():
    """Test best and worst possible inputs map to 900 and 300"""
    best = make_profile(payment_history_pct=100, credit_utilization_pct=0, credit_age_years=10, hard_inquiries=0)
    worst = make_profile(
        payment_history_pct=0, credit_utilization_pct=100, credit_age_years=0, credit_mix="poor", hard_inquiries=5
    )

    assert calculate_score(best) == 900
    assert calculate_score(worst) == 300


def test_score_clamps_out_of_range_inputs():
    """Test engine stays total when handed values outside their ranges"""
    wild = make_profile(
        payment_history_pct=250, credit_utilization_pct=-40, credit_age_years=80, hard_inquiries=-3
    )
    assert calculate_score(wild) == 900

    negative = make_profile(
        payment_history_pct=-10, credit_utilization_pct=400, credit_age_years=-2, credit_mix="poor", hard_inquiries=50
    )
    assert calculate_score(negative) == 300


def test_score_credit_age_saturates_at_ten_years():
    assert calculate_score(make_profile(credit_age_years=10)) == calculate_score(make_profile(credit_age_years=35))


def test_score_mix_bonus_ordering():
    good = calculate_score(make_profile(credit_mix="good"))
    average = calculate_score(make_profile(credit_mix="average"))
    poor = calculate_score(make_profile(credit_mix="poor"))

    assert good - average == 30
    assert average - poor == 30


def test_score_monotonic_in_payment_history():
    scores = [calculate_score(make_profile(payment_history_pct=pct)) for pct in range(0, 101, 5)]
    assert scores == sorted(scores)


def test_score_monotonic_on_fractional_inputs():
    """Test quarter-point steps, including values that land on .5 before rounding"""
    steps = [i / 4 for i in range(0, 401)]
    by_payment = [calculate_score(make_profile(payment_history_pct=pct)) for pct in steps]
    by_utilization = [calculate_score(make_profile(credit_utilization_pct=pct)) for pct in steps]
    by_age = [calculate_score(make_profile(credit_age_years=years / 10)) for years in steps]

    assert by_payment == sorted(by_payment)
    assert by_utilization == sorted(by_utilization, reverse=True)
    assert by_age == sorted(by_age)
    assert calculate_score(make_profile(payment_history_pct=97.5)) > calculate_score(make_profile(payment_history_pct=97))


def test_score_monotonic_in_utilization_and_inquiries():
    by_utilization = [calculate_score(make_profile(credit_utilization_pct=pct)) for pct in range(0, 101, 5)]
    by_inquiries = [calculate_score(make_profile(hard_inquiries=n)) for n in range(0, 10)]

    assert by_utilization == sorted(by_utilization, reverse=True)
    assert by_inquiries == sorted(by_inquiries, reverse=True)


def test_round_half_up():
    """Test .5 always rounds up, unlike Python's round()"""
    assert _round_half_up(418.5) == 419
    assert _round_half_up(417.5) == 418
    assert _round_half_up(417.49) == 417


@pytest.mark.parametrize(
    "score, tier",
    [
        (900, "Excellent"),
        (750, "Excellent"),
        (749, "Good"),
        (700, "Good"),
        (699, "Average"),
        (650, "Average"),
        (649, "Poor"),
        (600, "Poor"),
        (599, "Very Poor"),
        (300, "Very Poor"),
    ],
)
def test_determine_risk_tier_boundaries(score: int, tier: str):
    assert determine_risk_tier(score) == tier


def test_suggestions_follow_rule_order(weak_profile: FinancialProfile):
    """Test every rule fires, in fixed order, for a weak profile"""
    tips = generate_suggestions(weak_profile)

    assert len(tips) == 5
    assert tips[0].startswith("Your payment history is below 90%")
    assert tips[1].startswith("Your credit utilization is high (80%)")
    assert tips[2].startswith("You have multiple hard inquiries")
    assert tips[3].startswith("Your credit history is relatively young")
    assert tips[4].startswith("Consider a healthy mix")


def test_suggestions_payment_rules_are_exclusive():
    below_90 = generate_suggestions(make_profile(payment_history_pct=89.9))
    below_98 = generate_suggestions(make_profile(payment_history_pct=95))
    at_98 = generate_suggestions(make_profile(payment_history_pct=98))

    assert below_90 == ["Your payment history is below 90%. Focus on paying all bills on time to boost your score."]
    assert below_98 == ["Maintain your good payment streak. Even one late payment can impact your score."]
    assert at_98 == [STRONG_PROFILE_MESSAGE]


def test_suggestions_threshold_edges_do_not_fire():
    """Test thresholds are strict: 30% utilization, 2 inquiries and 5 years are fine"""
    tips = generate_suggestions(make_profile(credit_utilization_pct=30, hard_inquiries=2, credit_age_years=5))
    assert tips == [STRONG_PROFILE_MESSAGE]


def test_suggestions_keep_fractional_utilization():
    tips = generate_suggestions(make_profile(credit_utilization_pct=45.5))
    assert "(45.5%)" in tips[0]


def test_suggestions_average_mix():
    tips = generate_suggestions(make_profile(credit_mix="average"))
    assert len(tips) == 1
    assert tips[0].startswith("Consider a healthy mix")


def test_score_profile_is_deterministic(weak_profile: FinancialProfile):
    assert score_profile(weak_profile) == score_profile(replace(weak_profile))
