"""Credit score engine - core business logic for risk assessments"""

import math
from typing import List
from cibil_analyzer.domain.models import FinancialProfile, AssessmentResult

BASE_SCORE = 300
MAX_SCORE = 900
SCORE_RANGE = 600

PAYMENT_HISTORY_WEIGHT = 0.35
UTILIZATION_WEIGHT = 0.30
CREDIT_AGE_WEIGHT = 0.15
INQUIRIES_WEIGHT = 0.10

CREDIT_AGE_CAP_YEARS = 10
MAX_PENALIZED_INQUIRIES = 5

MIX_BONUS = {
    "good": 0.10,
    "average": 0.05,
    "poor": 0.0,
}

# (lower bound, tier), evaluated top-down
RISK_TIERS = [
    (750, "Excellent"),
    (700, "Good"),
    (650, "Average"),
    (600, "Poor"),
]
LOWEST_TIER = "Very Poor"

STRONG_PROFILE_MESSAGE = "Your financial profile looks strong! Continue maintaining these healthy habits."


def _clamp(value: float, low: float, high: float = math.inf) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(profile: FinancialProfile) -> int:
    """
    Calculate credit score from 300 (highest risk) to 900 (lowest risk).

    Weighted sum over a 600-point range:
    - 35%: Payment history percentage
    - 30%: Unused credit (100 - utilization)
    - 15%: Credit age, saturating at 10 years
    - 10%: Credit mix bonus (good 10%, average 5%, poor 0%)
    - 10%: Hard inquiries, linear penalty reaching zero at 5

    Inputs are clamped into range first, so any numbers yield a valid score.
    """
    payment_history = _clamp(profile.payment_history_pct, 0, 100)
    utilization = _clamp(profile.credit_utilization_pct, 0, 100)
    credit_age = _clamp(profile.credit_age_years, 0)
    inquiries = _clamp(profile.hard_inquiries, 0)

    score = BASE_SCORE
    score += (payment_history / 100) * PAYMENT_HISTORY_WEIGHT * SCORE_RANGE
    score += ((100 - utilization) / 100) * UTILIZATION_WEIGHT * SCORE_RANGE
    score += min(credit_age / CREDIT_AGE_CAP_YEARS, 1) * CREDIT_AGE_WEIGHT * SCORE_RANGE
    score += MIX_BONUS.get(profile.credit_mix, 0.0) * SCORE_RANGE
    score += (
        max((MAX_PENALIZED_INQUIRIES - inquiries) / MAX_PENALIZED_INQUIRIES, 0)
        * INQUIRIES_WEIGHT
        * SCORE_RANGE
    )

    return int(_clamp(_round_half_up(score), BASE_SCORE, MAX_SCORE))


def determine_risk_tier(score: int) -> str:
    """Map a score to its risk tier; each lower bound is inclusive"""
    for lower_bound, tier in RISK_TIERS:
        if score >= lower_bound:
            return tier
    return LOWEST_TIER


def _format_pct(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def generate_suggestions(profile: FinancialProfile) -> List[str]:
    """
    Build improvement tips from independent threshold rules.

    Rule order is fixed and the output preserves it. When no rule fires a
    single affirming message is returned.
    """
    tips = []

    if profile.payment_history_pct < 90:
        tips.append(
            "Your payment history is below 90%. Focus on paying all bills on time to boost your score."
        )
    elif profile.payment_history_pct < 98:
        tips.append("Maintain your good payment streak. Even one late payment can impact your score.")

    if profile.credit_utilization_pct > 30:
        tips.append(
            f"Your credit utilization is high ({_format_pct(profile.credit_utilization_pct)}%). "
            "Try to keep it below 30% by paying down balances."
        )

    if profile.hard_inquiries > 2:
        tips.append("You have multiple hard inquiries. Limit new credit applications for the next 6 months.")

    if profile.credit_age_years < 5:
        tips.append(
            "Your credit history is relatively young. "
            "Time will naturally improve this factor; avoid closing old accounts."
        )

    if profile.credit_mix in ("poor", "average"):
        tips.append(
            "Consider a healthy mix of secured (e.g., car loan) and unsecured (e.g., credit card) credit over time."
        )

    if not tips:
        tips.append(STRONG_PROFILE_MESSAGE)

    return tips


def score_profile(profile: FinancialProfile) -> AssessmentResult:
    """
    Main entry point: score a profile and derive its tier and suggestions.

    Deterministic and free of side effects; the caller persists the result.
    """
    score = calculate_score(profile)

    return AssessmentResult(
        score=score,
        risk_tier=determine_risk_tier(score),
        suggestions=generate_suggestions(profile),
    )
