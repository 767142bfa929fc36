"""Prometheus metrics for assessment volume, score distribution and auth outcomes"""

from prometheus_client import Counter, Histogram

# Assessment metrics
assessment_counter = Counter(
    "cibil_assessment_total",
    "Total assessments scored",
    ["risk_tier", "source"],  # source: analyze | update | csv
)

score_histogram = Histogram(
    "cibil_assessment_score",
    "Distribution of computed credit scores",
    buckets=[300, 400, 500, 600, 650, 700, 750, 800, 850, 900],
)

# Auth metrics
login_counter = Counter(
    "cibil_login_total",
    "Login attempts by outcome",
    ["outcome"],  # authenticated | challenge_email | challenge_app | invalid_credentials
)

mfa_verification_counter = Counter(
    "cibil_mfa_verification_total",
    "MFA challenge verifications by outcome",
    ["outcome"],  # success | failure
)

email_failure_counter = Counter(
    "cibil_email_failures_total",
    "Failed one-time code deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(score: int, risk_tier: str, source: str = "analyze") -> None:
    """Record an assessment for tier mix and score distribution monitoring"""
    assessment_counter.labels(risk_tier=risk_tier, source=source).inc()
    score_histogram.observe(score)


def record_login(outcome: str) -> None:
    login_counter.labels(outcome=outcome).inc()


def record_mfa_verification(success: bool) -> None:
    mfa_verification_counter.labels(outcome="success" if success else "failure").inc()
