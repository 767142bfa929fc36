"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

CREDIT_MIX_VALUES = ("good", "average", "poor")
MFA_MODES = ("none", "email", "app")


@dataclass
class FinancialProfile:
    """Financial inputs submitted for a single assessment"""

    owner_label: str
    payment_history_pct: float
    credit_utilization_pct: float
    credit_age_years: float
    credit_mix: str  # "good", "average" or "poor"
    hard_inquiries: int


@dataclass
class AssessmentResult:
    """Output of the scoring engine"""

    score: int
    risk_tier: str
    suggestions: List[str]


@dataclass
class AssessmentRecord:
    """Persisted assessment: profile inputs plus the computed result"""

    id: str
    owner_id: str
    profile: FinancialProfile
    result: AssessmentResult
    created_at: datetime


@dataclass
class Account:
    """Registered user and their MFA state"""

    id: str
    email: str
    password_hash: str
    display_name: str
    mfa_enabled: bool = False
    mfa_mode: str = "none"  # "none", "email" or "app"
    totp_secret: Optional[str] = None
    pending_one_time_code: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Session:
    """Issued session token and the account it was issued for"""

    token: str
    account: Account


@dataclass
class ChallengePending:
    """Password accepted, second factor still required"""

    user_id: str
    mode: str  # "email" or "app"


@dataclass
class AppMfaProvisioning:
    """Authenticator-app enrollment material"""

    secret: str
    otpauth_url: str
    qr_code_url: str = field(repr=False)
