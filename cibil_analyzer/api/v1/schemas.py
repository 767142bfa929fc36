"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from cibil_analyzer.domain.models import (
    Account,
    AssessmentRecord,
    AssessmentResult,
    FinancialProfile,
)
from cibil_analyzer.infrastructure.security.passwords import MAX_PASSWORD_BYTES

CreditMix = Literal["good", "average", "poor"]
MfaType = Literal["none", "email", "app"]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# Largest value an INTEGER column holds on every supported database
MAX_STORED_INT = 2_147_483_647


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth -----------------------------------------------------------------


class SignupRequest(CamelModel):
    """Request body for POST /auth/signup"""

    full_name: NonEmptyStr = Field(..., description="Display name")
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return value


class LoginRequest(CamelModel):
    """Request body for POST /auth/login"""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class VerifyMfaRequest(CamelModel):
    """Request body for POST /auth/verify-mfa"""

    user_id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=16)


class UpdateMfaRequest(CamelModel):
    """Request body for POST /auth/update-mfa"""

    mfa_enabled: bool
    mfa_type: Optional[MfaType] = None


class UserSummary(CamelModel):
    full_name: str
    email: str


class TokenResponse(CamelModel):
    """Successful signup, login or MFA verification"""

    token: str
    user: UserSummary


class MfaChallengeResponse(CamelModel):
    """Password accepted; second factor required"""

    mfa_required: bool = True
    user_id: str
    mfa_type: Literal["email", "app"]


class UpdateMfaResponse(CamelModel):
    message: str = "MFA settings updated"
    mfa_enabled: bool
    mfa_type: MfaType


class SetupAppMfaResponse(CamelModel):
    """Response for GET /auth/setup-app-mfa"""

    qr_code_url: str
    secret: str
    otpauth_url: str


class AccountResponse(CamelModel):
    """Account details without password, TOTP secret or pending code"""

    id: str
    full_name: str
    email: str
    mfa_enabled: bool
    mfa_type: MfaType
    created_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            full_name=account.display_name,
            email=account.email,
            mfa_enabled=account.mfa_enabled,
            mfa_type=account.mfa_mode,
            created_at=account.created_at,
        )


# --- Assessments ----------------------------------------------------------


class ProfileRequest(CamelModel):
    """Request body for POST /analyze and PUT /users/{id}"""

    full_name: NonEmptyStr = Field(..., description="Label for the assessed person")
    payment_history: float = Field(..., ge=0, le=100, allow_inf_nan=False, description="On-time payments, percent")
    credit_utilization: float = Field(..., ge=0, le=100, allow_inf_nan=False, description="Used credit, percent")
    credit_age: float = Field(..., ge=0, allow_inf_nan=False, description="Age of credit history in years")
    credit_mix: CreditMix
    hard_inquiries: int = Field(..., ge=0, le=MAX_STORED_INT)

    def to_profile(self) -> FinancialProfile:
        return FinancialProfile(
            owner_label=self.full_name,
            payment_history_pct=self.payment_history,
            credit_utilization_pct=self.credit_utilization,
            credit_age_years=self.credit_age,
            credit_mix=self.credit_mix,
            hard_inquiries=self.hard_inquiries,
        )


class AnalyzeResponse(CamelModel):
    """Response for POST /analyze"""

    score: int
    risk_tier: str
    suggestions: List[str]

    @classmethod
    def from_result(cls, result: AssessmentResult) -> "AnalyzeResponse":
        return cls(score=result.score, risk_tier=result.risk_tier, suggestions=result.suggestions)


class AssessmentResponse(CamelModel):
    """Stored assessment as returned by /users endpoints"""

    id: str
    user_id: str
    full_name: str
    payment_history: float
    credit_utilization: float
    credit_age: float
    credit_mix: str
    hard_inquiries: int
    score: int
    risk_tier: str
    suggestions: List[str]
    created_at: datetime

    @classmethod
    def from_record(cls, record: AssessmentRecord) -> "AssessmentResponse":
        profile = record.profile
        return cls(
            id=record.id,
            user_id=record.owner_id,
            full_name=profile.owner_label,
            payment_history=profile.payment_history_pct,
            credit_utilization=profile.credit_utilization_pct,
            credit_age=profile.credit_age_years,
            credit_mix=profile.credit_mix,
            hard_inquiries=profile.hard_inquiries,
            score=record.result.score,
            risk_tier=record.result.risk_tier,
            suggestions=record.result.suggestions,
            created_at=record.created_at,
        )


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    """Response for POST /upload-csv"""

    message: str
    imported: int
