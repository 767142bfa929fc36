"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cibil_analyzer.config import settings
from cibil_analyzer.domain.assessments import AssessmentService
from cibil_analyzer.domain.auth import AuthConfig, AuthFlow
from cibil_analyzer.domain.exceptions import InvalidTokenError
from cibil_analyzer.domain.models import Account
from cibil_analyzer.infrastructure.clients.mailer import MailerClient
from cibil_analyzer.infrastructure.database.repositories import SqlAccountRepository, SqlAssessmentRepository
from cibil_analyzer.infrastructure.database.session import get_db
from cibil_analyzer.infrastructure.security.passwords import PasswordHasher
from cibil_analyzer.infrastructure.security.tokens import TokenIssuer
from cibil_analyzer.infrastructure.security.totp import TotpProvider

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache
def get_auth_config() -> AuthConfig:
    """Auth policy, built once per process from settings"""
    return AuthConfig(
        mfa_override_code=settings.mfa_override_code or None,
        mfa_enabled_by_default=settings.mfa_enabled_by_default,
    )


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer()


@lru_cache
def get_totp_provider() -> TotpProvider:
    return TotpProvider()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_mailer() -> MailerClient:
    """Provide mail relay client instance"""
    return MailerClient()


def get_auth_flow(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
    totp: TotpProvider = Depends(get_totp_provider),
    mailer: MailerClient = Depends(get_mailer),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthFlow:
    return AuthFlow(
        accounts=SqlAccountRepository(db),
        hasher=hasher,
        tokens=tokens,
        totp=totp,
        mailer=mailer,
        config=config,
    )


def get_assessment_service(db: Session = Depends(get_db)) -> AssessmentService:
    return AssessmentService(SqlAssessmentRepository(db))


def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_flow: AuthFlow = Depends(get_auth_flow),
) -> Account:
    """Resolve the bearer token to an account, or reject with 401"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return auth_flow.authenticate_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
