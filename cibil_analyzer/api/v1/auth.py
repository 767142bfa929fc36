"""/auth endpoints - signup, login, MFA challenge and settings"""

import logging
from typing import Union
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from cibil_analyzer.api.v1.schemas import (
    AccountResponse,
    LoginRequest,
    MfaChallengeResponse,
    SetupAppMfaResponse,
    SignupRequest,
    TokenResponse,
    UpdateMfaRequest,
    UpdateMfaResponse,
    UserSummary,
    VerifyMfaRequest,
)
from cibil_analyzer.api.dependencies import get_auth_flow, get_current_account, get_request_id
from cibil_analyzer.infrastructure.database.session import get_db
from cibil_analyzer.domain.auth import AuthFlow
from cibil_analyzer.domain.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidChallengeCodeError,
    InvalidCredentialsError,
)
from cibil_analyzer.domain.models import Account, ChallengePending, Session as AuthSession
from cibil_analyzer.infrastructure.observability.logging import log_auth_event
from cibil_analyzer.infrastructure.observability.metrics import record_login, record_mfa_verification

router = APIRouter()


def _token_response(session: AuthSession) -> TokenResponse:
    return TokenResponse(
        token=session.token,
        user=UserSummary(full_name=session.account.display_name, email=session.account.email),
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request_body: SignupRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_flow: AuthFlow = Depends(get_auth_flow),
):
    """Register an account and return a session token"""
    request_id = get_request_id(request)

    try:
        session = auth_flow.signup(request_body.full_name, request_body.email, request_body.password)
        db.commit()
    except EmailAlreadyRegisteredError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    log_auth_event(request_id, "signup", "created", session.account.id)
    return _token_response(session)


@router.post("/login", response_model=Union[TokenResponse, MfaChallengeResponse])
def login(
    request_body: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_flow: AuthFlow = Depends(get_auth_flow),
):
    """
    Check credentials.

    Returns a session token directly when MFA is off; otherwise the pending
    challenge (userId + mfaType) to complete via /auth/verify-mfa.
    """
    request_id = get_request_id(request)

    try:
        outcome = auth_flow.login(request_body.email, request_body.password)
        db.commit()
    except InvalidCredentialsError as e:
        db.rollback()
        record_login("invalid_credentials")
        log_auth_event(request_id, "login", "invalid_credentials")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if isinstance(outcome, ChallengePending):
        record_login(f"challenge_{outcome.mode}")
        log_auth_event(request_id, "login", f"challenge_{outcome.mode}", outcome.user_id)
        return MfaChallengeResponse(user_id=outcome.user_id, mfa_type=outcome.mode)

    record_login("authenticated")
    log_auth_event(request_id, "login", "authenticated", outcome.account.id)
    return _token_response(outcome)


@router.post("/verify-mfa", response_model=TokenResponse)
def verify_mfa(
    request_body: VerifyMfaRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_flow: AuthFlow = Depends(get_auth_flow),
):
    """Complete a pending login with an emailed or authenticator code"""
    request_id = get_request_id(request)

    try:
        session = auth_flow.verify_challenge(request_body.user_id, request_body.code)
        db.commit()
    except InvalidChallengeCodeError as e:
        db.rollback()
        record_mfa_verification(False)
        log_auth_event(request_id, "verify_mfa", "rejected", request_body.user_id)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_mfa_verification(True)
    log_auth_event(request_id, "verify_mfa", "authenticated", session.account.id)
    return _token_response(session)


@router.post("/update-mfa", response_model=UpdateMfaResponse)
def update_mfa(
    request_body: UpdateMfaRequest,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    auth_flow: AuthFlow = Depends(get_auth_flow),
):
    """Enable or disable MFA and optionally switch between email and app"""
    updated = auth_flow.update_mfa_settings(account.id, request_body.mfa_enabled, request_body.mfa_type)
    db.commit()
    return UpdateMfaResponse(mfa_enabled=updated.mfa_enabled, mfa_type=updated.mfa_mode)


@router.get("/setup-app-mfa", response_model=SetupAppMfaResponse)
def setup_app_mfa(
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    auth_flow: AuthFlow = Depends(get_auth_flow),
):
    """
    Provision authenticator-app MFA.

    Returns:
        QR code data URL and secret; repeated calls return the same secret
    """
    provisioning = auth_flow.provision_app_mfa(account.id)
    db.commit()
    return SetupAppMfaResponse(
        qr_code_url=provisioning.qr_code_url,
        secret=provisioning.secret,
        otpauth_url=provisioning.otpauth_url,
    )


@router.get("/user", response_model=AccountResponse)
def get_user(account: Account = Depends(get_current_account)):
    return AccountResponse.from_account(account)
