"""Signup, login and MFA challenge flow"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Union

from cibil_analyzer.domain.exceptions import (
    EmailAlreadyRegisteredError,
    EmailDeliveryError,
    InvalidChallengeCodeError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from cibil_analyzer.domain.models import Account, AppMfaProvisioning, ChallengePending, Session
from cibil_analyzer.domain.repositories import AccountRepository

logger = logging.getLogger(__name__)

ONE_TIME_CODE_DIGITS = 6


@dataclass(frozen=True)
class AuthConfig:
    """Process-wide auth policy, built once from settings"""

    mfa_override_code: Optional[str] = None
    mfa_enabled_by_default: bool = True


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _codes_equal(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def generate_one_time_code() -> str:
    """Random 6-digit numeric code, never starting with zero"""
    low = 10 ** (ONE_TIME_CODE_DIGITS - 1)
    return str(low + secrets.randbelow(9 * low))


class AuthFlow:
    """
    Two-step login state machine.

    Anonymous -> credentials checked -> session, or a pending challenge that
    verify_challenge() turns into a session. Failures are terminal for the
    attempt; callers restart with login().

    Collaborators:
        accounts: AccountRepository
        hasher: hash(password) / verify(password, password_hash) / dummy_hash
        tokens: issue(account_id) / decode(token) -> account_id
        totp: generate_secret() / provisioning_uri(secret, email) /
              qr_code_data_url(uri) / verify(secret, code)
        mailer: send_one_time_code(email, code)
    """

    def __init__(self, accounts: AccountRepository, hasher, tokens, totp, mailer, config: AuthConfig):
        self.accounts = accounts
        self.hasher = hasher
        self.tokens = tokens
        self.totp = totp
        self.mailer = mailer
        self.config = config

    def _issue_session(self, account: Account) -> Session:
        return Session(token=self.tokens.issue(account.id), account=account)

    def _is_override(self, account: Account, code: str) -> bool:
        override = self.config.mfa_override_code
        if override and _codes_equal(code, override):
            logger.warning("MFA override code used", extra={"user_id": account.id})
            return True
        return False

    def signup(self, full_name: str, email: str, password: str) -> Session:
        """Create an account and return a session for it"""
        email = normalize_email(email)
        if self.accounts.find_by_email(email) is not None:
            raise EmailAlreadyRegisteredError("User already exists")

        account = Account(
            id="",
            email=email,
            password_hash=self.hasher.hash(password),
            display_name=full_name,
            mfa_enabled=self.config.mfa_enabled_by_default,
            mfa_mode="none",
        )
        account = self.accounts.save(account)
        logger.info("Account created", extra={"user_id": account.id})
        return self._issue_session(account)

    def login(self, email: str, password: str) -> Union[Session, ChallengePending]:
        """
        Check credentials and either issue a session or start a challenge.

        Unknown email and wrong password raise the same error. In email mode
        (and the legacy "none" mode with MFA enabled) a fresh code overwrites
        any pending one; delivery failures are logged, not raised.
        """
        account = self.accounts.find_by_email(normalize_email(email))
        if account is None:
            # Same bcrypt cost as a wrong password
            self.hasher.verify(password, self.hasher.dummy_hash)
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, account.password_hash):
            raise InvalidCredentialsError()

        if not account.mfa_enabled:
            return self._issue_session(account)

        if account.mfa_mode == "app":
            return ChallengePending(user_id=account.id, mode="app")

        code = generate_one_time_code()
        account.pending_one_time_code = code
        self.accounts.save(account, fields=("pending_one_time_code",))

        try:
            self.mailer.send_one_time_code(account.email, code)
        except EmailDeliveryError as e:
            logger.error(f"Failed to deliver MFA code: {e}", extra={"user_id": account.id})

        return ChallengePending(user_id=account.id, mode="email")

    def verify_challenge(self, user_id: str, code: str) -> Session:
        """
        Accept the second factor for a pending login and issue a session.

        Only accounts with MFA enabled can be in a pending challenge; in email
        mode a code must also have been issued by login(), even for the
        override code.
        """
        account = self.accounts.find_by_id(user_id)
        if account is None:
            raise InvalidChallengeCodeError("Invalid user")
        if not account.mfa_enabled:
            raise InvalidChallengeCodeError("No verification pending")

        code = code.strip()

        if account.mfa_mode == "app":
            if not self._is_override(account, code):
                if not account.totp_secret or not self.totp.verify(account.totp_secret, code):
                    raise InvalidChallengeCodeError("Invalid authenticator code")
            return self._issue_session(account)

        pending = account.pending_one_time_code
        if pending is None:
            raise InvalidChallengeCodeError("No verification pending")
        if not _codes_equal(code, pending) and not self._is_override(account, code):
            raise InvalidChallengeCodeError()

        account.pending_one_time_code = None
        self.accounts.save(account, fields=("pending_one_time_code",))
        return self._issue_session(account)

    def provision_app_mfa(self, user_id: str) -> AppMfaProvisioning:
        """
        Return authenticator enrollment material.

        A secret is generated only on first call; later calls reuse it so
        already-configured authenticator apps keep working.
        """
        account = self.get_account(user_id)

        if not account.totp_secret:
            account.totp_secret = self.totp.generate_secret()
            self.accounts.save(account, fields=("totp_secret",))
            logger.info("Generated new MFA secret", extra={"user_id": account.id})
        else:
            logger.info("Reusing existing MFA secret", extra={"user_id": account.id})

        uri = self.totp.provisioning_uri(account.totp_secret, account.email)
        return AppMfaProvisioning(
            secret=account.totp_secret,
            otpauth_url=uri,
            qr_code_url=self.totp.qr_code_data_url(uri),
        )

    def update_mfa_settings(self, user_id: str, enabled: bool, mode: Optional[str] = None) -> Account:
        account = self.get_account(user_id)
        account.mfa_enabled = enabled
        if mode:
            account.mfa_mode = mode
        return self.accounts.save(account, fields=("mfa_enabled", "mfa_mode"))

    def get_account(self, user_id: str) -> Account:
        account = self.accounts.find_by_id(user_id)
        if account is None:
            raise InvalidTokenError()
        return account

    def authenticate_token(self, token: str) -> Account:
        """Resolve a bearer token to its account"""
        return self.get_account(self.tokens.decode(token))
