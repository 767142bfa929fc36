"""Data access layer for accounts and assessments"""

import uuid
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session
from cibil_analyzer.infrastructure.database.models import AccountRow, AssessmentRow
from cibil_analyzer.domain.models import (
    Account,
    AssessmentRecord,
    AssessmentResult,
    FinancialProfile,
)
from cibil_analyzer.domain.repositories import AccountRepository, AssessmentRepository


# Account attribute -> AccountRow column
ACCOUNT_COLUMNS = {
    "email": "email",
    "password_hash": "password_hash",
    "display_name": "full_name",
    "mfa_enabled": "mfa_enabled",
    "mfa_mode": "mfa_type",
    "totp_secret": "mfa_secret",
    "pending_one_time_code": "temp_mfa_code",
}


def _parse_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _to_account(row: AccountRow) -> Account:
    return Account(
        id=str(row.id),
        email=row.email,
        password_hash=row.password_hash,
        display_name=row.full_name,
        mfa_enabled=row.mfa_enabled,
        mfa_mode=row.mfa_type,
        totp_secret=row.mfa_secret,
        pending_one_time_code=row.temp_mfa_code,
        created_at=row.created_at,
    )


def _to_record(row: AssessmentRow) -> AssessmentRecord:
    return AssessmentRecord(
        id=str(row.id),
        owner_id=str(row.user_id),
        profile=FinancialProfile(
            owner_label=row.full_name,
            payment_history_pct=row.payment_history,
            credit_utilization_pct=row.credit_utilization,
            credit_age_years=row.credit_age,
            credit_mix=row.credit_mix,
            hard_inquiries=row.hard_inquiries,
        ),
        result=AssessmentResult(
            score=row.estimated_score,
            risk_tier=row.risk_level,
            suggestions=list(row.suggestions or []),
        ),
        created_at=row.created_at,
    )


def _apply_assessment(row: AssessmentRow, profile: FinancialProfile, result: AssessmentResult) -> None:
    row.full_name = profile.owner_label
    row.payment_history = profile.payment_history_pct
    row.credit_utilization = profile.credit_utilization_pct
    row.credit_age = profile.credit_age_years
    row.credit_mix = profile.credit_mix
    row.hard_inquiries = profile.hard_inquiries
    row.estimated_score = result.score
    row.risk_level = result.risk_tier
    row.suggestions = list(result.suggestions)


class SqlAccountRepository(AccountRepository):
    """Repository for user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, account_id: str) -> Optional[AccountRow]:
        account_uuid = _parse_uuid(account_id)
        if account_uuid is None:
            return None
        return self.db.query(AccountRow).filter(AccountRow.id == account_uuid).first()

    def find_by_id(self, account_id: str) -> Optional[Account]:
        row = self._get_row(account_id)
        return _to_account(row) if row else None

    def find_by_email(self, email: str) -> Optional[Account]:
        row = self.db.query(AccountRow).filter(AccountRow.email == email).first()
        return _to_account(row) if row else None

    def save(self, account: Account, fields: Optional[Sequence[str]] = None) -> Account:
        """
        Insert new accounts (empty id) or update stored ones.

        On update only the named fields are written; None writes them all.
        """
        row = self._get_row(account.id) if account.id else None
        if row is None:
            row = AccountRow()
            self.db.add(row)
            fields = None

        for attribute in fields or ACCOUNT_COLUMNS:
            setattr(row, ACCOUNT_COLUMNS[attribute], getattr(account, attribute))

        self.db.flush()  # Get ID without committing
        return _to_account(row)


class SqlAssessmentRepository(AssessmentRepository):
    """Repository for owner-scoped assessments"""

    def __init__(self, db: Session):
        self.db = db

    def _get_owned_row(self, assessment_id: str, owner_id: str) -> Optional[AssessmentRow]:
        assessment_uuid = _parse_uuid(assessment_id)
        owner_uuid = _parse_uuid(owner_id)
        if assessment_uuid is None or owner_uuid is None:
            return None
        return (
            self.db.query(AssessmentRow)
            .filter(AssessmentRow.id == assessment_uuid, AssessmentRow.user_id == owner_uuid)
            .first()
        )

    def create(self, owner_id: str, profile: FinancialProfile, result: AssessmentResult) -> AssessmentRecord:
        """Persist assessment to database"""
        row = AssessmentRow(user_id=uuid.UUID(owner_id))
        _apply_assessment(row, profile, result)
        self.db.add(row)
        self.db.flush()
        return _to_record(row)

    def find_by_id_for_owner(self, assessment_id: str, owner_id: str) -> Optional[AssessmentRecord]:
        row = self._get_owned_row(assessment_id, owner_id)
        return _to_record(row) if row else None

    def find_by_owner(self, owner_id: str) -> List[AssessmentRecord]:
        """Fetch an owner's assessments, newest first"""
        owner_uuid = _parse_uuid(owner_id)
        if owner_uuid is None:
            return []
        rows = (
            self.db.query(AssessmentRow)
            .filter(AssessmentRow.user_id == owner_uuid)
            .order_by(AssessmentRow.created_at.desc())
            .all()
        )
        return [_to_record(row) for row in rows]

    def update_for_owner(
        self,
        assessment_id: str,
        owner_id: str,
        profile: FinancialProfile,
        result: AssessmentResult,
    ) -> Optional[AssessmentRecord]:
        row = self._get_owned_row(assessment_id, owner_id)
        if row is None:
            return None
        _apply_assessment(row, profile, result)
        self.db.flush()
        return _to_record(row)

    def delete_by_id_for_owner(self, assessment_id: str, owner_id: str) -> bool:
        row = self._get_owned_row(assessment_id, owner_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True
