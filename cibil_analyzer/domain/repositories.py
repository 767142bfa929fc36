"""Repository interfaces for store-agnostic access to accounts and assessments"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from cibil_analyzer.domain.models import Account, AssessmentRecord, AssessmentResult, FinancialProfile


class AccountRepository(ABC):
    """Account data access abstraction"""

    @abstractmethod
    def find_by_id(self, account_id: str) -> Optional[Account]:
        """Return account by identifier, or None"""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Account]:
        """Return account registered under a normalized email, or None"""

    @abstractmethod
    def save(self, account: Account, fields: Optional[Sequence[str]] = None) -> Account:
        """
        Insert or update an account; assigns an id to new accounts.

        fields names the Account attributes to write on update; None writes
        them all. New accounts are always written in full.
        """


class AssessmentRepository(ABC):
    """Owner-scoped assessment data access abstraction"""

    @abstractmethod
    def create(self, owner_id: str, profile: FinancialProfile, result: AssessmentResult) -> AssessmentRecord:
        """Persist a freshly scored assessment"""

    @abstractmethod
    def find_by_id_for_owner(self, assessment_id: str, owner_id: str) -> Optional[AssessmentRecord]:
        """Return the assessment only if it belongs to owner_id"""

    @abstractmethod
    def find_by_owner(self, owner_id: str) -> List[AssessmentRecord]:
        """Return all assessments for an owner, newest first"""

    @abstractmethod
    def update_for_owner(
        self,
        assessment_id: str,
        owner_id: str,
        profile: FinancialProfile,
        result: AssessmentResult,
    ) -> Optional[AssessmentRecord]:
        """Replace inputs and result; None when absent or not owned"""

    @abstractmethod
    def delete_by_id_for_owner(self, assessment_id: str, owner_id: str) -> bool:
        """Delete the assessment if owned; returns whether anything was removed"""
