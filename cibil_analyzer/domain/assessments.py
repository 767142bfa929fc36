"""Owner-scoped assessment history: score, persist, list, update, delete"""

from typing import List

from cibil_analyzer.domain.exceptions import AssessmentNotFoundError
from cibil_analyzer.domain.models import AssessmentRecord, FinancialProfile
from cibil_analyzer.domain.repositories import AssessmentRepository
from cibil_analyzer.domain.scoring import score_profile


class AssessmentService:
    """Applies the scoring engine and keeps each owner's history"""

    def __init__(self, repository: AssessmentRepository):
        self.repository = repository

    def analyze(self, owner_id: str, profile: FinancialProfile) -> AssessmentRecord:
        """Score a profile and persist the result for its owner"""
        return self.repository.create(owner_id, profile, score_profile(profile))

    def analyze_batch(self, owner_id: str, profiles: List[FinancialProfile]) -> List[AssessmentRecord]:
        """Apply analyze() to every profile, in order"""
        return [self.analyze(owner_id, profile) for profile in profiles]

    def history(self, owner_id: str) -> List[AssessmentRecord]:
        return self.repository.find_by_owner(owner_id)

    def get(self, owner_id: str, assessment_id: str) -> AssessmentRecord:
        record = self.repository.find_by_id_for_owner(assessment_id, owner_id)
        if record is None:
            raise AssessmentNotFoundError("Assessment not found")
        return record

    def update(self, owner_id: str, assessment_id: str, profile: FinancialProfile) -> AssessmentRecord:
        """Replace inputs of an owned assessment and re-score it"""
        record = self.repository.update_for_owner(assessment_id, owner_id, profile, score_profile(profile))
        if record is None:
            raise AssessmentNotFoundError("Assessment not found")
        return record

    def delete(self, owner_id: str, assessment_id: str) -> None:
        if not self.repository.delete_by_id_for_owner(assessment_id, owner_id):
            raise AssessmentNotFoundError("Assessment not found")
