"""Pytest fixtures for testing"""

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cibil_analyzer.api.main import create_app
from cibil_analyzer.api.dependencies import get_password_hasher
from cibil_analyzer.infrastructure.database.models import Base
from cibil_analyzer.infrastructure.database.session import get_db
from cibil_analyzer.infrastructure.security.passwords import PasswordHasher
from cibil_analyzer.domain.models import FinancialProfile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Minimum bcrypt cost keeps signup/login tests fast
fast_hasher = PasswordHasher(rounds=4)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: fast_hasher
    return TestClient(app)


def signup(client: TestClient, email: str, full_name: str = "Test User", password: str = "s3cret-pass") -> str:
    """Register an account through the API and return its session token"""
    response = client.post(
        "/auth/signup",
        json={"fullName": full_name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["token"]


@pytest.fixture
def auth_headers(client: TestClient) -> Dict[str, str]:
    """Bearer headers for a freshly registered account"""
    return {"Authorization": f"Bearer {signup(client, 'owner@example.com', 'Owner')}"}


@pytest.fixture
def other_auth_headers(client: TestClient) -> Dict[str, str]:
    """Bearer headers for a second, unrelated account"""
    return {"Authorization": f"Bearer {signup(client, 'intruder@example.com', 'Intruder')}"}


@pytest.fixture
def strong_profile_payload() -> dict:
    return {
        "fullName": "Asha Rao",
        "paymentHistory": 100,
        "creditUtilization": 30,
        "creditAge": 5,
        "creditMix": "good",
        "hardInquiries": 0,
    }


@pytest.fixture
def weak_profile() -> FinancialProfile:
    return FinancialProfile(
        owner_label="Ravi Kumar",
        payment_history_pct=60,
        credit_utilization_pct=80,
        credit_age_years=1,
        credit_mix="poor",
        hard_inquiries=5,
    )
