from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from claims_portal.database import Base, get_db
from claims_portal.main import app
from claims_portal.models.user import User, UserRole
from claims_portal.routers.auth import auth_rate_limiter
from claims_portal.services.auth import AuthService
from claims_portal.services.notifications import get_notifier

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


class RecordingNotifier:
    """Stands in for ClaimNotifier; records what would have been sent."""

    def __init__(self):
        self.calls = []

    def claim_created(self, claim_id):
        self.calls.append(("claim_created", claim_id))

    def status_changed(self, claim_id, old_status, new_status):
        self.calls.append(("status_changed", claim_id, old_status, new_status))


recording_notifier = RecordingNotifier()

app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_notifier] = lambda: recording_notifier


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    auth_rate_limiter.reset()
    recording_notifier.calls.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def notifier():
    return recording_notifier


def _make_user(db, name, email, role):
    user = User(
        name=name,
        email=email,
        password_hash=AuthService.get_password_hash("password123"),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _auth_headers(user):
    token = AuthService.issue_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_user(db):
    return _make_user(db, "Priya Shah", "priya.shah@harbourclaims.co.uk", UserRole.STAFF)


@pytest.fixture
def admin_user(db):
    return _make_user(db, "Tom Hughes", "tom.hughes@harbourclaims.co.uk", UserRole.ADMIN)


@pytest.fixture
def staff_headers(staff_user):
    return _auth_headers(staff_user)


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user)


@pytest.fixture
def valid_payload():
    """A complete storm-damage claim with every sub-claim answered 'no' except building damage."""
    return {
        "claimant_name": "Margaret Ellis",
        "claimant_email": "margaret.ellis@gmail.com",
        "claimant_phone": "07700 900123",
        "property_address": "Flat 4, 12 Harbour Court, Bristol BS1 5TY",
        "property_block": "Harbour Court",
        "property_unit": "Flat 4",
        "incident_date": date(2026, 9, 14).isoformat(),
        "incident_type": "storm",
        "incident_description": (
            "High winds overnight lifted several roof tiles and rain came through "
            "the ceiling of the top floor landing."
        ),
        "has_building_damage": True,
        "building_damage_description": "Ceiling plaster collapsed on the landing and loft insulation soaked",
        "building_damage_affected_areas": "Top floor landing, loft",
        "has_theft": False,
        "theft_police_reported": False,
        "is_investment_property": False,
        "damage_photos": ["damage_photos/a1/landing.jpg", "damage_photos/b2/roof.jpg"],
        "repair_quotes": ["repair_quotes/c3/roofer-quote.pdf"],
        "invoices": [],
        "police_reports": [],
        "other_documents": [],
        "tenancy_agreements": [],
        "signature_data": "Margaret Ellis signed",
        "signature_type": "typed",
        "declaration_accepted": True,
        "fraud_warning_accepted": True,
        "contents_exclusion_accepted": True,
    }


@pytest.fixture
def submitted_claim(db, valid_payload):
    from claims_portal.services.claim_store import ClaimStore

    result = ClaimStore().create(db, valid_payload)
    assert result.ok
    return result.value
