"""
Shared fixtures: an in-memory SQLite database, factories for the pricing
records and an authenticated TestClient.
"""
import os

# Must be set before database/dependencies are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal

import pytest
from jose import jwt

from database import SessionLocal, engine
from models import Base, Development, Unit
from services.parameter_service import ParameterSetService


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def development(db_session):
    development = Development(name="Residencial Aurora", target_gross_vgv=Decimal("1000000.00"))
    db_session.add(development)
    db_session.commit()
    return development


@pytest.fixture
def make_unit(db_session, development):
    def _make_unit(identifier, **overrides):
        values = {
            "development_id": development.id,
            "identifier": identifier,
            "unit_type": "studio",
            "private_area": Decimal("40.00"),
            "total_area": Decimal("40.00"),
            "floor": 0,
        }
        values.update(overrides)
        if values["total_area"] < values["private_area"]:
            values["total_area"] = values["private_area"]
        unit = Unit(**values)
        db_session.add(unit)
        db_session.commit()
        return unit

    return _make_unit


@pytest.fixture
def make_parameter_set(db_session, development):
    def _make_parameter_set(name="Tabela A", floor_overrides=None, **values):
        data = {"name": name, "rate_studio": Decimal("5000.00"), "rate_apartment": Decimal("6000.00")}
        data.update(values)
        parameter_set = ParameterSetService.create(db_session, development.id, data, floor_overrides)
        db_session.commit()
        return parameter_set

    return _make_parameter_set


@pytest.fixture
def auth_headers():
    token = jwt.encode({"id": 7}, os.environ["JWT_SECRET"], algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient

    from database import get_session
    from main import app

    def _get_test_session():
        yield db_session

    app.dependency_overrides[get_session] = _get_test_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
