from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parent
sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DATABASE_WRITE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

from portaldb.database import Base  # noqa: E402
from portaldb.apps.accounts import models as account_models  # noqa: E402
from portaldb.apps.feature_gates import models as feature_gate_models  # noqa: E402
from portaldb.apps.training import models as training_models  # noqa: E402


def _session_for(tables):
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine, tables=tables)
    TestingSession = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    return TestingSession()


CORE_TABLES = [
    account_models.Chapter.__table__,
    account_models.User.__table__,
    account_models.UserRole.__table__,
    training_models.TrainingModule.__table__,
    training_models.TrainingAssignment.__table__,
    training_models.InstructorInterviewGate.__table__,
    training_models.InstructorTeachingPermission.__table__,
    training_models.InstructorApproval.__table__,
    training_models.InstructorApprovalLevel.__table__,
    training_models.ClassTemplate.__table__,
    training_models.ClassOffering.__table__,
]


@pytest.fixture()
def db_session():
    session = _session_for(CORE_TABLES + [feature_gate_models.FeatureGateRule.__table__])
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def db_session_without_gate_rules():
    """A database where the feature gate migration has not been applied."""
    session = _session_for(CORE_TABLES)
    try:
        yield session
    finally:
        session.close()
