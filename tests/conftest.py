import os
from decimal import Decimal

# 앱 모듈 import 전에 테스트용 DB/키 설정
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pcoin.config import Settings
from pcoin.core.security import create_access_token
from pcoin.database.session import get_db
from pcoin.models import Base
from pcoin.models.user import User as UserModel, UserRole
from pcoin.schemas.user import User as UserSchema


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL="sqlite://",
        MAX_BALANCE=Decimal("99999999.99"),
        WELCOME_BONUS=Decimal("10.00"),
        JACKPOT_SEED=Decimal("100.00"),
    )


@pytest.fixture
def make_user(db):
    """잔액/역할을 지정해 사용자 생성"""

    def _make(username, balance="0.00", role=UserRole.USER, is_banned=False):
        user = UserModel(
            username=username,
            password_hash=None,
            p_coin_balance=Decimal(balance),
            role=role.value,
            is_banned=is_banned,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def as_schema():
    return UserSchema.model_validate


@pytest.fixture
def client(db):
    """인메모리 DB 세션을 요청 세션으로 쓰는 TestClient"""
    from pcoin.main import app

    container = app.container  # type: ignore
    container.repositories.session.override(providers.Object(db))
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()
    container.repositories.session.reset_override()


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.username, "user_id": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _headers
