import os

# przed importem storefront - settings czytaja env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FUNCTION_BEARER_KEY"] = "test-key"
os.environ.pop("JWT_SECRET", None)

import random
from datetime import datetime, timezone
from decimal import Decimal

import jwt
import pytest
from redis.exceptions import RedisError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import Base
from storefront.data.gateway import DataGateway
from storefront.data.models import ProductModel, UserModel
from storefront.domain.schemas import UserRead
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderOrchestrator

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeLockService:
    def __init__(self):
        self.held = set()
        self.acquired = []

    def acquire_cart_line_lock(self, user_id, product_id):
        key = (user_id, product_id)
        if key in self.held:
            return None
        self.held.add(key)
        self.acquired.append(key)
        return f"token-{user_id}-{product_id}"

    def release_cart_line_lock(self, user_id, product_id, token):
        self.held.discard((user_id, product_id))
        return True


class FakeCredentialStore:
    def __init__(self, value=None):
        self.value = value

    def get(self):
        return self.value

    def set(self, credential):
        self.value = credential

    def remove(self):
        self.value = None


class BrokenCredentialStore:
    """Redis lezy - kazde wywolanie konczy sie RedisError."""

    def get(self):
        raise RedisError("connection refused")

    def set(self, credential):
        raise RedisError("connection refused")

    def remove(self):
        raise RedisError("connection refused")


class FakeEmailService:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send_order_email(self, user_name, user_email, lines, address, total, order_id, order_date):
        if self.fail:
            raise ConnectionError("broker down")
        self.sent.append({"user_email": user_email, "order_id": order_id, "total": total, "lines": lines})


def make_token(secret="test-secret", **claims):
    payload = {
        "sub": "user-1",
        "email": "jan@mail.com",
        "user_metadata": {"full_name": "Jan Kowalski", "avatar_url": "https://cdn.example.com/jan.png"},
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway(db):
    return DataGateway(db)


@pytest.fixture
def user(db):
    row = UserModel(id="user-1", email="jan@mail.com", name="Jan Kowalski", profile="")
    db.add(row)
    db.commit()
    return UserRead.model_validate(row)


@pytest.fixture
def other_user(db):
    row = UserModel(id="user-2", email="ola@mail.com", name="Ola Nowak", profile="")
    db.add(row)
    db.commit()
    return UserRead.model_validate(row)


@pytest.fixture
def products(db):
    a = ProductModel(name="Galaxy S24", brand="Samsung", type="Mobile", amount=Decimal("10.00"),
                     description="Flagship phone", is_active=True)
    b = ProductModel(name="Watch Series 9", brand="Apple", type="Watch", amount=Decimal("5.00"),
                     description="Smart watch", is_active=True)
    db.add_all([a, b])
    db.commit()
    return a, b


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def cart_service(gateway, lock_service):
    return CartService(gateway, lock_service)


@pytest.fixture
def orchestrator(gateway, cart_service, email_service):
    return OrderOrchestrator(
        gateway,
        cart_service,
        email_service,
        rng=random.Random(1234),
        clock=lambda: FIXED_NOW,
    )
