"""
Pytest configuration and fixtures.
In-memory SQLite, rule cache and reconcile dispatcher replaced by in-process fakes.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.api.deps import get_dispatcher, get_rule_cache
from storefront.data.database import Base, SessionLocal, engine, get_db
from storefront.data.models import CartModel, FreeProductModel, ProductModel
from storefront.services.rule_service import FreeProductRuleService

_ids = itertools.count(1)


class InMemoryRuleCache:
    def __init__(self):
        self.rules = None
        self.invalidations = 0

    def get_rules(self):
        return None if self.rules is None else list(self.rules)

    def set_rules(self, rules):
        self.rules = list(rules)

    def invalidate(self):
        self.rules = None
        self.invalidations += 1


class RecordingDispatcher:
    def __init__(self):
        self.calls = []

    def schedule_sweep(self, cart_ids=None):
        self.calls.append(cart_ids)
        return True


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def rule_cache():
    return InMemoryRuleCache()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def rule_service(db_session, rule_cache, dispatcher):
    return FreeProductRuleService(db_session, cache=rule_cache, dispatcher=dispatcher)


@pytest.fixture(scope="function")
def client(db_session, rule_cache, dispatcher):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rule_cache] = lambda: rule_cache
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_product(db_session):
    def _make(price="100.00", name=None, **kwargs):
        n = next(_ids)
        product = ProductModel(
            name=name or f"Product {n}",
            sku=kwargs.pop("sku", f"SKU-{n}"),
            slug=kwargs.pop("slug", f"product-{n}"),
            description=kwargs.pop("description", ""),
            price=Decimal(price),
            image_url="",
            stock=kwargs.pop("stock", 10),
            **kwargs,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_rule(db_session, rule_cache):
    def _make(product, min_order_value):
        rule = FreeProductModel(product_id=product.id, min_order_value=Decimal(min_order_value))
        db_session.add(rule)
        db_session.commit()
        db_session.refresh(rule)
        rule_cache.invalidate()
        return rule

    return _make


@pytest.fixture
def cart(db_session):
    cart = CartModel(session_id="session-test")
    db_session.add(cart)
    db_session.commit()
    db_session.refresh(cart)
    return cart
