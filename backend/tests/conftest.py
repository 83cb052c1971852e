from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from manzana.main import app
from manzana.api.deps import get_db, access_security
from manzana.models import Category, Product, Promotion, PromotionType, PromotionScope


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id="u-1", role="customer", user_type=None):
    subject = {"id": user_id, "role": role}
    if user_type:
        subject["user_type"] = user_type
    return access_security.create_access_token(subject=subject)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token('admin-1', role='admin')}"}


@pytest.fixture
def customer_headers():
    return {"Authorization": f"Bearer {make_token('cust-1')}"}


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def catalog(db, now):
    """Two categories, three products and a mix of promotions"""
    phones = Category(name="Phones", slug="phones", sort_order=1)
    cases = Category(name="Cases", slug="cases", sort_order=2)
    db.add(phones)
    db.add(cases)
    db.commit()
    db.refresh(phones)
    db.refresh(cases)

    phone = Product(name="Phone X", slug="phone-x", price=Decimal("1000"), category_id=phones.id)
    case = Product(
        name="Leather case",
        slug="leather-case",
        price=Decimal("100"),
        discounted_price=Decimal("80"),
        category_id=cases.id,
    )
    cable = Product(name="USB cable", slug="usb-cable", price=Decimal("50"), category_id=cases.id)
    hidden = Product(name="Old phone", slug="old-phone", price=Decimal("10"), is_active=False)
    for p in (phone, case, cable, hidden):
        db.add(p)
    db.commit()

    sitewide = Promotion(
        title="Sitewide 10%",
        promotion_type=PromotionType.PERCENTAGE,
        discount_value=Decimal("10"),
        applicable_to=PromotionScope.ALL,
        start_date=now - timedelta(days=2),
        end_date=now + timedelta(days=5),
    )
    phones_sale = Promotion(
        title="Phones -150",
        promotion_type=PromotionType.FIXED_AMOUNT,
        discount_value=Decimal("150"),
        applicable_to=PromotionScope.CATEGORY,
        applicable_ids=[str(phones.id)],
        start_date=now - timedelta(hours=3),
        end_date=now + timedelta(hours=6),
        is_featured=True,
    )
    expired = Promotion(
        title="Expired 90%",
        promotion_type=PromotionType.PERCENTAGE,
        discount_value=Decimal("90"),
        applicable_to=PromotionScope.ALL,
        start_date=now - timedelta(days=10),
        end_date=now - timedelta(days=1),
    )
    for p in (sitewide, phones_sale, expired):
        db.add(p)
    db.commit()

    for obj in (phone, case, cable, hidden, sitewide, phones_sale, expired):
        db.refresh(obj)

    return {
        "phones": phones,
        "cases": cases,
        "phone": phone,
        "case": case,
        "cable": cable,
        "hidden": hidden,
        "sitewide": sitewide,
        "phones_sale": phones_sale,
        "expired": expired,
    }
