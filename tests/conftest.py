# tests/conftest.py
import os

# Required settings must exist before the application modules are imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MAIL_USER", "noreply@example.com")
os.environ.setdefault("MAIL_PASSWORD", "mail-password")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import logging
import smtplib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, enable_sqlite_foreign_keys, get_db
from main import app
from models.category import Category
from models.order import Order, OrderItem
from models.product import Product
from models.review import Review
from models.users import User
from utils.hashing import get_password_hash
from utils.logger import get_logger
from utils.mailer import get_mailer
from utils.tokenJWT import create_user_token

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
enable_sqlite_foreign_keys(engine)

# Same options as the application sessions
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def silent_logger() -> logging.Logger:
    log = logging.getLogger("catalog.tests")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log


class FakeMailer:
    """Records verification mails instead of talking to an SMTP server."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_verification(self, to: str, token: str) -> None:
        if self.fail:
            raise smtplib.SMTPException("mail server unavailable")
        self.sent.append((to, token))


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(mailer):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_logger] = silent_logger
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---- factories writing straight to the database ----

@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(email=None, username=None, password="password1", is_admin=False, is_verified=True):
        counter["n"] += 1
        user = User(
            username=username or f"user{counter['n']:03d}",
            email=email or f"user{counter['n']}@example.com",
            password_hash=get_password_hash(password),
            is_admin=is_admin,
            is_verified=is_verified,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_category(db_session):
    def _make(name="category1", description="description1"):
        category = Category(name=name, description=description)
        db_session.add(category)
        db_session.commit()
        return category

    return _make


@pytest.fixture
def make_product(db_session, make_category):
    def _make(name="product1", category=None, price=10.0, stock_quantity=100):
        category = category or make_category(name=f"cat-{name}")
        product = Product(
            name=name,
            description="description1",
            price=price,
            pictures=["https://example.com/image1.jpg"],
            category_id=category.id,
            stock_quantity=stock_quantity,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def make_review(db_session):
    def _make(user, product, rating=4, comment="Good"):
        review = Review(product_id=product.id, user_id=user.id, rating=rating, comment=comment)
        db_session.add(review)
        db_session.commit()
        return review

    return _make


@pytest.fixture
def make_order(db_session):
    def _make(user, products=(), total_price=100.0, status="Pending"):
        order = Order(
            user_id=user.id,
            total_price=total_price,
            status=status,
            items=[
                OrderItem(position=pos, product_id=p.id, quantity=1, price=p.price)
                for pos, p in enumerate(products)
            ],
        )
        db_session.add(order)
        db_session.commit()
        return order

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(email="admin@example.com", username="admin-user", is_admin=True)


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_user_token(admin_user)}"}


@pytest.fixture
def user_headers(make_user):
    user = make_user(email="plain@example.com", username="plain-user")
    return {"Authorization": f"Bearer {create_user_token(user)}"}
