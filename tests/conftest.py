import io
import os
import tempfile

# Configure an isolated in-memory database before the app modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="marketplace-uploads-")

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from core.config import settings
from database.connection import SessionLocal, create_tables, drop_tables
from main import app
from schemas.account import CustomerCreate
from schemas.order import OrderCreate
from services.auth import create_access_token, create_admin
from services.customer import create_customer
from services.order import create_order
from services.product import create_product, set_approval
from services.vendor import create_vendor


def run_in_session(work):
    db = SessionLocal()
    try:
        return work(db)
    finally:
        db.close()


def auth_headers(account):
    token = create_access_token(account.id, account.role)
    return {"Authorization": f"Bearer {token}"}


def image_bytes(size=(640, 480), fmt="PNG", color=(200, 30, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def database():
    create_tables()
    yield
    drop_tables()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin():
    return run_in_session(lambda db: create_admin(db, "Root", "admin@example.com", "adminpass"))


@pytest.fixture
def vendor():
    return run_in_session(lambda db: create_vendor(
        db, name="Acme Foods", email="acme@example.com", password="vendorpass", phone="01000000001"
    ))


@pytest.fixture
def other_vendor():
    return run_in_session(lambda db: create_vendor(
        db, name="Nile Trading", email="nile@example.com", password="vendorpass", phone="01000000002"
    ))


@pytest.fixture
def customer():
    return run_in_session(lambda db: create_customer(
        db, CustomerCreate(name="Sara", phone="01200000001", password="custpass")
    ))


@pytest.fixture
def other_customer():
    return run_in_session(lambda db: create_customer(
        db, CustomerCreate(name="Omar", phone="01200000002", password="custpass")
    ))


@pytest.fixture
def make_product():
    def factory(owner, approved=False, images=None, videos=None, **attrs):
        fields = {
            "name": "Olive Oil",
            "type": "oil",
            "price": "120.5",
            "quantity_per_carton": "12",
            "manufacturer": "Siwa Farms",
            "description": "Cold pressed"
        }
        fields.update(attrs)

        def work(db):
            product = create_product(db, owner.id, fields, images or [], videos or [])
            if approved:
                product = set_approval(db, product.id, approved=True)
            return product.id

        return run_in_session(work)

    return factory


@pytest.fixture
def make_order():
    def factory(product_id, vendor_id, customer_id=None, **fields):
        data = OrderCreate(product=product_id, vendor=vendor_id, quantity=fields.pop("quantity", 2), **fields)
        return run_in_session(lambda db: create_order(db, data, customer_id=customer_id).id)

    return factory
