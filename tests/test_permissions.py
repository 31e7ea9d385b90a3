import pytest

from core.config import settings
from models.account import AccountRole
from models.order import Order
from models.product import Product
from schemas.account import CurrentAccount
from services.permissions import can_delete_order, can_edit_order_details, can_mutate, is_order_participant

ADMIN = CurrentAccount(id="admin-1", role=AccountRole.ADMIN)
OWNER = CurrentAccount(id="vendor-1", role=AccountRole.VENDOR)
STRANGER = CurrentAccount(id="vendor-2", role=AccountRole.VENDOR)
BUYER = CurrentAccount(id="customer-1", role=AccountRole.CUSTOMER)
OTHER_BUYER = CurrentAccount(id="customer-2", role=AccountRole.CUSTOMER)
GHOST = CurrentAccount.model_construct(id="ghost-1", role="ghost")


def _product():
    return Product(id="p1", vendor_id="vendor-1")


def _order(customer_id="customer-1"):
    return Order(id="o1", product_id="p1", vendor_id="vendor-1", customer_id=customer_id)


def test_only_owning_vendor_mutates_product():
    product = _product()
    assert can_mutate(OWNER, product)
    assert not can_mutate(STRANGER, product)
    assert not can_mutate(ADMIN, product)
    assert not can_mutate(BUYER, product)


def test_owning_vendor_and_admin_mutate_order_status():
    order = _order()
    assert can_mutate(ADMIN, order)
    assert can_mutate(OWNER, order)
    assert not can_mutate(STRANGER, order)
    assert not can_mutate(BUYER, order)


def test_unknown_resource_type_raises():
    with pytest.raises(TypeError):
        can_mutate(OWNER, object())


def test_unknown_role_raises_instead_of_denying():
    with pytest.raises(ValueError):
        can_mutate(GHOST, _product())
    with pytest.raises(ValueError):
        is_order_participant(GHOST, _order())


def test_order_deletion_rule(monkeypatch):
    order = _order()
    assert can_delete_order(ADMIN, order)
    assert not can_delete_order(OWNER, order)
    assert not can_delete_order(BUYER, order)

    monkeypatch.setattr(settings, "ORDER_DELETE_ALLOW_VENDOR", True)
    assert can_delete_order(OWNER, order)
    assert not can_delete_order(STRANGER, order)


def test_only_ordering_customer_edits_details():
    assert can_edit_order_details(BUYER, _order())
    assert not can_edit_order_details(OTHER_BUYER, _order())
    assert not can_edit_order_details(BUYER, _order(customer_id=None))
    assert not can_edit_order_details(OWNER, _order())


def test_order_participants():
    order = _order()
    assert is_order_participant(ADMIN, order)
    assert is_order_participant(OWNER, order)
    assert is_order_participant(BUYER, order)
    assert not is_order_participant(STRANGER, order)
    assert not is_order_participant(OTHER_BUYER, order)
