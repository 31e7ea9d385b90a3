"""
Ownership rules for catalog and order mutations.

Every role branch is listed explicitly; an unlisted role is a programming
error and raises instead of silently denying.
"""
from typing import Union

from core.config import settings
from models.account import AccountRole
from models.order import Order
from models.product import Product
from schemas.account import CurrentAccount


def _unhandled(account: CurrentAccount):
    raise ValueError(f"Unhandled account role: {account.role!r}")


def _can_mutate_product(account: CurrentAccount, product: Product) -> bool:
    # Approval is an admin action with its own guard, not an ownership right
    if account.role == AccountRole.ADMIN:
        return False
    if account.role == AccountRole.VENDOR:
        return product.vendor_id == account.id
    if account.role == AccountRole.CUSTOMER:
        return False
    return _unhandled(account)


def _can_mutate_order(account: CurrentAccount, order: Order) -> bool:
    if account.role == AccountRole.ADMIN:
        return True
    if account.role == AccountRole.VENDOR:
        return order.vendor_id == account.id
    if account.role == AccountRole.CUSTOMER:
        return False
    return _unhandled(account)


def can_mutate(account: CurrentAccount, resource: Union[Product, Order]) -> bool:
    """Whether ``account`` may change ``resource``.

    Products: only the owning vendor. Orders (status): admins and the
    owning vendor.
    """
    if isinstance(resource, Product):
        return _can_mutate_product(account, resource)
    if isinstance(resource, Order):
        return _can_mutate_order(account, resource)
    raise TypeError(f"No mutation rule for {type(resource).__name__}")


def can_delete_order(account: CurrentAccount, order: Order) -> bool:
    if account.role == AccountRole.ADMIN:
        return True
    if account.role == AccountRole.VENDOR:
        return settings.ORDER_DELETE_ALLOW_VENDOR and order.vendor_id == account.id
    if account.role == AccountRole.CUSTOMER:
        return False
    return _unhandled(account)


def can_edit_order_details(account: CurrentAccount, order: Order) -> bool:
    """Quantity and address belong to the customer who placed the order."""
    if account.role == AccountRole.CUSTOMER:
        return order.customer_id is not None and order.customer_id == account.id
    if account.role in (AccountRole.ADMIN, AccountRole.VENDOR):
        return False
    return _unhandled(account)


def is_order_participant(account: CurrentAccount, order: Order) -> bool:
    if account.role == AccountRole.ADMIN:
        return True
    if account.role == AccountRole.VENDOR:
        return order.vendor_id == account.id
    if account.role == AccountRole.CUSTOMER:
        return order.customer_id is not None and order.customer_id == account.id
    return _unhandled(account)
