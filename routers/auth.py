from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.connection import get_db
from services.auth import authenticate, create_access_token, decode_access_token, get_account
from services.customer import (
    list_customers,
    list_pending_customers,
    create_customer,
    approve_customer,
    reject_customer,
    update_customer,
    delete_customer,
    block_customer,
    unblock_customer
)
from services.vendor import create_vendor
from schemas.account import (
    AccountProfile,
    BlockCustomerRequest,
    CurrentAccount,
    CustomerCreate,
    CustomerPhoneRequest,
    CustomerResponse,
    CustomerUpdate,
    LoginRequest,
    TokenResponse,
    VendorRegister,
    VendorResponse
)
from core.exceptions import AuthenticationError, AuthorizationError, ResourceNotFoundError
from core.messages import get_message
from core.response import message_response
from models.account import AccountRole

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

# Dependency to get current account
def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentAccount:
    """Verify the bearer token and return the identity it asserts."""
    if not credentials or not credentials.credentials:
        raise AuthenticationError(get_message("auth.missing_token"))
    return decode_access_token(credentials.credentials)

def get_optional_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[CurrentAccount]:
    """Identity for public endpoints: absent or unusable tokens yield None."""
    if not credentials or not credentials.credentials:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except AuthenticationError as e:
        logger.info(f"Ignoring unusable token on public endpoint: {e.message}")
        return None

def require_role(role: AccountRole, message_key: str):
    def dependency(current_account: CurrentAccount = Depends(get_current_account)) -> CurrentAccount:
        if current_account.role != role:
            logger.warning(
                f"{current_account.role.value} {current_account.id} denied access to {role.value} endpoint"
            )
            raise AuthorizationError(get_message(message_key))
        return current_account
    return dependency

require_admin = require_role(AccountRole.ADMIN, "auth.admin_only")
require_vendor = require_role(AccountRole.VENDOR, "auth.vendor_only")
require_customer = require_role(AccountRole.CUSTOMER, "auth.customer_only")

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(vendor_data: VendorRegister, db: Session = Depends(get_db)):
    """Public vendor self-registration."""
    logger.info(f"Registration attempt for email: {vendor_data.email}")
    vendor = create_vendor(
        db,
        name=vendor_data.name,
        email=vendor_data.email,
        password=vendor_data.password
    )
    return message_response(get_message("vendor.created"), vendor=VendorResponse.from_orm(vendor))

@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Log in a vendor or admin by email, or a customer by phone."""
    account = authenticate(db, credentials)
    token = create_access_token(account.id, account.role)
    return TokenResponse(token=token, role=account.role, user_id=account.id)

@router.post("/register-customer-public", status_code=status.HTTP_201_CREATED)
def register_customer_public(customer_data: CustomerCreate, db: Session = Depends(get_db)):
    """Customer self-registration; the account waits for admin approval."""
    customer = create_customer(db, customer_data, approved=False)
    return message_response(get_message("customer.registered"), customer=CustomerResponse.from_orm(customer))

@router.get("/me", response_model=AccountProfile)
def read_me(
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    account = get_account(db, current_account.role, current_account.id)
    if account is None:
        raise ResourceNotFoundError(get_message("auth.account_not_found"), current_account.role.value, current_account.id)
    return AccountProfile(
        id=account.id,
        role=account.role,
        name=account.name,
        email=getattr(account, "email", None),
        phone=getattr(account, "phone", None)
    )

# Customer administration

@router.get("/customers", response_model=List[CustomerResponse])
def get_customers(
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return [CustomerResponse.from_orm(c) for c in list_customers(db)]

@router.get("/pending-customers", response_model=List[CustomerResponse])
def get_pending_customers(
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return [CustomerResponse.from_orm(c) for c in list_pending_customers(db)]

@router.post("/register-customer", status_code=status.HTTP_201_CREATED)
def register_customer(
    customer_data: CustomerCreate,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = create_customer(db, customer_data, approved=True)
    return message_response(get_message("customer.created"), customer=CustomerResponse.from_orm(customer))

@router.post("/approve-customer")
def approve(
    request: CustomerPhoneRequest,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = approve_customer(db, request.phone)
    return message_response(get_message("customer.approved"), customer=CustomerResponse.from_orm(customer))

@router.post("/reject-customer")
def reject(
    request: CustomerPhoneRequest,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    reject_customer(db, request.phone)
    return message_response(get_message("customer.rejected"))

@router.put("/update-customer")
def edit_customer(
    customer_data: CustomerUpdate,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = update_customer(db, customer_data)
    return message_response(get_message("customer.updated"), customer=CustomerResponse.from_orm(customer))

@router.delete("/delete-customer")
def remove_customer(
    request: CustomerPhoneRequest,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    delete_customer(db, request.phone)
    return message_response(get_message("customer.deleted"))

@router.post("/block-customer")
def block(
    request: BlockCustomerRequest,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = block_customer(db, request.phone, request.reason)
    return message_response(get_message("customer.blocked"), customer=CustomerResponse.from_orm(customer))

@router.post("/unblock-customer")
def unblock(
    request: CustomerPhoneRequest,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    customer = unblock_customer(db, request.phone)
    return message_response(get_message("customer.unblocked"), customer=CustomerResponse.from_orm(customer))
