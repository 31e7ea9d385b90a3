from datetime import datetime, timedelta
from typing import Optional, Union
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from models.account import AccountRole, Admin, Customer, Vendor
from schemas.account import CurrentAccount, LoginRequest
from core.config import settings
from core.exceptions import AuthorizationError, InvalidRoleError, InvalidTokenError, ValidationError
from core.messages import get_message
import logging

logger = logging.getLogger(__name__)

Account = Union[Admin, Vendor, Customer]

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCOUNT_MODELS = {
    AccountRole.ADMIN: Admin,
    AccountRole.VENDOR: Vendor,
    AccountRole.CUSTOMER: Customer,
}

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)

def create_access_token(account_id: str, role: AccountRole, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token asserting ``{sub: account_id, role}``."""
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": account_id,
        "role": AccountRole(role).value,
        "exp": expire,
        "iat": now,
        "iss": settings.TOKEN_ISSUER,
        "type": "access"
    }

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    logger.info(f"Access token issued for {role} {account_id}")
    return encoded_jwt

def decode_access_token(token: str) -> CurrentAccount:
    """Verify signature and expiry and return the asserted identity.

    Raises InvalidTokenError when the token cannot be trusted and
    InvalidRoleError when it is trustworthy but names an unknown role.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=settings.TOKEN_ISSUER
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        raise InvalidTokenError(get_message("auth.invalid_token"))

    account_id = payload.get("sub")
    if not account_id:
        logger.warning("Token missing subject claim")
        raise InvalidTokenError(get_message("auth.invalid_token"))

    try:
        role = AccountRole(payload.get("role"))
    except ValueError:
        logger.warning(f"Token carries invalid role: {payload.get('role')}")
        raise InvalidRoleError(get_message("auth.invalid_role"))

    return CurrentAccount(id=account_id, role=role)

def get_account(db: Session, role: AccountRole, account_id: str) -> Optional[Account]:
    """Load the account record behind an identity."""
    model = ACCOUNT_MODELS[AccountRole(role)]
    return db.query(model).filter(model.id == account_id).first()

def get_vendor_by_email(db: Session, email: str) -> Optional[Vendor]:
    return db.query(Vendor).filter(Vendor.email == email.lower().strip()).first()

def get_admin_by_email(db: Session, email: str) -> Optional[Admin]:
    return db.query(Admin).filter(Admin.email == email.lower().strip()).first()

def get_customer_by_phone(db: Session, phone: str) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.phone == phone.strip()).first()

def _find_login_account(db: Session, credentials: LoginRequest) -> Optional[Account]:
    # Customers log in by phone; vendors, then admins, by email
    account = None
    if credentials.phone:
        account = get_customer_by_phone(db, credentials.phone)
    if account is None and credentials.email:
        account = get_vendor_by_email(db, credentials.email)
        if account is None:
            account = get_admin_by_email(db, credentials.email)
    return account

def authenticate(db: Session, credentials: LoginRequest) -> Account:
    """Resolve the login identifier and check the password.

    Unknown identifiers and wrong passwords fail identically. Blocked or
    not-yet-approved customers are refused only after their password
    matched, with a distinct error.
    """
    if not credentials.email and not credentials.phone:
        raise ValidationError(get_message("auth.credentials_required"))

    identifier = credentials.phone or credentials.email
    account = _find_login_account(db, credentials)
    if account is None:
        logger.warning(f"Login attempt with unknown identifier: {identifier}")
        raise ValidationError(get_message("auth.invalid_credentials"))

    if not verify_password(credentials.password, account.password_hash):
        logger.warning(f"Login attempt with invalid password for: {identifier}")
        raise ValidationError(get_message("auth.invalid_credentials"))

    if account.role == AccountRole.CUSTOMER:
        if account.is_blocked:
            logger.warning(f"Blocked customer attempted login: {account.phone}")
            raise AuthorizationError(
                get_message("auth.customer_blocked", reason=account.block_reason),
                details={"reason": account.block_reason}
            )
        if not account.is_approved:
            logger.warning(f"Unapproved customer attempted login: {account.phone}")
            raise AuthorizationError(get_message("auth.customer_pending"))

    logger.info(f"Successful login for {account.role.value}: {identifier}")
    return account

def create_admin(db: Session, name: str, email: str, password: str) -> Admin:
    """Bootstrap an admin account; admins are never created over the API."""
    email = email.lower().strip()
    if get_admin_by_email(db, email) or get_vendor_by_email(db, email):
        raise ValidationError(get_message("vendor.email_taken"), field="email")

    admin = Admin(name=name.strip(), email=email, password_hash=get_password_hash(password))
    try:
        db.add(admin)
        db.commit()
        db.refresh(admin)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Admin created: {admin.email} ({admin.id})")
    return admin
