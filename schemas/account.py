from pydantic import BaseModel, EmailStr, validator, Field
from typing import Optional
from datetime import datetime
from models.account import AccountRole
import re

PHONE_PATTERN = re.compile(r'^\d{11}$')

def _check_phone(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    v = v.strip()
    if not PHONE_PATTERN.match(v):
        raise ValueError('Phone number must be 11 digits')
    return v

# Identity attached to an authenticated request
class CurrentAccount(BaseModel):
    id: str
    role: AccountRole

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

# Login Schema: vendors and admins log in by email, customers by phone
class LoginRequest(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    password: str = Field(..., min_length=1)

    @validator('email')
    def normalize_email(cls, v):
        return v.lower().strip() if v else None

    @validator('phone')
    def normalize_phone(cls, v):
        return v.strip() if v else None

class TokenResponse(BaseModel):
    token: str
    role: AccountRole
    user_id: str
    token_type: str = "bearer"

# Vendor Schemas
class VendorRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @validator('name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

class VendorResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    description: Optional[str] = ""
    logo: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class VendorSummary(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

# Customer Schemas
class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    phone: str
    password: str = Field(..., min_length=6, max_length=128)

    @validator('name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()

    @validator('phone')
    def validate_phone(cls, v):
        phone = _check_phone(v)
        if phone is None:
            raise ValueError('Phone number is required')
        return phone

class CustomerUpdate(BaseModel):
    phone: str
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    new_phone: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)

    @validator('new_phone')
    def validate_new_phone(cls, v):
        return _check_phone(v)

class CustomerPhoneRequest(BaseModel):
    phone: str

class BlockCustomerRequest(BaseModel):
    phone: str
    reason: str = ""

class CustomerResponse(BaseModel):
    id: str
    name: str
    phone: str
    is_blocked: bool
    block_reason: str = ""
    is_approved: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CustomerSummary(BaseModel):
    id: str
    name: str
    phone: str

    class Config:
        from_attributes = True

class AccountProfile(BaseModel):
    id: str
    role: AccountRole
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
