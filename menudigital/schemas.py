"""
Pydantic Schemas for Request/Response Validation

Covers the admin API (auth, company, categories, products), the public
menu, and the shopper cart / checkout endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class ProductStatusEnum(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


# =============================================================================
# AUTH
# =============================================================================

class SignUpRequest(BaseModel):
    email: str = Field(..., examples=["owner@tacos.mx"])
    password: str = Field(..., examples=["secret123"])
    name: Optional[str] = Field(None, max_length=120, examples=["Tacos Don Pepe"])


class SignInRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    success: bool
    message: str
    access_token: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None


class AdminContextResponse(BaseModel):
    user_id: str
    email: str
    company_id: Optional[str] = None
    company_slug: Optional[str] = None
    menu_url: Optional[str] = None


# =============================================================================
# COMPANY
# =============================================================================

class CompanySettingsRequest(BaseModel):
    """Settings screen: business name, menu URL slug, WhatsApp number."""
    name: str = Field(..., min_length=1, max_length=120, examples=["Tacos Don Pepe"])
    slug: Optional[str] = Field(None, max_length=120, examples=["tacos-don-pepe"])
    whatsapp: Optional[str] = Field(None, max_length=30, examples=["521234567890"])


class CompanyProfileUpdate(BaseModel):
    """Profile screen. Omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    whatsapp: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    primary_color: Optional[str] = Field(None, max_length=20, examples=["FF6B35"])


class CompanyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    whatsapp: Optional[str] = None
    logo: Optional[str] = None
    primary_color: Optional[str] = None
    menu_url: Optional[str] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, examples=["Tacos"])
    description: Optional[str] = Field(None, max_length=500)


class CategoryReorderRequest(BaseModel):
    category_ids: List[str] = Field(..., examples=[["cat-2", "cat-1"]])


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    display_order: int


class CategoryListResponse(BaseModel):
    total: int
    categories: List[CategoryResponse]


# =============================================================================
# PRODUCTS
# =============================================================================

class ProductRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120, examples=["Taco al pastor"])
    description: Optional[str] = Field(None, max_length=1000)
    price: float = Field(0.0, ge=0, examples=[2.5])
    image: Optional[str] = Field(None, max_length=500, examples=["https://..."])
    category_id: Optional[str] = None
    status: ProductStatusEnum = ProductStatusEnum.ACTIVE


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None
    category_id: Optional[str] = None
    status: str


class ProductListResponse(BaseModel):
    total: int
    products: List[ProductResponse]


# =============================================================================
# PUBLIC MENU
# =============================================================================

class MenuProduct(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    image: Optional[str] = None


class MenuCategory(BaseModel):
    id: str
    name: str
    products: List[MenuProduct]


class MenuCompany(BaseModel):
    name: str
    slug: str
    logo: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    theme_color: Optional[str] = None
    accepts_orders: bool


class MenuResponse(BaseModel):
    company: MenuCompany
    categories: List[MenuCategory]


# =============================================================================
# CART & CHECKOUT
# =============================================================================

class AddItemRequest(BaseModel):
    product_id: str


class UpdateQuantityRequest(BaseModel):
    delta: int = Field(..., examples=[1, -1])


class CustomerInfoRequest(BaseModel):
    """Raw customer form; validated by the checkout flow."""
    customer_name: Optional[str] = Field("", examples=["Ana"])
    order_type: str = Field("pickup", examples=["pickup", "delivery"])
    payment_method: str = Field("cash", examples=["cash", "transfer"])
    address: Optional[str] = Field(None, examples=["Calle 5 #123, Centro"])


class CartItemResponse(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int
    line_total: float
    image: Optional[str] = None


class CartResponse(BaseModel):
    slug: str
    step: str
    cart_open: bool = False
    items: List[CartItemResponse]
    total: float
    count: int
    notice: Optional[str] = None


class OrderSubmitResponse(BaseModel):
    success: bool
    message: str
    whatsapp_url: str
    order_message: str
    cart: CartResponse


# =============================================================================
# COMMON
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    field: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    kv_store: str
    auth_service: str
    storage_service: str
    timestamp: datetime
