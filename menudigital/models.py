"""
SQLAlchemy Database Models

Catalog tables for the multi-tenant menu:
- Companies (tenants) with their public slug and contact data
- Categories with a per-tenant display order
- Products with price and lifecycle status
- Profiles linking an authenticated user to a company
"""

import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from menudigital.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class ProductStatus(str, enum.Enum):
    """Product lifecycle status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Company(Base):
    """
    One restaurant account (tenant).

    Created once at onboarding, then mutated through the settings
    and profile screens.
    """
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(120), nullable=False)
    slug = Column(String(120), nullable=False, unique=True, index=True)

    # =========================================================================
    # CONTACT
    # =========================================================================
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    whatsapp = Column(String(30), nullable=True)

    # =========================================================================
    # BRANDING
    # =========================================================================
    logo = Column(String(500), nullable=True)
    primary_color = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    categories = relationship(
        "Category",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    products = relationship(
        "Product",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Company {self.slug} - {self.name}>"


class Category(Base):
    """Menu section; `display_order` is unique per company."""
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("company_id", "display_order", name="uq_category_display_order"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    company_id = Column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    company = relationship("Company", back_populates="categories")

    def __repr__(self):
        return f"<Category {self.name} #{self.display_order}>"


class Product(Base):
    """Menu item. Read-only to shoppers."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    company_id = Column(
        String(36),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = Column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    image = Column(String(500), nullable=True)
    status = Column(
        Enum(ProductStatus),
        default=ProductStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", back_populates="products")

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    def __repr__(self):
        return f"<Product {self.name} - {self.price:.2f} - {self.status.value}>"


class Profile(Base):
    """Links an authenticated user to the company they administer."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(120), nullable=True)
    company_id = Column(
        String(36),
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Profile {self.user_id} -> {self.company_id}>"
