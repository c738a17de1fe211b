"""
Catalog Service

Reads and writes the tenant catalog: companies, categories, products
and the profile that links an admin user to a company.

Admin writes follow a refresh-on-write policy: after every mutation the
caller re-reads the affected list from the database instead of patching
its own copy.

Category display order:
    - new categories are appended at the current count
    - deleting a category re-sequences the rest to 0..n-1, keeping their
      relative order
    - `reorder_categories` assigns 0..n-1 from an explicit id list
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from menudigital.models import Category, Company, Product, ProductStatus, Profile

logger = logging.getLogger(__name__)

_HEX_COLOR_RE = re.compile(r"^[0-9A-Fa-f]{6}$")

# Fields the profile screen may change
PROFILE_FIELDS = ("name", "phone", "email", "whatsapp", "address", "lat", "lng", "primary_color")


# =============================================================================
# ERRORS
# =============================================================================

class CatalogError(Exception):
    """Base class for catalog failures surfaced to the user."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(CatalogError):
    pass


class ConflictError(CatalogError):
    pass


class CatalogValidationError(CatalogError):
    pass


# =============================================================================
# HELPERS
# =============================================================================

def slugify(text: str) -> str:
    """
    URL-safe slug from a display name.

    >>> slugify("Café  Olé! Tacos")
    'cafe-ole-tacos'
    """
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9]+", "-", stripped)
    return slug.strip("-")


def normalize_color(color: Optional[str]) -> Optional[str]:
    """Prefix a bare 6-digit hex color with '#'; other values pass through trimmed."""
    if not color:
        return None
    color = color.strip()
    if _HEX_COLOR_RE.match(color):
        return f"#{color}"
    return color or None


def menu_url(base_url: str, slug: Optional[str]) -> Optional[str]:
    return f"{base_url}/menu/{slug}" if slug else None


@dataclass
class MenuSection:
    category: Category
    products: list[Product] = field(default_factory=list)


@dataclass
class MenuView:
    """Everything the public menu page shows for one tenant."""
    company: Company
    sections: list[MenuSection] = field(default_factory=list)

    @property
    def theme_color(self) -> Optional[str]:
        return normalize_color(self.company.primary_color)


@dataclass
class AdminContext:
    """Per-request admin session: the user and the company they manage."""
    user_id: str
    email: str
    company_id: Optional[str] = None
    company_slug: Optional[str] = None

    def require_company(self) -> str:
        if not self.company_id:
            raise CatalogValidationError(
                "Primero configura tu empresa en la sección de Configuración",
                field="company",
            )
        return self.company_id


# =============================================================================
# PUBLIC MENU
# =============================================================================

async def get_company_by_slug(db: AsyncSession, slug: str) -> Optional[Company]:
    result = await db.execute(select(Company).where(Company.slug == slug))
    return result.scalar_one_or_none()


async def load_menu(db: AsyncSession, slug: str) -> Optional[MenuView]:
    """
    Load the public menu for a slug.

    Categories come sorted by name; only active products are listed,
    grouped under their category. Empty categories and uncategorized
    products are left out.

    Returns:
        MenuView, or None when the slug is unknown
    """
    company = await get_company_by_slug(db, slug)
    if company is None:
        return None

    categories = (
        await db.execute(
            select(Category)
            .where(Category.company_id == company.id)
            .order_by(Category.name)
        )
    ).scalars().all()

    products = (
        await db.execute(
            select(Product)
            .where(
                Product.company_id == company.id,
                Product.status == ProductStatus.ACTIVE,
            )
            .order_by(Product.created_at, Product.name)
        )
    ).scalars().all()

    sections = []
    for category in categories:
        items = [p for p in products if p.category_id == category.id]
        if items:
            sections.append(MenuSection(category=category, products=items))

    return MenuView(company=company, sections=sections)


async def get_orderable_product(
    db: AsyncSession,
    company_id: str,
    product_id: str,
) -> Optional[Product]:
    """An active product of this company, or None."""
    result = await db.execute(
        select(Product).where(
            Product.id == product_id,
            Product.company_id == company_id,
            Product.status == ProductStatus.ACTIVE,
        )
    )
    return result.scalar_one_or_none()


# =============================================================================
# PROFILES
# =============================================================================

async def get_profile(db: AsyncSession, user_id: str) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def ensure_profile(db: AsyncSession, user_id: str, name: Optional[str] = None) -> Profile:
    """Return the user's profile, creating an unlinked one on first use."""
    profile = await get_profile(db, user_id)
    if profile is None:
        profile = Profile(user_id=user_id, name=name)
        db.add(profile)
        await db.commit()
        await db.refresh(profile)
        logger.info(f"Profile created for user {user_id}")
    return profile


async def build_admin_context(db: AsyncSession, user_id: str, email: str) -> AdminContext:
    context = AdminContext(user_id=user_id, email=email)
    profile = await get_profile(db, user_id)
    if profile and profile.company_id:
        company = await db.get(Company, profile.company_id)
        if company:
            context.company_id = company.id
            context.company_slug = company.slug
    return context


# =============================================================================
# COMPANY
# =============================================================================

async def get_company(db: AsyncSession, company_id: str) -> Company:
    company = await db.get(Company, company_id)
    if company is None:
        raise NotFoundError("Empresa no encontrada", field="company")
    return company


async def _slug_taken(db: AsyncSession, slug: str, exclude_id: Optional[str] = None) -> bool:
    query = select(Company.id).where(Company.slug == slug)
    if exclude_id:
        query = query.where(Company.id != exclude_id)
    return (await db.execute(query)).first() is not None


def _clean_slug(name: str, slug: Optional[str]) -> str:
    cleaned = slugify(slug) if slug else slugify(name)
    if not cleaned:
        raise CatalogValidationError("La URL del menú no puede estar vacía", field="slug")
    return cleaned


async def _commit_company(db: AsyncSession, company: Company) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"La URL '{company.slug}' ya está en uso", field="slug")
    await db.refresh(company)


async def create_company(
    db: AsyncSession,
    context: AdminContext,
    name: str,
    slug: Optional[str] = None,
    whatsapp: Optional[str] = None,
) -> Company:
    """Create the user's company and link it to their profile."""
    if context.company_id:
        raise ConflictError("Ya tienes una empresa configurada", field="company")

    cleaned = _clean_slug(name, slug)
    if await _slug_taken(db, cleaned):
        raise ConflictError(f"La URL '{cleaned}' ya está en uso", field="slug")

    company = Company(name=name.strip(), slug=cleaned, whatsapp=whatsapp or None)
    db.add(company)
    await db.flush()

    profile = await get_profile(db, context.user_id)
    if profile is None:
        profile = Profile(user_id=context.user_id)
        db.add(profile)
    profile.company_id = company.id

    await _commit_company(db, company)

    context.company_id = company.id
    context.company_slug = company.slug
    logger.info(f"Company created: {company.slug} ({company.id}) by user {context.user_id}")
    return company


async def update_company_settings(
    db: AsyncSession,
    context: AdminContext,
    name: str,
    slug: Optional[str] = None,
    whatsapp: Optional[str] = None,
) -> Company:
    company = await get_company(db, context.require_company())

    cleaned = _clean_slug(name, slug) if slug else company.slug
    if await _slug_taken(db, cleaned, exclude_id=company.id):
        raise ConflictError(f"La URL '{cleaned}' ya está en uso", field="slug")

    company.name = name.strip()
    company.slug = cleaned
    company.whatsapp = whatsapp or None
    await _commit_company(db, company)

    context.company_slug = company.slug
    logger.info(f"Company settings saved: {company.slug}")
    return company


async def update_company_profile(
    db: AsyncSession,
    context: AdminContext,
    changes: dict[str, Any],
) -> Company:
    """Apply profile fields (see PROFILE_FIELDS); unknown keys are ignored."""
    company = await get_company(db, context.require_company())

    for key in PROFILE_FIELDS:
        if key not in changes:
            continue
        value = changes[key]
        if key == "primary_color":
            value = normalize_color(value)
        elif isinstance(value, str):
            value = value.strip() or None
        if key == "name" and not value:
            raise CatalogValidationError("El nombre es obligatorio", field="name")
        setattr(company, key, value)

    await _commit_company(db, company)
    logger.info(f"Company profile saved: {company.slug}")
    return company


async def set_company_logo(db: AsyncSession, context: AdminContext, logo_url: str) -> Company:
    company = await get_company(db, context.require_company())
    company.logo = logo_url
    await _commit_company(db, company)
    return company


# =============================================================================
# CATEGORIES
# =============================================================================

async def list_categories(db: AsyncSession, company_id: str) -> list[Category]:
    result = await db.execute(
        select(Category)
        .where(Category.company_id == company_id)
        .order_by(Category.display_order)
    )
    return list(result.scalars().all())


async def _get_category(db: AsyncSession, company_id: str, category_id: str) -> Category:
    category = await db.get(Category, category_id)
    if category is None or category.company_id != company_id:
        raise NotFoundError("Categoría no encontrada", field="category_id")
    return category


async def create_category(
    db: AsyncSession,
    company_id: str,
    name: str,
    description: Optional[str] = None,
) -> Category:
    count = (
        await db.execute(
            select(func.count(Category.id)).where(Category.company_id == company_id)
        )
    ).scalar() or 0

    category = Category(
        company_id=company_id,
        name=name.strip(),
        description=description or None,
        display_order=count,
    )
    db.add(category)
    await db.commit()
    await db.refresh(category)
    logger.info(f"Category created: {category.name} #{category.display_order} ({company_id})")
    return category


async def update_category(
    db: AsyncSession,
    company_id: str,
    category_id: str,
    name: str,
    description: Optional[str] = None,
) -> Category:
    category = await _get_category(db, company_id, category_id)
    category.name = name.strip()
    category.description = description or None
    await db.commit()
    await db.refresh(category)
    return category


async def _resequence(db: AsyncSession, categories: list[Category]) -> None:
    # Park every row on a negative slot first so no two rows ever share a value
    for index, category in enumerate(categories):
        category.display_order = -(index + 1)
    await db.flush()
    for index, category in enumerate(categories):
        category.display_order = index
    await db.flush()


async def delete_category(db: AsyncSession, company_id: str, category_id: str) -> None:
    """Delete a category; its products become uncategorized."""
    category = await _get_category(db, company_id, category_id)

    await db.execute(
        update(Product)
        .where(Product.category_id == category.id)
        .values(category_id=None)
    )
    await db.delete(category)
    await db.flush()

    await _resequence(db, await list_categories(db, company_id))
    await db.commit()
    logger.info(f"Category deleted: {category_id} ({company_id})")


async def reorder_categories(
    db: AsyncSession,
    company_id: str,
    ordered_ids: list[str],
) -> list[Category]:
    """
    Assign display order 0..n-1 following `ordered_ids`.

    Raises:
        CatalogValidationError: If the ids are not exactly the company's categories
    """
    current = await list_categories(db, company_id)
    by_id = {c.id: c for c in current}
    if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(by_id):
        raise CatalogValidationError(
            "El nuevo orden debe incluir cada categoría exactamente una vez",
            field="category_ids",
        )

    await _resequence(db, [by_id[i] for i in ordered_ids])
    await db.commit()
    logger.info(f"Categories reordered ({company_id})")
    return await list_categories(db, company_id)


# =============================================================================
# PRODUCTS
# =============================================================================

async def list_products(db: AsyncSession, company_id: str) -> list[Product]:
    result = await db.execute(
        select(Product)
        .where(Product.company_id == company_id)
        .order_by(Product.created_at.desc(), Product.name)
    )
    return list(result.scalars().all())


async def _get_product(db: AsyncSession, company_id: str, product_id: str) -> Product:
    product = await db.get(Product, product_id)
    if product is None or product.company_id != company_id:
        raise NotFoundError("Producto no encontrado", field="product_id")
    return product


async def _check_category(db: AsyncSession, company_id: str, category_id: Optional[str]) -> None:
    if category_id:
        await _get_category(db, company_id, category_id)


def _apply_product_fields(product: Product, data: dict[str, Any]) -> None:
    product.name = data["name"].strip()
    product.description = data.get("description") or None
    product.price = float(data.get("price") or 0)
    product.image = data.get("image") or None
    product.category_id = data.get("category_id") or None
    product.status = ProductStatus(data.get("status") or ProductStatus.ACTIVE)


async def create_product(db: AsyncSession, company_id: str, data: dict[str, Any]) -> Product:
    await _check_category(db, company_id, data.get("category_id"))

    product = Product(company_id=company_id)
    _apply_product_fields(product, data)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Product created: {product.name} ({company_id})")
    return product


async def update_product(
    db: AsyncSession,
    company_id: str,
    product_id: str,
    data: dict[str, Any],
) -> Product:
    product = await _get_product(db, company_id, product_id)
    await _check_category(db, company_id, data.get("category_id"))

    _apply_product_fields(product, data)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Product updated: {product.name} ({company_id})")
    return product


async def delete_product(db: AsyncSession, company_id: str, product_id: str) -> None:
    product = await _get_product(db, company_id, product_id)
    await db.delete(product)
    await db.commit()
    logger.info(f"Product deleted: {product_id} ({company_id})")
