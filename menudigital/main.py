"""
FastAPI Application Entry Point

MenuDigital - multi-tenant digital menu with WhatsApp ordering.
Supports local services (development) and the hosted backend (production).

Endpoints:
    - GET  /menu/{slug}: Public menu page
    - GET  /api/menu/{slug}: Public menu data
    - *    /api/menu/{slug}/cart...: Shopper cart
    - POST /api/menu/{slug}/checkout...: Checkout flow and WhatsApp link
    - POST /api/auth/...: Admin sign-up / sign-in / sign-out
    - *    /api/admin/...: Company, categories and products
    - GET  /health: System health check
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from menudigital.core.config import get_settings, setup_logging
from menudigital.database import engine, get_db, init_db
from menudigital.models import Company
from menudigital.ordering import (
    AddItem,
    BeginCheckout,
    CartStore,
    CheckoutFlow,
    FlowResult,
    GoBack,
    ProductSnapshot,
    RemoveItem,
    SubmitOrder,
    TenantInfo,
    UpdateQuantity,
)
from menudigital.schemas import (
    AddItemRequest,
    AdminContextResponse,
    AuthResponse,
    CartItemResponse,
    CartResponse,
    CategoryListResponse,
    CategoryReorderRequest,
    CategoryRequest,
    CategoryResponse,
    CompanyProfileUpdate,
    CompanyResponse,
    CompanySettingsRequest,
    CustomerInfoRequest,
    ErrorResponse,
    HealthResponse,
    MenuCategory,
    MenuCompany,
    MenuProduct,
    MenuResponse,
    OrderSubmitResponse,
    ProductListResponse,
    ProductRequest,
    SignInRequest,
    SignUpRequest,
    UpdateQuantityRequest,
)
from menudigital.services import catalog
from menudigital.services.auth import get_auth_service
from menudigital.services.catalog import (
    AdminContext,
    CatalogError,
    CatalogValidationError,
    ConflictError,
    MenuView,
    NotFoundError,
)
from menudigital.services.kv import SessionStorage, get_kv_store
from menudigital.services.storage import get_storage_service
from menudigital.services.storage.local import UPLOADS_URL_PREFIX

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Template configuration
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    logger.info(f"✅ KV Store: {get_kv_store().provider_name}")
    logger.info(f"✅ Auth Service: {get_auth_service().provider_name}")
    logger.info(f"✅ Storage Service: {get_storage_service().provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Multi-tenant digital menu. Owners manage their catalog, "
        "shoppers build a cart and send the order through WhatsApp."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Logos uploaded in development mode
app.mount(
    UPLOADS_URL_PREFIX,
    StaticFiles(directory=settings.local_storage_directory, check_dir=False),
    name="uploads",
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def error_response(status_code: int, message: str, field: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, field=field).model_dump(),
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _company_response(company: Company) -> CompanyResponse:
    response = CompanyResponse.model_validate(company)
    response.menu_url = catalog.menu_url(settings.public_base_url, company.slug)
    return response


def _menu_response(view: MenuView) -> MenuResponse:
    company = view.company
    return MenuResponse(
        company=MenuCompany(
            name=company.name,
            slug=company.slug,
            logo=company.logo,
            phone=company.phone,
            email=company.email,
            address=company.address,
            lat=company.lat,
            lng=company.lng,
            theme_color=view.theme_color,
            accepts_orders=bool(company.whatsapp),
        ),
        categories=[
            MenuCategory(
                id=section.category.id,
                name=section.category.name,
                products=[
                    MenuProduct(
                        id=p.id,
                        name=p.name,
                        description=p.description,
                        price=p.price,
                        image=p.image,
                    )
                    for p in section.products
                ],
            )
            for section in view.sections
        ],
    )


def _cart_response(flow: CheckoutFlow, notice: Optional[str] = None) -> CartResponse:
    return CartResponse(
        slug=flow.tenant.slug,
        step=flow.step.value,
        cart_open=flow.cart_open,
        items=[
            CartItemResponse(
                product_id=item.product_id,
                name=item.product.name,
                price=item.product.price,
                quantity=item.quantity,
                line_total=item.line_total,
                image=item.product.image,
            )
            for item in flow.cart
        ],
        total=flow.cart.total(),
        count=flow.cart.count(),
        notice=notice,
    )


async def _dispatch(flow: CheckoutFlow, command) -> FlowResult:
    """Run a checkout command in the threadpool; it writes through to the key-value store."""
    return await run_in_threadpool(flow.dispatch, command)


def _flow_response(flow: CheckoutFlow, result: FlowResult):
    if not result.success:
        return error_response(400, result.message, result.field)
    return _cart_response(flow, result.message)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_shopper_storage(request: Request, response: Response) -> SessionStorage:
    """This shopper's private storage, keyed by the session cookie."""
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(
            settings.session_cookie_name,
            session_id,
            max_age=60 * 60 * 24 * 365,
            httponly=True,
            samesite="lax",
        )
    return SessionStorage(get_kv_store(), session_id)


async def get_admin_context(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> AdminContext:
    """Resolve the bearer token to the user and the company they manage."""
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="No autenticado")

    user = await get_auth_service().get_user(token)
    if user is None:
        raise HTTPException(status_code=401, detail="Sesión inválida o expirada")

    return await catalog.build_admin_context(db, user.id, user.email)


async def open_checkout_flow(
    slug: str,
    db: AsyncSession = Depends(get_db),
    storage: SessionStorage = Depends(get_shopper_storage),
) -> CheckoutFlow:
    """Checkout flow for this shopper and the tenant named by the slug."""
    company = await catalog.get_company_by_slug(db, slug)
    if company is None:
        raise NotFoundError("Menú no encontrado", field="slug")

    tenant = TenantInfo(
        name=company.name,
        slug=company.slug,
        whatsapp=company.whatsapp,
        company_id=company.id,
    )
    store = CartStore(storage, company.slug, ttl_seconds=settings.cart_ttl_seconds)
    # Loading the stored cart is a blocking key-value store read
    return await run_in_threadpool(
        CheckoutFlow, tenant, store, whatsapp_base_url=settings.whatsapp_base_url
    )


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍽️ Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Verify all system components are operational."""
    db_status = "healthy"
    try:
        await db.execute(select(func.count(Company.id)))
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    kv_status = "healthy" if get_kv_store().health_check() else "unhealthy"
    auth_status = "healthy" if await get_auth_service().health_check() else "unhealthy"
    storage_status = "healthy" if await get_storage_service().health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, kv_status, auth_status, storage_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        kv_store=kv_status,
        auth_service=auth_status,
        storage_service=storage_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# PUBLIC MENU
# =============================================================================

@app.get("/menu/{slug}", response_class=HTMLResponse, tags=["Menu"])
async def menu_page(
    request: Request,
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> HTMLResponse:
    """Serve the public menu page, or the not-found page for unknown slugs."""
    view = await catalog.load_menu(db, slug)
    if view is None:
        logger.info(f"Menu not found: {slug}")
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"slug": slug},
            status_code=404,
        )

    return templates.TemplateResponse(
        request,
        "menu.html",
        {"menu": _menu_response(view), "api_base": f"/api/menu/{view.company.slug}"},
    )


@app.get(
    "/api/menu/{slug}",
    response_model=MenuResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def get_menu(slug: str, db: AsyncSession = Depends(get_db)) -> MenuResponse:
    """Public menu data: company, categories and active products."""
    view = await catalog.load_menu(db, slug)
    if view is None:
        raise NotFoundError("Menú no encontrado", field="slug")
    return _menu_response(view)


# =============================================================================
# CART ENDPOINTS
# =============================================================================

@app.get("/api/menu/{slug}/cart", response_model=CartResponse, tags=["Cart"])
async def get_cart(flow: CheckoutFlow = Depends(open_checkout_flow)) -> CartResponse:
    return _cart_response(flow)


@app.post("/api/menu/{slug}/cart/open", response_model=CartResponse, tags=["Cart"])
async def open_cart(flow: CheckoutFlow = Depends(open_checkout_flow)) -> CartResponse:
    """Open the cart panel; always lands on the review step."""
    await run_in_threadpool(flow.open_cart)
    return _cart_response(flow)


@app.post(
    "/api/menu/{slug}/cart/items",
    response_model=CartResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Cart"],
)
async def add_cart_item(
    body: AddItemRequest,
    flow: CheckoutFlow = Depends(open_checkout_flow),
    db: AsyncSession = Depends(get_db),
):
    product = await catalog.get_orderable_product(db, flow.tenant.company_id, body.product_id)
    if product is None:
        raise NotFoundError("Producto no disponible", field="product_id")

    command = AddItem(ProductSnapshot.from_model(product))
    return _flow_response(flow, await _dispatch(flow, command))


@app.patch("/api/menu/{slug}/cart/items/{product_id}", response_model=CartResponse, tags=["Cart"])
async def update_cart_item(
    product_id: str,
    body: UpdateQuantityRequest,
    flow: CheckoutFlow = Depends(open_checkout_flow),
):
    return _flow_response(flow, await _dispatch(flow, UpdateQuantity(product_id, body.delta)))


@app.delete("/api/menu/{slug}/cart/items/{product_id}", response_model=CartResponse, tags=["Cart"])
async def remove_cart_item(
    product_id: str,
    flow: CheckoutFlow = Depends(open_checkout_flow),
):
    return _flow_response(flow, await _dispatch(flow, RemoveItem(product_id)))


# =============================================================================
# CHECKOUT ENDPOINTS
# =============================================================================

@app.post(
    "/api/menu/{slug}/checkout",
    response_model=CartResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Checkout"],
)
async def begin_checkout(flow: CheckoutFlow = Depends(open_checkout_flow)):
    """Move from cart review to the customer details step."""
    return _flow_response(flow, await _dispatch(flow, BeginCheckout()))


@app.post("/api/menu/{slug}/checkout/back", response_model=CartResponse, tags=["Checkout"])
async def checkout_back(flow: CheckoutFlow = Depends(open_checkout_flow)):
    return _flow_response(flow, await _dispatch(flow, GoBack()))


@app.post(
    "/api/menu/{slug}/checkout/submit",
    response_model=OrderSubmitResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Checkout"],
)
async def submit_order(
    body: CustomerInfoRequest,
    flow: CheckoutFlow = Depends(open_checkout_flow),
):
    """
    Validate the customer details and return the WhatsApp order link.

    On success the cart is cleared and its stored entry removed. The
    order itself is not stored anywhere.
    """
    result = await _dispatch(
        flow,
        SubmitOrder(
            customer_name=body.customer_name,
            order_type=body.order_type,
            payment_method=body.payment_method,
            address=body.address,
        )
    )
    if not result.success:
        return error_response(400, result.message, result.field)

    return OrderSubmitResponse(
        success=True,
        message=result.message,
        whatsapp_url=result.whatsapp_url,
        order_message=result.order_message,
        cart=_cart_response(flow),
    )


# =============================================================================
# AUTH ENDPOINTS
# =============================================================================

@app.post(
    "/api/auth/signup",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def sign_up(body: SignUpRequest, db: AsyncSession = Depends(get_db)):
    result = await get_auth_service().sign_up(body.email, body.password, body.name)
    if not result.success:
        return error_response(400, result.error_message or "Error de autenticación")

    await catalog.ensure_profile(db, result.user.id, body.name)
    return AuthResponse(
        success=True,
        message="¡Cuenta creada! Ingresando...",
        access_token=result.access_token,
        user_id=result.user.id,
        email=result.user.email,
    )


@app.post(
    "/api/auth/signin",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def sign_in(body: SignInRequest, db: AsyncSession = Depends(get_db)):
    result = await get_auth_service().sign_in(body.email, body.password)
    if not result.success:
        return error_response(401, result.error_message or "Error de autenticación")

    await catalog.ensure_profile(db, result.user.id, result.user.name)
    return AuthResponse(
        success=True,
        message="¡Bienvenido de vuelta!",
        access_token=result.access_token,
        user_id=result.user.id,
        email=result.user.email,
    )


@app.post("/api/auth/signout", response_model=AuthResponse, tags=["Auth"])
async def sign_out(authorization: Optional[str] = Header(None)) -> AuthResponse:
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="No autenticado")

    await get_auth_service().sign_out(token)
    return AuthResponse(success=True, message="Sesión cerrada")


@app.get("/api/admin/me", response_model=AdminContextResponse, tags=["Admin"])
async def admin_me(context: AdminContext = Depends(get_admin_context)) -> AdminContextResponse:
    return AdminContextResponse(
        user_id=context.user_id,
        email=context.email,
        company_id=context.company_id,
        company_slug=context.company_slug,
        menu_url=catalog.menu_url(settings.public_base_url, context.company_slug),
    )


# =============================================================================
# ADMIN: COMPANY
# =============================================================================

@app.get("/api/admin/company", response_model=CompanyResponse, tags=["Admin"])
async def get_company(
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    company = await catalog.get_company(db, context.require_company())
    return _company_response(company)


@app.post(
    "/api/admin/company",
    response_model=CompanyResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    tags=["Admin"],
)
async def create_company(
    body: CompanySettingsRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    """Create the company and link it to the signed-in user."""
    company = await catalog.create_company(db, context, body.name, body.slug, body.whatsapp)
    return _company_response(company)


@app.put(
    "/api/admin/company/settings",
    response_model=CompanyResponse,
    responses={409: {"model": ErrorResponse}},
    tags=["Admin"],
)
async def update_company_settings(
    body: CompanySettingsRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    company = await catalog.update_company_settings(db, context, body.name, body.slug, body.whatsapp)
    return _company_response(company)


@app.put("/api/admin/company/profile", response_model=CompanyResponse, tags=["Admin"])
async def update_company_profile(
    body: CompanyProfileUpdate,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    changes = body.model_dump(exclude_unset=True)
    company = await catalog.update_company_profile(db, context, changes)
    return _company_response(company)


@app.put(
    "/api/admin/company/logo",
    response_model=CompanyResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    tags=["Admin"],
)
async def upload_company_logo(
    request: Request,
    filename: str = Query("logo.png", max_length=200),
    content_type: Optional[str] = Header(None),
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Upload a new logo (raw image bytes as the request body).

    The object is stored as `<company_id>/logo-<millis>.<ext>` and its
    public URL saved on the company.
    """
    company_id = context.require_company()
    if not content_type or not content_type.startswith("image/"):
        return error_response(400, "El logo debe ser una imagen", field="logo")

    data = await request.body()
    if not data:
        return error_response(400, "El archivo está vacío", field="logo")

    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "png"
    path = f"{company_id}/logo-{int(time.time() * 1000)}.{extension}"

    result = await get_storage_service().upload(path, data, content_type)
    if not result.success:
        logger.error(f"Logo upload failed for {company_id}: {result.error_message}")
        return error_response(502, "Error al actualizar el perfil", field="logo")

    company = await catalog.set_company_logo(db, context, result.public_url)
    return _company_response(company)


# =============================================================================
# ADMIN: CATEGORIES
# =============================================================================

async def _category_list(db: AsyncSession, company_id: str) -> CategoryListResponse:
    categories = await catalog.list_categories(db, company_id)
    return CategoryListResponse(
        total=len(categories),
        categories=[CategoryResponse.model_validate(c) for c in categories],
    )


@app.get("/api/admin/categories", response_model=CategoryListResponse, tags=["Admin"])
async def list_categories(
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    return await _category_list(db, context.require_company())


@app.post("/api/admin/categories", response_model=CategoryListResponse, status_code=201, tags=["Admin"])
async def create_category(
    body: CategoryRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    company_id = context.require_company()
    await catalog.create_category(db, company_id, body.name, body.description)
    return await _category_list(db, company_id)


@app.put("/api/admin/categories/{category_id}", response_model=CategoryListResponse, tags=["Admin"])
async def update_category(
    category_id: str,
    body: CategoryRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    company_id = context.require_company()
    await catalog.update_category(db, company_id, category_id, body.name, body.description)
    return await _category_list(db, company_id)


@app.delete("/api/admin/categories/{category_id}", response_model=CategoryListResponse, tags=["Admin"])
async def delete_category(
    category_id: str,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    company_id = context.require_company()
    await catalog.delete_category(db, company_id, category_id)
    return await _category_list(db, company_id)


@app.post("/api/admin/categories/reorder", response_model=CategoryListResponse, tags=["Admin"])
async def reorder_categories(
    body: CategoryReorderRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    company_id = context.require_company()
    await catalog.reorder_categories(db, company_id, body.category_ids)
    return await _category_list(db, company_id)


# =============================================================================
# ADMIN: PRODUCTS
# =============================================================================

async def _product_list(db: AsyncSession, company_id: str) -> ProductListResponse:
    products = await catalog.list_products(db, company_id)
    return ProductListResponse(
        total=len(products),
        products=[
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "price": p.price,
                "image": p.image,
                "category_id": p.category_id,
                "status": p.status.value,
            }
            for p in products
        ],
    )


@app.get("/api/admin/products", response_model=ProductListResponse, tags=["Admin"])
async def list_products(
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> ProductListResponse:
    return await _product_list(db, context.require_company())


@app.post("/api/admin/products", response_model=ProductListResponse, status_code=201, tags=["Admin"])
async def create_product(
    body: ProductRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> ProductListResponse:
    company_id = context.require_company()
    await catalog.create_product(db, company_id, body.model_dump(mode="json"))
    return await _product_list(db, company_id)


@app.put("/api/admin/products/{product_id}", response_model=ProductListResponse, tags=["Admin"])
async def update_product(
    product_id: str,
    body: ProductRequest,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> ProductListResponse:
    company_id = context.require_company()
    await catalog.update_product(db, company_id, product_id, body.model_dump(mode="json"))
    return await _product_list(db, company_id)


@app.delete("/api/admin/products/{product_id}", response_model=ProductListResponse, tags=["Admin"])
async def delete_product(
    product_id: str,
    context: AdminContext = Depends(get_admin_context),
    db: AsyncSession = Depends(get_db),
) -> ProductListResponse:
    company_id = context.require_company()
    await catalog.delete_product(db, company_id, product_id)
    return await _product_list(db, company_id)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

_CATALOG_STATUS = {
    NotFoundError: 404,
    ConflictError: 409,
    CatalogValidationError: 400,
}


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status_code = _CATALOG_STATUS.get(type(exc), 400)
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return error_response(status_code, exc.message, exc.field)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}: {exc}")
    return error_response(503, "Error al comunicarse con la base de datos. Intenta de nuevo.")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "field": None,
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# ENTRY POINT
# =============================================================================

def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(
        "menudigital.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
