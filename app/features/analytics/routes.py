"""API routes for the admin analytics dashboard.

Both endpoints accept an optional ``start``/``end`` window (YYYY-MM-DD,
inclusive, defaulting to the trailing 30 days).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.features.analytics.schemas import (
    OverviewResponse,
    ProductDetail,
    ProductDetailResponse,
    ProductListResponse,
)
from app.features.analytics.service import AnalyticsService

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["analytics"])


def get_analytics_service() -> AnalyticsService:
    """Dependency providing the analytics service."""
    return AnalyticsService()


# =============================================================================
# Overview
# =============================================================================


@router.get(
    "/overview",
    response_model=OverviewResponse,
    summary="Dashboard KPIs",
    description="""
Compute the admin dashboard KPIs.

**Global (all time)**: `totalSales` (paid orders only), `totalOrders`,
`totalProducts`, `totalUsers`, `conversionRate`.

**Windowed**: `activeUsersWindow`, `salesOverTime` (paid orders per day),
`salesByCategory` and `topProducts` (top 20 by units) from paid line items.

Line items whose product cannot be resolved are reported under
"Uncategorized" / "Unknown Product" rather than dropped.

**Example**: `GET /admin/overview?start=2025-10-01&end=2025-10-30`
""",
)
async def get_overview(
    start: str | None = Query(None, description="Window start (YYYY-MM-DD). Invalid values are ignored."),
    end: str | None = Query(None, description="Window end (YYYY-MM-DD), inclusive of the whole day."),
    db: AsyncSession = Depends(get_db),
    service: AnalyticsService = Depends(get_analytics_service),
) -> OverviewResponse:
    """Compute dashboard KPIs for a window.

    Args:
        start: Optional window start.
        end: Optional window end.
        db: Database session.
        service: Analytics service.

    Returns:
        Overview envelope.

    Raises:
        DatabaseError: If any store query fails.
    """
    try:
        data = await service.get_overview(db, start=start, end=end)
    except SQLAlchemyError as e:
        logger.error(
            "analytics.overview_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to compute overview") from e

    return OverviewResponse(data=data)


# =============================================================================
# Product Insights
# =============================================================================


@router.get(
    "/product-insights",
    response_model=ProductDetailResponse | ProductListResponse,
    summary="Per-product sales insights",
    description="""
Two modes:

**Detail** (`productId` given): the product's catalog record, daily series,
totals, repeat buyers and top buyers in the window. `productId` may be a
catalog id or an exact product name. Returns 404 when neither the catalog
nor any line item in the window knows the product.

**List** (no `productId`): per-product summaries ordered by revenue, with
optional exact `category` filter and `page`/`limit` pagination.

**Examples**:
1. `GET /admin/product-insights?category=Salad&page=1&limit=10`
2. `GET /admin/product-insights?productId=12&start=2025-10-01`
""",
)
async def get_product_insights(
    start: str | None = Query(None, description="Window start (YYYY-MM-DD)."),
    end: str | None = Query(None, description="Window end (YYYY-MM-DD), inclusive."),
    category: str | None = Query(None, description="List mode: exact category filter."),
    product_id: str | None = Query(
        None,
        alias="productId",
        description="Catalog id or exact product name. Switches to detail mode.",
    ),
    page: int = Query(1, ge=1, description="List mode: page number (1-indexed)."),
    limit: int | None = Query(None, ge=1, description="List mode: page size (default 20, max 100)."),
    db: AsyncSession = Depends(get_db),
    service: AnalyticsService = Depends(get_analytics_service),
) -> ProductDetailResponse | ProductListResponse:
    """Product drill-down or ranked product list.

    Raises:
        NotFoundError: If the requested product is unknown.
        DatabaseError: If any store query fails.
    """
    try:
        result = await service.get_product_insights(
            db,
            start=start,
            end=end,
            category=category,
            product_id=product_id,
            page=page,
            limit=limit,
        )
    except SQLAlchemyError as e:
        logger.error(
            "analytics.product_insights_failed",
            product_id=product_id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise DatabaseError(message="Failed to compute product insights") from e

    if isinstance(result, ProductDetail):
        return ProductDetailResponse(data=result)
    return ProductListResponse(data=result)
