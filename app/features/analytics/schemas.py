"""Pydantic schemas for the admin analytics endpoints.

All payloads serialize with camelCase keys and are wrapped in the
``{success, data}`` envelope shared by the rest of the API.
"""

from pydantic import Field

from app.shared.schemas import CamelModel

# =============================================================================
# Shared Pieces
# =============================================================================


class DateRange(CamelModel):
    """Resolved analysis window, as calendar days (UTC)."""

    start: str | None = Field(None, description="First day of the window (YYYY-MM-DD).")
    end: str | None = Field(None, description="Last day of the window (YYYY-MM-DD).")


# =============================================================================
# Overview Schemas
# =============================================================================


class DailySales(CamelModel):
    """Paid order totals for one calendar day."""

    date: str = Field(..., description="Calendar day (YYYY-MM-DD).")
    total: float = Field(..., description="Sum of order amounts for the day.")
    orders: int = Field(..., ge=0, description="Number of paid orders placed that day.")


class CategorySales(CamelModel):
    """Line-item revenue and volume for one menu category."""

    name: str = Field(..., description="Category name; 'Uncategorized' when unknown.")
    revenue: float = Field(..., description="Sum of qty x price over the category's line items.")
    qty: int | float = Field(..., description="Units sold in the category.")


class TopProduct(CamelModel):
    """Best seller entry, keyed by product name."""

    name: str = Field(..., description="Product name; 'Unknown Product' when unresolvable.")
    qty: int | float = Field(..., description="Units sold in the window.")
    revenue: float = Field(..., description="Sum of qty x price in the window.")


class OverviewData(CamelModel):
    """Dashboard KPIs.

    Totals are global (all time); the active-user count, daily series and
    breakdowns are restricted to the requested window.
    """

    total_sales: float = Field(..., description="Sum of amount over all paid orders (all time).")
    total_orders: int = Field(..., ge=0, description="Count of all orders, paid or not.")
    total_products: int = Field(..., ge=0, description="Count of catalog entries.")
    total_users: int = Field(..., ge=0, description="Count of registered users.")
    active_users_window: int = Field(
        ...,
        ge=0,
        description="Distinct buyers with at least one order in the window, any payment status.",
    )
    sales_over_time: list[DailySales] = Field(
        default_factory=list,
        description="Paid sales per day in the window, oldest first.",
    )
    sales_by_category: list[CategorySales] = Field(
        default_factory=list,
        description="Line-item revenue per category in the window, in first-seen order.",
    )
    top_products: list[TopProduct] = Field(
        default_factory=list,
        description="Best sellers in the window by units sold, highest first.",
    )
    conversion_rate: float = Field(
        ...,
        ge=0,
        description="totalOrders / totalUsers x 100, rounded to 2 decimals. "
        "A heuristic, not a probability: it exceeds 100 when users order more than once.",
    )
    range: DateRange


class OverviewResponse(CamelModel):
    """Envelope for GET /admin/overview."""

    success: bool = True
    data: OverviewData


# =============================================================================
# Product Insights: Detail Mode
# =============================================================================


class ProductInfo(CamelModel):
    """Catalog record of the inspected product.

    ``id`` is null when the product was only found through line-item names.
    """

    id: int | None = None
    name: str
    category: str | None = None
    price: float | None = None
    stock: int | None = Field(None, description="Units in stock, when the catalog tracks it.")


class ProductDailySales(CamelModel):
    """One product's line-item sales for one day."""

    date: str = Field(..., description="Calendar day (YYYY-MM-DD).")
    qty: int | float = 0
    revenue: float = 0.0
    orders: int = Field(0, ge=0, description="Line items for the product that day.")


class ProductTotals(CamelModel):
    """Window totals for one product, folded from its daily series."""

    qty: int | float = 0
    revenue: float = 0.0
    orders: int = 0


class BuyerActivity(CamelModel):
    """Purchases of one product by one buyer in the window."""

    user_id: str
    qty: int | float
    orders: int = Field(..., ge=1, description="Distinct orders containing the product.")


class ProductDetail(CamelModel):
    """Single-product drill-down."""

    product: ProductInfo
    totals: ProductTotals
    sales_over_time: list[ProductDailySales] = Field(default_factory=list)
    repeat_buyers: int = Field(
        0,
        ge=0,
        description="Buyers with more than one order containing the product in the window.",
    )
    top_buyers: list[BuyerActivity] = Field(
        default_factory=list,
        description="Up to 10 buyers with the most units, for further drill-down.",
    )
    range: DateRange


class ProductDetailResponse(CamelModel):
    """Envelope for GET /admin/product-insights?productId=..."""

    success: bool = True
    data: ProductDetail


# =============================================================================
# Product Insights: List Mode
# =============================================================================


class ProductSummary(CamelModel):
    """Sales summary for one product in the window."""

    product_id: str | None = Field(
        None,
        description="Catalog id when resolved, else the raw line-item reference or name.",
    )
    name: str
    category: str
    qty: int | float
    revenue: float
    orders: int = Field(..., ge=0, description="Line items contributing to this product.")
    avg_price: float = Field(..., description="Mean per-item price, rounded to 2 decimals.")
    buyers_count: int = Field(..., ge=0, description="Distinct buyers of this product.")
    stock: int | None = Field(None, description="Current stock; null when unknown.")


class PageInfo(CamelModel):
    """Pagination applied to the product list."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)


class ProductInsightsPage(CamelModel):
    """One page of product summaries ordered by revenue."""

    products: list[ProductSummary] = Field(default_factory=list)
    pagination: PageInfo
    total_products_count: int = Field(..., ge=0, description="Catalog size (all time).")
    range: DateRange


class ProductListResponse(CamelModel):
    """Envelope for GET /admin/product-insights without productId."""

    success: bool = True
    data: ProductInsightsPage
