"""
Product Launch Schemas — request payload, result envelope and summaries.

The launch request is frozen once built: the workflow reads it, never
rewrites it. Warehouse and supplier ids are range-checked by the workflow
steps, not here: a bad entry fails the launch, not the request parse.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from core.config import get_settings

# ─── Request ────────────────────────────────────────────────────────────────


class TieredPrice(BaseModel):
    price: Decimal
    min_quantity: int
    max_quantity: int | None = None

    model_config = {"frozen": True}


class PromotionalPrice(BaseModel):
    price: Decimal
    discount_percentage: Decimal | None = None
    start_date: datetime
    end_date: datetime

    model_config = {"frozen": True}


class PricingStrategy(BaseModel):
    base_price: Decimal = Decimal("0")
    currency: str = Field(default_factory=lambda: get_settings().launch_default_currency)
    tiered_prices: list[TieredPrice] = Field(default_factory=list)
    promotional_prices: list[PromotionalPrice] = Field(default_factory=list)

    model_config = {"frozen": True}


class InventoryDistribution(BaseModel):
    warehouse_id: int
    initial_quantity: int = 0
    minimum_stock: int = 0
    maximum_stock: int = 0

    model_config = {"frozen": True}


class CampaignChannel(BaseModel):
    channel: str = ""
    budget: Decimal = Decimal("0")
    content: str = ""

    model_config = {"frozen": True}


class MarketingCampaign(BaseModel):
    name: str = ""
    type: str = ""
    budget: Decimal = Decimal("0")
    start_date: datetime
    end_date: datetime
    target_audience: str = ""
    channels: list[CampaignChannel] = Field(default_factory=list)

    model_config = {"frozen": True}


class SupplierContract(BaseModel):
    supplier_id: int
    contract_type: str = ""
    unit_cost: Decimal = Decimal("0")
    minimum_order_quantity: int = 0
    lead_time_days: int = 0
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_preferred: bool = False

    model_config = {"frozen": True}


class ProductVariant(BaseModel):
    name: str = ""
    sku: str = ""
    price_modifier: Decimal = Decimal("0")
    attributes: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}


class ReorderSettings(BaseModel):
    enable_auto_reorder: bool = False
    reorder_point: int = 0
    reorder_quantity: int = 0
    max_stock: int = 0
    check_frequency_hours: int = 0
    preferred_supplier_id: int | None = None

    model_config = {"frozen": True}


class LaunchRequest(BaseModel):
    """Everything needed to launch a product. ``product_id == 0`` creates a new product."""

    product_id: int = Field(0, ge=0)
    product_name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=1000)
    category: str = Field("", max_length=100)
    base_price: Decimal = Decimal("0")
    user_id: int
    launch_date: datetime
    pricing_strategy: PricingStrategy = Field(default_factory=PricingStrategy)
    inventory_distribution: list[InventoryDistribution] = Field(default_factory=list)
    competing_product_ids: list[int] = Field(default_factory=list)
    marketing_campaigns: list[MarketingCampaign] = Field(default_factory=list)
    supplier_contracts: list[SupplierContract] = Field(default_factory=list)
    product_variants: list[ProductVariant] = Field(default_factory=list)
    reorder_settings: ReorderSettings = Field(default_factory=ReorderSettings)

    model_config = {"frozen": True}


# ─── Summaries ──────────────────────────────────────────────────────────────


class UserSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str = "user"
    is_active: bool = True

    model_config = {"from_attributes": True}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ProductSummary(BaseModel):
    id: int
    name: str
    description: str | None
    price: Decimal
    stock_quantity: int
    category: str | None
    status: str
    is_available: bool
    in_stock: bool
    user_id: int
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class CampaignResult(BaseModel):
    id: int
    name: str
    product_id: int
    budget: Decimal
    start_date: datetime
    end_date: datetime


# ─── Result ─────────────────────────────────────────────────────────────────


class LaunchResult(BaseModel):
    """Outcome of one launch. Carries a product or an error message, never both."""

    success: bool
    product: ProductSummary | None = None
    campaign_ids: list[int] = Field(default_factory=list)
    launch_date: datetime | None = None
    error_message: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _product_xor_error(self) -> "LaunchResult":
        if self.product is not None and self.error_message is not None:
            raise ValueError("A launch result cannot carry both a product and an error message")
        if self.success and self.product is None:
            raise ValueError("A successful launch result must carry the launched product")
        if not self.success and not self.error_message:
            raise ValueError("A failed launch result must carry an error message")
        return self

    @classmethod
    def succeeded(
        cls,
        product: ProductSummary,
        campaign_ids: list[int],
        launch_date: datetime,
    ) -> "LaunchResult":
        return cls(success=True, product=product, campaign_ids=campaign_ids, launch_date=launch_date)

    @classmethod
    def failed(cls, message: str) -> "LaunchResult":
        return cls(success=False, error_message=message)
