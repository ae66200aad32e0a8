"""
Product Launch Steps — the ordered units of a launch.

Every step shares one ``LaunchContext`` and either mutates it (product,
campaigns) or raises. Steps run inside the launch transaction; the two
post-commit actions at the bottom run after it has been committed.

A step that hands work to a collaborator records each accepted call on the
context. ``compensate`` undoes exactly those calls, newest first, so it is
safe on a step that failed halfway. Database writes are undone by the
transaction rollback, not by compensation.

Default order:
  1. ValidateAndPrepareProduct   - duplicate-name check, create or load
  2. SetupPricingStrategy        - base price onto the product
  3. ConfigureInventory          - per-warehouse stock records
  4. RetireCompetingProducts     - touch competitor products
  5. CreateMarketingCampaigns    - campaign ids 1..N in request order
  6. EstablishSupplierContracts  - supplier relationships
  7. SetupProductVariants        - variant records
  8. RecordLaunchAudit           - audit trail entry
  9. ConfigureReorderRules       - automated reorder thresholds
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from core.exceptions import DuplicateProductNameError, EntityNotFoundError
from db.models import Product
from db.unit_of_work import UnitOfWork
from launch.collaborators import (
    AuditTrail,
    InventoryService,
    LaunchCollaborators,
    LaunchNotifier,
    MarketingService,
    PostLaunchProcedure,
    PricingService,
    ReorderService,
    SupplierService,
    VariantService,
)
from launch.schemas import (
    CampaignResult,
    InventoryDistribution,
    LaunchRequest,
    ProductSummary,
    ProductVariant,
    SupplierContract,
    UserSummary,
)


@dataclass
class LaunchContext:
    """Mutable state threaded through one launch."""

    request: LaunchRequest
    acting_user: UserSummary
    uow: UnitOfWork
    product: Product | None = None
    product_id: int | None = None
    campaigns: list[CampaignResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)

    # Collaborator calls accepted so far, replayed in reverse on compensation
    price_schedule_applied: bool = False
    allocations: list[InventoryDistribution] = field(default_factory=list)
    contracts: list[SupplierContract] = field(default_factory=list)
    variants: list[ProductVariant] = field(default_factory=list)
    audit_recorded: bool = False
    reorder_configured: bool = False

    def require_product(self) -> Product:
        if self.product is None:
            raise RuntimeError("No product prepared for this launch")
        return self.product


class LaunchStep(ABC):
    """One unit of the launch sequence."""

    name: str = "step"

    @abstractmethod
    async def execute(self, ctx: LaunchContext) -> None:
        ...

    async def compensate(self, ctx: LaunchContext) -> None:
        """Undo side effects the transaction rollback cannot reach. No-op by default."""
        return None


# ── Pre-commit steps ──────────────────────────────────────────────────────


class ValidateAndPrepareProduct(LaunchStep):
    name = "validate_and_prepare_product"

    async def execute(self, ctx: LaunchContext) -> None:
        request = ctx.request
        products = ctx.uow.products

        existing = await products.get_all()
        if any(p.name == request.product_name and p.id != request.product_id for p in existing):
            raise DuplicateProductNameError(request.product_name)

        if request.product_id > 0:
            product = await products.get_by_id(request.product_id)
            if product is None:
                raise EntityNotFoundError("Product", request.product_id)
            product.name = request.product_name
            product.description = request.description
            product.category = request.category
            await products.update(product)
        else:
            if not await ctx.uow.users.exists(request.user_id):
                raise EntityNotFoundError("User", request.user_id)
            product = await products.add(
                Product(
                    name=request.product_name,
                    description=request.description,
                    category=request.category,
                    price=request.base_price,
                    stock_quantity=0,
                    status="draft",
                    is_available=True,
                    user_id=request.user_id,
                    created_at=datetime.utcnow(),
                    created_by=ctx.acting_user.email,
                )
            )

        ctx.product = product
        ctx.product_id = product.id


class SetupPricingStrategy(LaunchStep):
    """
    Apply the strategy's base price to the product.

    Tiered and promotional prices are handed to the pricing service as-is;
    the catalog only stores the base price.
    """

    name = "setup_pricing_strategy"

    def __init__(self, pricing: PricingService):
        self.pricing = pricing

    async def execute(self, ctx: LaunchContext) -> None:
        strategy = ctx.request.pricing_strategy
        product_id = ctx.require_product().id

        product = await ctx.uow.products.get_by_id(product_id)
        if product is not None:
            product.price = strategy.base_price
            product.touch()
            await ctx.uow.products.update(product)

        await self.pricing.apply_price_schedule(product_id, strategy)
        ctx.price_schedule_applied = True

    async def compensate(self, ctx: LaunchContext) -> None:
        if ctx.price_schedule_applied:
            await self.pricing.clear_price_schedule(ctx.product_id)
            ctx.price_schedule_applied = False


def validate_distribution(distribution: InventoryDistribution) -> None:
    if distribution.warehouse_id <= 0:
        raise ValueError(f"Invalid warehouse ID: {distribution.warehouse_id}")
    if distribution.minimum_stock < 0 or distribution.minimum_stock > distribution.maximum_stock:
        raise ValueError(
            f"Invalid stock bounds for warehouse {distribution.warehouse_id}: "
            f"min={distribution.minimum_stock}, max={distribution.maximum_stock}"
        )
    if distribution.initial_quantity < 0 or distribution.initial_quantity > distribution.maximum_stock:
        raise ValueError(
            f"Initial quantity {distribution.initial_quantity} out of range "
            f"for warehouse {distribution.warehouse_id} (max={distribution.maximum_stock})"
        )


class ConfigureInventory(LaunchStep):
    name = "configure_inventory"

    def __init__(self, inventory: InventoryService):
        self.inventory = inventory

    async def execute(self, ctx: LaunchContext) -> None:
        product_id = ctx.require_product().id
        for distribution in ctx.request.inventory_distribution:
            validate_distribution(distribution)
            await self.inventory.allocate(product_id, distribution)
            ctx.allocations.append(distribution)

    async def compensate(self, ctx: LaunchContext) -> None:
        while ctx.allocations:
            await self.inventory.release(ctx.product_id, ctx.allocations[-1])
            ctx.allocations.pop()


class RetireCompetingProducts(LaunchStep):
    """Touch every competing product that exists. Unknown ids are ignored."""

    name = "retire_competing_products"

    async def execute(self, ctx: LaunchContext) -> None:
        for competitor_id in ctx.request.competing_product_ids:
            competitor = await ctx.uow.products.get_by_id(competitor_id)
            if competitor is not None:
                competitor.touch()
                await ctx.uow.products.update(competitor)


class CreateMarketingCampaigns(LaunchStep):
    name = "create_marketing_campaigns"

    def __init__(self, marketing: MarketingService):
        self.marketing = marketing

    async def execute(self, ctx: LaunchContext) -> None:
        product_id = ctx.require_product().id
        for campaign in ctx.request.marketing_campaigns:
            result = CampaignResult(
                id=len(ctx.campaigns) + 1,
                name=campaign.name,
                product_id=product_id,
                budget=campaign.budget,
                start_date=campaign.start_date,
                end_date=campaign.end_date,
            )
            await self.marketing.register_campaign(result)
            ctx.campaigns.append(result)

    async def compensate(self, ctx: LaunchContext) -> None:
        while ctx.campaigns:
            await self.marketing.cancel_campaign(ctx.campaigns[-1])
            ctx.campaigns.pop()


class EstablishSupplierContracts(LaunchStep):
    name = "establish_supplier_contracts"

    def __init__(self, suppliers: SupplierService):
        self.suppliers = suppliers

    async def execute(self, ctx: LaunchContext) -> None:
        product_id = ctx.require_product().id
        for contract in ctx.request.supplier_contracts:
            if contract.supplier_id <= 0:
                raise ValueError(f"Invalid supplier ID: {contract.supplier_id}")
            await self.suppliers.register_contract(product_id, contract)
            ctx.contracts.append(contract)

    async def compensate(self, ctx: LaunchContext) -> None:
        while ctx.contracts:
            await self.suppliers.revoke_contract(ctx.product_id, ctx.contracts[-1])
            ctx.contracts.pop()


class SetupProductVariants(LaunchStep):
    name = "setup_product_variants"

    def __init__(self, variants: VariantService):
        self.variants = variants

    async def execute(self, ctx: LaunchContext) -> None:
        product_id = ctx.require_product().id
        for variant in ctx.request.product_variants:
            await self.variants.register_variant(product_id, variant)
            ctx.variants.append(variant)

    async def compensate(self, ctx: LaunchContext) -> None:
        while ctx.variants:
            await self.variants.remove_variant(ctx.product_id, ctx.variants[-1])
            ctx.variants.pop()


class RecordLaunchAudit(LaunchStep):
    name = "record_launch_audit"

    def __init__(self, audit: AuditTrail):
        self.audit = audit

    async def execute(self, ctx: LaunchContext) -> None:
        product = ProductSummary.model_validate(ctx.require_product())
        await self.audit.record_launch(product, list(ctx.campaigns), ctx.acting_user)
        ctx.audit_recorded = True

    async def compensate(self, ctx: LaunchContext) -> None:
        if ctx.audit_recorded:
            await self.audit.record_rollback(ctx.product_id, ctx.acting_user)
            ctx.audit_recorded = False


class ConfigureReorderRules(LaunchStep):
    name = "configure_reorder_rules"

    def __init__(self, reorder: ReorderService):
        self.reorder = reorder

    async def execute(self, ctx: LaunchContext) -> None:
        await self.reorder.configure(ctx.require_product().id, ctx.request.reorder_settings)
        ctx.reorder_configured = True

    async def compensate(self, ctx: LaunchContext) -> None:
        if ctx.reorder_configured:
            await self.reorder.disable(ctx.product_id)
            ctx.reorder_configured = False


def default_launch_steps(collaborators: LaunchCollaborators) -> list[LaunchStep]:
    return [
        ValidateAndPrepareProduct(),
        SetupPricingStrategy(collaborators.pricing),
        ConfigureInventory(collaborators.inventory),
        RetireCompetingProducts(),
        CreateMarketingCampaigns(collaborators.marketing),
        EstablishSupplierContracts(collaborators.suppliers),
        SetupProductVariants(collaborators.variants),
        RecordLaunchAudit(collaborators.audit),
        ConfigureReorderRules(collaborators.reorder),
    ]


# ── Post-commit actions ───────────────────────────────────────────────────


class PostCommitAction(ABC):
    """Best-effort side effect run after the launch transaction is committed."""

    name: str = "post_commit_action"

    @abstractmethod
    async def run(self, product: ProductSummary, campaigns: list[CampaignResult]) -> None:
        ...


class RunPostLaunchProcedure(PostCommitAction):
    name = "post_launch_procedure"

    def __init__(self, procedure: PostLaunchProcedure):
        self.procedure = procedure

    async def run(self, product: ProductSummary, campaigns: list[CampaignResult]) -> None:
        await self.procedure.run(product)


class DispatchLaunchNotification(PostCommitAction):
    name = "launch_notification"

    def __init__(self, notifier: LaunchNotifier):
        self.notifier = notifier

    async def run(self, product: ProductSummary, campaigns: list[CampaignResult]) -> None:
        await self.notifier.notify(product, campaigns)


def default_post_commit_actions(collaborators: LaunchCollaborators) -> list[PostCommitAction]:
    return [
        RunPostLaunchProcedure(collaborators.post_launch),
        DispatchLaunchNotification(collaborators.notifier),
    ]
