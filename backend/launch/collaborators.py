"""
Launch Collaborators — the subsystems a product launch hands work to.

Each launch step talks to exactly one collaborator. The in-process
implementations below record what they were asked to do through structured
logs; a deployment that owns a real inventory, marketing or supplier system
swaps in its own implementation without touching the workflow.

Pre-commit collaborators run inside the launch transaction and each has an
undo call the matching step uses to compensate a rolled-back launch. Post-commit
collaborators (``PostLaunchProcedure``, ``LaunchNotifier``) run after the
commit and must not use the launch's database session.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx
import structlog

from core.config import get_settings
from launch.schemas import (
    CampaignResult,
    InventoryDistribution,
    PricingStrategy,
    ProductSummary,
    ProductVariant,
    ReorderSettings,
    SupplierContract,
    UserSummary,
)

logger = structlog.get_logger()


# ── Pre-commit collaborators ──────────────────────────────────────────────


class PricingService(ABC):
    @abstractmethod
    async def apply_price_schedule(self, product_id: int, strategy: PricingStrategy) -> None:
        """Register tiered and promotional prices for the product."""
        ...

    @abstractmethod
    async def clear_price_schedule(self, product_id: int) -> None:
        ...


class InventoryService(ABC):
    @abstractmethod
    async def allocate(self, product_id: int, distribution: InventoryDistribution) -> None:
        """Create the stock record for one warehouse."""
        ...

    @abstractmethod
    async def release(self, product_id: int, distribution: InventoryDistribution) -> None:
        """Remove the stock record created by allocate."""
        ...


class MarketingService(ABC):
    @abstractmethod
    async def register_campaign(self, campaign: CampaignResult) -> None:
        ...

    @abstractmethod
    async def cancel_campaign(self, campaign: CampaignResult) -> None:
        ...


class SupplierService(ABC):
    @abstractmethod
    async def register_contract(self, product_id: int, contract: SupplierContract) -> None:
        ...

    @abstractmethod
    async def revoke_contract(self, product_id: int, contract: SupplierContract) -> None:
        ...


class VariantService(ABC):
    @abstractmethod
    async def register_variant(self, product_id: int, variant: ProductVariant) -> None:
        ...

    @abstractmethod
    async def remove_variant(self, product_id: int, variant: ProductVariant) -> None:
        ...


class AuditTrail(ABC):
    @abstractmethod
    async def record_launch(
        self,
        product: ProductSummary,
        campaigns: list[CampaignResult],
        acting_user: UserSummary,
    ) -> None:
        ...

    @abstractmethod
    async def record_rollback(self, product_id: int, acting_user: UserSummary) -> None:
        """Append an entry that cancels a launch recorded earlier in the same transaction."""
        ...


class ReorderService(ABC):
    @abstractmethod
    async def configure(self, product_id: int, settings: ReorderSettings) -> None:
        ...

    @abstractmethod
    async def disable(self, product_id: int) -> None:
        ...


class LoggingPricingService(PricingService):
    async def apply_price_schedule(self, product_id: int, strategy: PricingStrategy) -> None:
        logger.info(
            "pricing.schedule_received",
            product_id=product_id,
            currency=strategy.currency,
            tiers=len(strategy.tiered_prices),
            promotions=len(strategy.promotional_prices),
        )

    async def clear_price_schedule(self, product_id: int) -> None:
        logger.info("pricing.schedule_cleared", product_id=product_id)


class LoggingInventoryService(InventoryService):
    async def allocate(self, product_id: int, distribution: InventoryDistribution) -> None:
        logger.info(
            "inventory.allocated",
            product_id=product_id,
            warehouse_id=distribution.warehouse_id,
            initial_quantity=distribution.initial_quantity,
            minimum_stock=distribution.minimum_stock,
            maximum_stock=distribution.maximum_stock,
        )

    async def release(self, product_id: int, distribution: InventoryDistribution) -> None:
        logger.info("inventory.released", product_id=product_id, warehouse_id=distribution.warehouse_id)


class LoggingMarketingService(MarketingService):
    async def register_campaign(self, campaign: CampaignResult) -> None:
        logger.info(
            "marketing.campaign_registered",
            campaign_id=campaign.id,
            product_id=campaign.product_id,
            name=campaign.name,
            budget=str(campaign.budget),
        )

    async def cancel_campaign(self, campaign: CampaignResult) -> None:
        logger.info("marketing.campaign_cancelled", campaign_id=campaign.id, product_id=campaign.product_id)


class LoggingSupplierService(SupplierService):
    async def register_contract(self, product_id: int, contract: SupplierContract) -> None:
        logger.info(
            "supplier.contract_registered",
            product_id=product_id,
            supplier_id=contract.supplier_id,
            contract_type=contract.contract_type,
            is_preferred=contract.is_preferred,
        )

    async def revoke_contract(self, product_id: int, contract: SupplierContract) -> None:
        logger.info("supplier.contract_revoked", product_id=product_id, supplier_id=contract.supplier_id)


class LoggingVariantService(VariantService):
    async def register_variant(self, product_id: int, variant: ProductVariant) -> None:
        logger.info(
            "variant.registered",
            product_id=product_id,
            sku=variant.sku,
            attributes=sorted(variant.attributes),
        )

    async def remove_variant(self, product_id: int, variant: ProductVariant) -> None:
        logger.info("variant.removed", product_id=product_id, sku=variant.sku)


class LoggingAuditTrail(AuditTrail):
    async def record_launch(
        self,
        product: ProductSummary,
        campaigns: list[CampaignResult],
        acting_user: UserSummary,
    ) -> None:
        logger.info(
            "audit.product_launch",
            product_id=product.id,
            product_name=product.name,
            campaign_ids=[c.id for c in campaigns],
            acting_user_id=acting_user.id,
            acting_user_email=acting_user.email,
        )

    async def record_rollback(self, product_id: int, acting_user: UserSummary) -> None:
        logger.info("audit.product_launch_rolled_back", product_id=product_id, acting_user_id=acting_user.id)


class LoggingReorderService(ReorderService):
    async def configure(self, product_id: int, settings: ReorderSettings) -> None:
        logger.info(
            "reorder.configured",
            product_id=product_id,
            enabled=settings.enable_auto_reorder,
            reorder_point=settings.reorder_point,
            reorder_quantity=settings.reorder_quantity,
            check_frequency_hours=settings.check_frequency_hours,
        )

    async def disable(self, product_id: int) -> None:
        logger.info("reorder.disabled", product_id=product_id)


# ── Post-commit collaborators ─────────────────────────────────────────────


class PostLaunchProcedure(ABC):
    @abstractmethod
    async def run(self, product: ProductSummary) -> None:
        ...


class LaunchNotifier(ABC):
    @abstractmethod
    async def notify(self, product: ProductSummary, campaigns: list[CampaignResult]) -> None:
        ...


class LoggingPostLaunchProcedure(PostLaunchProcedure):
    async def run(self, product: ProductSummary) -> None:
        logger.info("post_launch.procedure_executed", product_id=product.id)


class WebhookLaunchNotifier(LaunchNotifier):
    """
    POST a launch announcement to the configured webhook.

    With no webhook configured the announcement is only logged. Delivery is
    attempted once; failures surface as exceptions for the caller to isolate.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.webhook_url = webhook_url if webhook_url is not None else settings.launch_notification_webhook_url
        self.timeout_seconds = timeout_seconds or settings.launch_notification_timeout_seconds
        self._transport = transport

    async def notify(self, product: ProductSummary, campaigns: list[CampaignResult]) -> None:
        payload = {
            "event": "product.launched",
            "product": product.model_dump(mode="json"),
            "campaign_ids": [c.id for c in campaigns],
        }
        if not self.webhook_url:
            logger.info("launch_notification.skipped", product_id=product.id, reason="no_webhook_configured")
            return

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        logger.info("launch_notification.sent", product_id=product.id, status_code=response.status_code)


@dataclass
class LaunchCollaborators:
    """Bundle of collaborators used to build the default step sequence."""

    pricing: PricingService = field(default_factory=LoggingPricingService)
    inventory: InventoryService = field(default_factory=LoggingInventoryService)
    marketing: MarketingService = field(default_factory=LoggingMarketingService)
    suppliers: SupplierService = field(default_factory=LoggingSupplierService)
    variants: VariantService = field(default_factory=LoggingVariantService)
    audit: AuditTrail = field(default_factory=LoggingAuditTrail)
    reorder: ReorderService = field(default_factory=LoggingReorderService)
    post_launch: PostLaunchProcedure = field(default_factory=LoggingPostLaunchProcedure)
    notifier: LaunchNotifier = field(default_factory=WebhookLaunchNotifier)
