# storefront/tasks/reconcile.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.data.gateway import DataGateway
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderOrchestrator
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def reconcile_orders(orchestrator: OrderOrchestrator) -> list[int]:
    orphaned = orchestrator.find_orders_missing_items()

    if orphaned:
        logger.warning(f"Found {len(orphaned)} orders without items: {orphaned}")
    else:
        logger.info("All orders have items")

    return orphaned


@celery_app.task(name="storefront.tasks.reconcile.reconcile_orders_task")
def reconcile_orders_task():
    logger.info("Reconcile orders task started")

    db = SessionLocal()
    try:
        gateway = DataGateway(db)
        orchestrator = OrderOrchestrator(gateway, CartService(gateway, LockService()))
        return reconcile_orders(orchestrator)
    finally:
        db.close()
