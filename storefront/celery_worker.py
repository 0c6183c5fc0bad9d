# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "storefront.tasks.reconcile",
    "storefront.services.email_service",
)

# zamowienia bez pozycji (checkout przerwany w polowie)
celery_app.conf.beat_schedule = {
    "reconcile-orders-every-5-minutes": {
        "task": "storefront.tasks.reconcile.reconcile_orders_task",
        "schedule": 300.0,
    },
}

celery_app.conf.timezone = "UTC"
