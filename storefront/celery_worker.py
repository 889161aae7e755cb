# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    RECONCILE_SWEEP_SECONDS,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski importowane explicite, zeby worker je zarejestrowal
celery_app.conf.imports = (
    "storefront.tasks.reconcile",
)

# sweep: naprawia gratisy w koszykach, ktorych nikt nie ruszal od zmiany regul
celery_app.conf.beat_schedule = {
    "reconcile-carts-sweep": {
        "task": "storefront.tasks.reconcile.reconcile_carts_task",
        "schedule": RECONCILE_SWEEP_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
