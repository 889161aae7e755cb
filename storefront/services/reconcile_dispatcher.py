# storefront/services/reconcile_dispatcher.py
from kombu.exceptions import OperationalError as BrokerUnavailable

from storefront.tasks.reconcile import reconcile_carts_task
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ReconcileDispatcher:
    """
    Planuje przeliczenie gratisow w koszykach przez Celery.
    Broker niedostepny nie psuje requestu - koszyki naprawia odczyt albo sweep z beat.
    """

    @staticmethod
    def schedule_sweep(cart_ids: list[int] | None = None) -> bool:
        try:
            reconcile_carts_task.delay(cart_ids)
        except BrokerUnavailable as e:
            logger.warning(f"Nie udalo sie zaplanowac rekoncyliacji koszykow: {e}")
            return False

        logger.info(f"Zaplanowano rekoncyliacje koszykow ({'wszystkie' if cart_ids is None else cart_ids})")
        return True
