import json
from decimal import Decimal
from typing import List

import redis
from redis.exceptions import RedisError

from storefront.domain.promotions import FreeGiftRule
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, RULE_CACHE_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class RuleCache:
    """
    -cache listy regul gratisow w redisie (jeden klucz, JSON, TTL)
    -invalidacja po kazdej zmianie reguly
    -redis niedostepny => None, serwis czyta z bazy
    """

    KEY = "promotions:free_product_rules"

    def __init__(self, url: str | None = None, ttl: int = RULE_CACHE_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @redis_retry()
    def _read(self) -> str | None:
        return self.redis.get(self.KEY)

    @redis_retry()
    def _write(self, payload: str) -> None:
        #SET promotions:free_product_rules "[...]" EX 300
        self.redis.set(name=self.KEY, value=payload, ex=self.ttl)

    @redis_retry()
    def _delete(self) -> None:
        self.redis.delete(self.KEY)

    def get_rules(self) -> List[FreeGiftRule] | None:
        try:
            raw = self._read()
        except RedisError as e:
            logger.warning(f"RuleCache read failed, fallback do bazy: {e}")
            return None

        if raw is None:
            return None

        return [
            FreeGiftRule(
                id=d["id"],
                product_id=d["product_id"],
                min_order_value=Decimal(d["min_order_value"]),
            )
            for d in json.loads(raw)
        ]

    def set_rules(self, rules: List[FreeGiftRule]) -> None:
        payload = json.dumps(
            [
                {"id": r.id, "product_id": r.product_id, "min_order_value": str(r.min_order_value)}
                for r in rules
            ]
        )
        try:
            self._write(payload)
        except RedisError as e:
            logger.warning(f"RuleCache write failed: {e}")

    def invalidate(self) -> None:
        logger.info(f"Invalidate {self.KEY}")
        try:
            self._delete()
        except RedisError as e:
            logger.warning(f"RuleCache invalidate failed: {e}")
