"""
Tests for the Redis rule cache (Redis client replaced by an in-memory fake).
"""

from decimal import Decimal

from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.domain.promotions import FreeGiftRule
from storefront.services.rule_cache import RuleCache


class FakeRedis:
    def __init__(self, down=False):
        self.store = {}
        self.ttl = {}
        self.down = down

    def _check(self):
        if self.down:
            raise RedisConnectionError("redis down")

    def get(self, name):
        self._check()
        return self.store.get(name)

    def set(self, name, value, ex=None):
        self._check()
        self.store[name] = value
        self.ttl[name] = ex

    def delete(self, name):
        self._check()
        self.store.pop(name, None)


def make_cache(down=False):
    cache = RuleCache(url="redis://localhost:6379/0", ttl=60)
    cache.redis = FakeRedis(down=down)
    return cache


RULES = [
    FreeGiftRule(id=1, product_id=10, min_order_value=Decimal("500.00")),
    FreeGiftRule(id=2, product_id=20, min_order_value=Decimal("999.99")),
]


class TestRuleCache:

    def test_miss(self):
        assert make_cache().get_rules() is None

    def test_stores_rules_with_ttl(self):
        cache = make_cache()
        cache.set_rules(RULES)

        assert cache.get_rules() == RULES
        assert cache.redis.ttl[RuleCache.KEY] == 60

    def test_empty_rule_set_is_cached(self):
        cache = make_cache()
        cache.set_rules([])
        assert cache.get_rules() == []

    def test_invalidate(self):
        cache = make_cache()
        cache.set_rules(RULES)
        cache.invalidate()
        assert cache.get_rules() is None

    def test_redis_down_falls_back(self):
        cache = make_cache(down=True)

        cache.set_rules(RULES)
        cache.invalidate()
        assert cache.get_rules() is None


class TestRuleServiceCaching:

    def test_second_read_comes_from_cache(self, rule_service, rule_cache, make_product, make_rule, db_session):
        make_rule(make_product(), "100.00")

        first = rule_service.list_rules()
        assert rule_cache.rules == first

        from storefront.data.models import FreeProductModel
        db_session.query(FreeProductModel).delete()
        db_session.commit()

        #bez invalidacji cache dalej zwraca stara liste
        assert rule_service.list_rules() == first
