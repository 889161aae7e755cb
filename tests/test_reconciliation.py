"""
Tests for CartReconciler - keeping free lines in sync with the paid subtotal.
"""

import pytest

from storefront.domain.errors import DownstreamUnavailable
from storefront.repos.cart_repo import CartRepo
from storefront.services.reconciliation import CartReconciler


@pytest.fixture
def repo(db_session):
    return CartRepo(db_session)


@pytest.fixture
def reconciler(db_session, rule_service):
    return CartReconciler(db_session, rule_service)


def free_product_ids(repo, cart_id):
    return {i.product_id for i in repo.get_line_items(cart_id) if i.is_free}


class TestReconcile:

    @pytest.fixture
    def catalog(self, make_product, make_rule):
        a = make_product("300.00", name="A")
        b = make_product("50.00", name="B")
        c = make_product("80.00", name="C")
        make_rule(b, "500.00")
        make_rule(c, "1000.00")
        return a, b, c

    def test_example_scenario(self, repo, reconciler, cart, catalog):
        a, b, c = catalog
        line = repo.add_line_item(cart.id, a.id, 2)
        line_id = line.id

        result = reconciler.reconcile(cart.id)
        assert result.added == [b.id]
        assert free_product_ids(repo, cart.id) == {b.id}

        repo.remove_line_item(line_id)
        result = reconciler.reconcile(cart.id)
        assert result.removed == [b.id]
        assert repo.get_line_items(cart.id) == []

    @pytest.mark.parametrize(
        "quantity,expected",
        [(1, set()), (2, {"B"}), (3, {"B"}), (4, {"B", "C"})],
    )
    def test_free_set_matches_eligible_rules(self, repo, reconciler, cart, catalog, quantity, expected):
        a, b, c = catalog
        names = {b.id: "B", c.id: "C"}
        repo.add_line_item(cart.id, a.id, quantity)

        reconciler.reconcile(cart.id)

        assert {names[pid] for pid in free_product_ids(repo, cart.id)} == expected

    def test_converges_after_subtotal_drops(self, repo, reconciler, cart, catalog):
        a, b, c = catalog
        line = repo.add_line_item(cart.id, a.id, 4)
        line_id = line.id
        reconciler.reconcile(cart.id)
        assert free_product_ids(repo, cart.id) == {b.id, c.id}

        repo.set_line_item_quantity(line_id, 2)
        reconciler.reconcile(cart.id)
        assert free_product_ids(repo, cart.id) == {b.id}

    def test_is_idempotent(self, repo, reconciler, cart, catalog):
        a, b, _ = catalog
        repo.add_line_item(cart.id, a.id, 2)

        reconciler.reconcile(cart.id)
        second = reconciler.reconcile(cart.id)

        assert not second.changed
        free = [i for i in repo.get_line_items(cart.id) if i.is_free]
        assert len(free) == 1
        assert free[0].quantity == 1

    def test_free_lines_do_not_count_toward_subtotal(self, repo, reconciler, cart, make_product, make_rule):
        paid = make_product("400.00")
        expensive_gift = make_product("900.00")
        make_rule(expensive_gift, "0.00")
        second_gift = make_product("10.00")
        make_rule(second_gift, "1000.00")

        repo.add_line_item(cart.id, paid.id, 1)
        reconciler.reconcile(cart.id)

        assert free_product_ids(repo, cart.id) == {expensive_gift.id}

    def test_empty_paid_set_removes_all_gifts(self, repo, reconciler, cart, catalog):
        _, b, c = catalog
        #gratisy z wczesniejszego, wyzszego stanu koszyka
        repo.add_line_item(cart.id, b.id, 1, is_free=True)
        repo.add_line_item(cart.id, c.id, 1, is_free=True)

        result = reconciler.reconcile(cart.id)

        assert sorted(result.removed) == sorted([b.id, c.id])
        assert repo.get_line_items(cart.id) == []

    def test_paid_lines_with_deleted_products_count_as_empty(self, repo, reconciler, cart, catalog, db_session):
        a, b, _ = catalog
        repo.add_line_item(cart.id, a.id, 2)
        reconciler.reconcile(cart.id)

        db_session.delete(a)
        db_session.commit()
        reconciler.reconcile(cart.id)

        assert free_product_ids(repo, cart.id) == set()

    def test_rule_for_deleted_product_is_skipped(self, repo, reconciler, cart, make_product, make_rule, db_session):
        paid = make_product("600.00")
        gone = make_product("5.00")
        kept = make_product("5.00")
        make_rule(gone, "100.00")
        make_rule(kept, "100.00")
        gone_id = gone.id
        db_session.delete(gone)
        db_session.commit()

        repo.add_line_item(cart.id, paid.id, 1)
        result = reconciler.reconcile(cart.id)

        assert result.skipped == [gone_id]
        assert free_product_ids(repo, cart.id) == {kept.id}

    def test_gift_for_removed_rule_is_dropped(self, repo, reconciler, cart, catalog, db_session, rule_cache):
        a, b, _ = catalog
        repo.add_line_item(cart.id, a.id, 2)
        reconciler.reconcile(cart.id)

        from storefront.data.models import FreeProductModel
        db_session.query(FreeProductModel).filter_by(product_id=b.id).delete()
        db_session.commit()
        rule_cache.invalidate()

        reconciler.reconcile(cart.id)
        assert free_product_ids(repo, cart.id) == set()

    def test_single_rule_failure_does_not_block_others(self, reconciler, repo, cart, make_product, make_rule, monkeypatch):
        paid = make_product("1000.00")
        broken = make_product("1.00")
        fine = make_product("1.00")
        make_rule(broken, "10.00")
        make_rule(fine, "20.00")
        repo.add_line_item(cart.id, paid.id, 1)
        broken_id = broken.id

        original = reconciler.repo.add_line_item

        def flaky_add(cart_id, product_id, quantity, is_free=False):
            if product_id == broken_id:
                raise DownstreamUnavailable("boom")
            return original(cart_id, product_id, quantity, is_free)

        monkeypatch.setattr(reconciler.repo, "add_line_item", flaky_add)

        result = reconciler.reconcile(cart.id)

        assert result.skipped == [broken_id]
        assert free_product_ids(repo, cart.id) == {fine.id}

    def test_failed_add_does_not_remove_existing_gift(self, reconciler, repo, cart, catalog, monkeypatch):
        a, b, c = catalog
        repo.add_line_item(cart.id, a.id, 2)
        reconciler.reconcile(cart.id)
        assert free_product_ids(repo, cart.id) == {b.id}

        def lookup_down(product_id):
            raise DownstreamUnavailable("catalog down")

        monkeypatch.setattr(reconciler.products, "get_product", lookup_down)
        reconciler.reconcile(cart.id)

        assert free_product_ids(repo, cart.id) == {b.id}
