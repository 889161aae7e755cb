from storefront.data.models import BannerModel, FreeProductModel, ProductModel
from storefront.data.seed import BANNERS, FREE_RULES, PRODUCTS, seed


def test_seed_fills_empty_database_once(db_session):
    seed()
    seed()

    assert db_session.query(ProductModel).count() == len(PRODUCTS)
    assert db_session.query(FreeProductModel).count() == len(FREE_RULES)
    assert db_session.query(BannerModel).count() == len(BANNERS)
