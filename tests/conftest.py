import pytest
import sqlalchemy

import storefront.model as model
from storefront.configure import Options
from storefront.registry import HandleRegistry


@pytest.fixture
def engine():
    engine = sqlalchemy.create_engine('sqlite://')
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = model.initialize(engine, create=True)
    yield session
    session.remove()


@pytest.fixture
def cache(session):
    return model.Cache(session)


@pytest.fixture
def registry(cache):
    return HandleRegistry(cache)


@pytest.fixture
def options():
    return Options()


def record(node_type, id, **values):
    values.update(internal={'type': node_type}, id=id)
    return values


@pytest.fixture
def records():
    return [
        record('ShopifyArticle', 'A1', url='https://shop.example.com/blogs/news/first-post',
               title='First post', blog={'id': 'B1'}),
        record('ShopifyProduct', 'P1', handle='mug', title='Mug', tags=['kitchen'],
               images=[{'src': 'mug.jpg'}, {'src': 'mug-2.jpg'}]),
        record('ShopifyProduct', 'P2', handle='shirt', title='Shirt', tags=['apparel'], images=[]),
        record('ShopifyCollection', 'C1', handle='kitchen', title='Kitchen',
               products=[{'id': 'P1'}]),
        record('ShopifyShopPolicy', 'S1', type='refund-policy', title='Refund policy'),
        record('ShopifyPage', 'G1', handle='about', title='About'),
        record('ShopifyBlog', 'B1', url='https://shop.example.com/blogs/news', title='News'),
        record('ShopifyArticle', 'A2', url='https://shop.example.com/blogs/news/second-post',
               title='Second post', blog={'id': 'B1'}),
        record('ShopifyArticle', 'A3', url='https://shop.example.com/blogs/gone/orphan',
               title='Orphan', blog={'id': 'B404'}),
        record('ShopifyCheckout', 'X1'),
    ]
