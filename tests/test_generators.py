import pytest

import storefront.generators.storefront as generators
from storefront.configure import Options
from storefront.generators import Site, TemplateKind, build_pages, PageDescriptor
from storefront.generators.storefront import main_page_handles
from storefront.ingest import ingest
from storefront.query import NodeQuery


def product(n):
    return {'internal': {'type': 'ShopifyProduct'}, 'id': 'P{}'.format(n), 'handle': 'p{}'.format(n),
            'title': 'Product {}'.format(n), 'tags': ['sale'] if n % 2 else []}


def collection(n, count):
    return {'internal': {'type': 'ShopifyCollection'}, 'id': 'C{}'.format(n), 'handle': 'c{}'.format(n),
            'title': 'Collection {}'.format(n),
            'products': [{'id': 'P{}'.format(i)} for i in range(count)]}


def article(n, blog_id):
    return {'internal': {'type': 'ShopifyArticle'}, 'id': 'A{}'.format(n),
            'url': '/blogs/x/a{}'.format(n), 'blog': {'id': blog_id}}


@pytest.fixture
def catalog():
    records = [product(i) for i in range(25)]
    records.extend([collection(1, 25), collection(2, 9), collection(3, 0)])
    records.append({'internal': {'type': 'ShopifyShopPolicy'}, 'id': 'S1', 'type': 'refund-policy'})
    records.append({'internal': {'type': 'ShopifyPage'}, 'id': 'G1', 'handle': 'about'})
    records.append({'internal': {'type': 'ShopifyBlog'}, 'id': 'B1', 'url': '/blogs/news'})
    records.append({'internal': {'type': 'ShopifyBlog'}, 'id': 'B2', 'url': '/blogs/empty'})
    records.extend(article(i, 'B1') for i in range(7))
    records.append(article(99, 'B404'))
    return records


def build(session, registry, records, options=None, main_page=None):
    options = options or Options()
    ingest(records, options, registry, session)
    site = Site(options, NodeQuery(session), main_page)
    return build_pages(site)


def paths(pages, kind):
    return [d.path for d in pages if d.template_kind is kind]


def test_collection_pages(session, registry, catalog):
    pages = build(session, registry, catalog)

    assert paths(pages, TemplateKind.catalog) == [
        '/collection/c1', '/collection/c1/2', '/collection/c1/3',
        '/collection/c2',
    ]

    c1 = [d.context for d in pages if d.path.startswith('/collection/c1')]
    assert [(c['skip'], c['limit'], c['current_page'], c['num_pages']) for c in c1] == [
        (0, 9, 1, 3), (9, 9, 2, 3), (18, 9, 3, 3),
    ]
    assert c1[0]['handle'] == 'c1'
    assert c1[0]['cart_url'] == '/cart'
    assert c1[0]['enable_webp'] is True


def test_page_order(session, registry, catalog):
    pages = build(session, registry, catalog)
    kinds = []
    for d in pages:
        if d.template_kind not in kinds:
            kinds.append(d.template_kind)

    assert kinds == [
        TemplateKind.cart, TemplateKind.main, TemplateKind.catalog,
        TemplateKind.product, TemplateKind.policy, TemplateKind.page,
        TemplateKind.article, TemplateKind.blog,
    ]


def test_single_pages(session, registry, catalog):
    pages = build(session, registry, catalog)

    assert paths(pages, TemplateKind.cart) == ['/cart']
    assert paths(pages, TemplateKind.main) == ['/']
    assert len(paths(pages, TemplateKind.product)) == 25
    assert paths(pages, TemplateKind.page) == ['/pages/about']


def test_articles_without_blog_get_no_page(session, registry, catalog):
    pages = build(session, registry, catalog)

    assert paths(pages, TemplateKind.article) == [
        '/blog/news/article/a{}'.format(i) for i in range(7)
    ]


def test_blog_pages(session, registry, catalog):
    pages = build(session, registry, catalog)

    assert paths(pages, TemplateKind.blog) == ['/blog/news', '/blog/news/2']
    second = [d for d in pages if d.path == '/blog/news/2'][0]
    assert second.context['skip'] == 6
    assert second.context['limit'] == 6
    assert second.context['source_id'] == 'B1'


def test_lite_store(session, registry, catalog):
    pages = build(session, registry, catalog, Options(shopify_lite=True))

    kinds = set(d.template_kind for d in pages)
    assert kinds == set([TemplateKind.cart, TemplateKind.main, TemplateKind.catalog,
                         TemplateKind.product, TemplateKind.policy])


def test_allow_lists(session, registry, catalog):
    options = Options(collection_titles='Collection 2, Collection 3', product_tags='sale')
    pages = build(session, registry, catalog, options)

    assert paths(pages, TemplateKind.catalog) == ['/collection/c2']
    assert len(paths(pages, TemplateKind.product)) == 12


def test_base_path(session, registry, catalog):
    options = Options(base_path='shop', cart_page_path='/basket/')
    pages = build(session, registry, catalog, options)

    assert paths(pages, TemplateKind.cart) == ['/shop/basket']
    assert paths(pages, TemplateKind.main) == ['/shop/']
    assert '/shop/blog/news/article/a0' in paths(pages, TemplateKind.article)


def test_main_page_handles():
    layout = [
        {'type': 'header', 'children': [{'handle': 'h1'}, {'handle': 'h2'}]},
        {'type': 'collection', 'handle': 'c1'},
        {'type': 'text', 'handle': 'ignored'},
        {'type': 'carousel', 'children': []},
        {'type': 'product', 'handle': 'p1'},
        {'type': 'carousel', 'children': [{'handle': 'p2'}]},
    ]

    assert main_page_handles(layout) == ['h1', 'h2', 'c1', 'p1', 'p2']
    assert main_page_handles(None) == []


def test_main_page_context(session, registry, catalog):
    layout = [{'type': 'product', 'handle': 'p1'}]
    pages = build(session, registry, catalog, main_page=layout)

    main = [d for d in pages if d.template_kind is TemplateKind.main][0]
    assert main.context == {'handles': ['p1'], 'enable_webp': True}


class EmptyQuery(object):
    def __init__(self, result):
        self.result = result

    def nodes(self, kind, **filters):
        return self.result


@pytest.mark.parametrize('result', [None, {}, {'nodes': None}, {'nodes': []}])
def test_missing_results_are_empty(result):
    pages = build_pages(Site(Options(), EmptyQuery(result)))

    assert [d.path for d in pages] == ['/cart', '/']


def test_register_collaborator(session, registry, catalog):
    registered = []
    ingest(catalog, Options(), registry, session)
    pages = build_pages(Site(Options(), NodeQuery(session)), register=registered.append)

    assert registered == pages
    assert all(isinstance(d, PageDescriptor) for d in registered)


def test_generators_are_registered_once():
    names = [g.__name__ for g in generators.__dict__.values() if hasattr(g, 'lite')]

    assert sorted(names) == sorted(['cart', 'main', 'collections', 'products',
                                    'policies', 'pages', 'articles', 'blogs'])


def test_blog_pages_with_numeric_ids(session, registry):
    records = [{'internal': {'type': 'ShopifyBlog'}, 'id': 1, 'url': '/blogs/news'}]
    records.extend({'internal': {'type': 'ShopifyArticle'}, 'id': 10 + i,
                    'url': '/blogs/news/a{}'.format(i), 'blog': {'id': 1}}
                   for i in range(3))
    ingest(records, Options(), registry, session)
    session.commit()

    pages = build_pages(Site(Options(articles_per_blog_page=2), NodeQuery(session)))

    assert paths(pages, TemplateKind.article) == [
        '/blog/news/article/a0', '/blog/news/article/a1', '/blog/news/article/a2',
    ]
    assert paths(pages, TemplateKind.blog) == ['/blog/news', '/blog/news/2']
    assert pages[-1].context['source_id'] == '1'


def test_create_page_event(session, registry, catalog):
    from storefront.events import CreatePage

    seen = []

    @CreatePage.subscribe
    def collect(site, descriptor):
        seen.append(descriptor.path)

    try:
        pages = build(session, registry, catalog)
    finally:
        CreatePage.unsubscribe(collect)

    assert seen == [d.path for d in pages]
