from storefront.generators import generator, with_path, TemplateKind
from storefront.pagination import paginate


def main_page_handles(main_page):
    """
    Flattens the main page layout into the handles it shows, in layout
    order. Carousels and headers contribute their children.
    """
    handles = []
    for element in main_page or []:
        if element.get('type') in ('collection', 'product'):
            handles.append(element.get('handle'))
        elif element.get('type') in ('carousel', 'header'):
            for child in element.get('children') or []:
                handles.append(child.get('handle'))
    return handles


@generator(TemplateKind.cart)
def cart(site):
    yield site.cart_url, {}


@generator(TemplateKind.main)
def main(site):
    yield site.options.main_path, {
        'handles': main_page_handles(site.main_page),
        'enable_webp': site.options.enable_webp,
    }


@generator(TemplateKind.catalog)
def collections(site):
    options = site.options
    nodes = site.nodes('collection', titles=options.collection_titles)
    for collection in with_path(nodes, 'collection'):
        context = {
            'handle': collection['handle'],
            'cart_url': site.cart_url,
            'enable_webp': options.enable_webp,
        }
        for page in paginate(collection['theme_path'],
                             len(collection.get('products') or []),
                             options.products_per_collection_page,
                             context):
            yield page


@generator(TemplateKind.product)
def products(site):
    nodes = site.nodes('product', tags=site.options.product_tags)
    for product in with_path(nodes, 'product'):
        yield product['theme_path'], {
            'handle': product['handle'],
            'cart_url': site.cart_url,
            'enable_webp': site.options.enable_webp,
        }


@generator(TemplateKind.policy)
def policies(site):
    for policy in with_path(site.nodes('policy'), 'policy'):
        yield policy['theme_path'], {
            'type': policy['type'],
            'cart_url': site.cart_url,
        }


@generator(TemplateKind.page, lite=False)
def pages(site):
    for page in with_path(site.nodes('page'), 'page'):
        yield page['theme_path'], {
            'handle': page['handle'],
            'cart_url': site.cart_url,
        }


@generator(TemplateKind.article, lite=False)
def articles(site):
    for article in with_path(site.nodes('article'), 'article'):
        yield article['theme_path'], {
            'source_id': article['source_id'],
            'cart_url': site.cart_url,
        }


@generator(TemplateKind.blog, lite=False)
def blogs(site):
    # blog listings count every article of the blog, with or without a page
    articles = site.nodes('article')
    for blog in with_path(site.nodes('blog'), 'blog'):
        count = len([a for a in articles
                     if (a.get('blog') or {}).get('id') == blog['source_id']])
        context = {
            'source_id': blog['source_id'],
            'cart_url': site.cart_url,
        }
        for page in paginate(blog['theme_path'], count,
                             site.options.articles_per_blog_page, context):
            yield page
