import enum
import logging
from collections import namedtuple

from storefront.events import BeforeCreatePages, CreatePage, AfterCreatePages


logger = logging.getLogger('storefront')


class TemplateKind(enum.Enum):
    cart = 'cart'
    main = 'main'
    catalog = 'catalog'
    product = 'product'
    policy = 'policy'
    page = 'page'
    article = 'article'
    blog = 'blog'


PageDescriptor = namedtuple('PageDescriptor', ['path', 'template_kind', 'context'])


class Site(object):
    """What page generators get to see: options, bulk queries and store layout."""

    def __init__(self, options, query, main_page=None):
        self.options = options
        self.query = query
        self.main_page = main_page or []

    @property
    def cart_url(self):
        return self.options.cart_path

    def nodes(self, kind, **filters):
        result = self.query.nodes(kind, **filters)
        if not result or not isinstance(result, dict):
            return []
        return result.get('nodes') or []


_generator_queue = []
def enqueue_generator(f):
    _generator_queue.append(f)


def generator(template_kind, lite=True):
    """
    Registers a page generator. The decorated function takes a `Site` and
    yields `(path, context)` pairs, one per page. Generators run in the order
    they are defined; those with `lite=False` are skipped for lite stores.
    """
    def generator(fn):
        def queued_generator(site):
            descriptors = []
            for path, context in fn(site):
                logger.debug('page {} using {}'.format(path, template_kind.value))
                descriptors.append(PageDescriptor(path, template_kind, context))
            return descriptors

        queued_generator.__name__ = fn.__name__
        queued_generator.__doc__ = fn.__doc__
        queued_generator.lite = lite
        enqueue_generator(queued_generator)
        return queued_generator
    return generator


def with_path(nodes, kind):
    """Nodes that can be addressed; the rest are logged and dropped."""
    for node in nodes:
        if node.get('theme_path'):
            yield node
        else:
            logger.warning("{} {} has no theme path, no page created".format(kind, node.get('source_id')))


def build_pages(site, register=None):
    descriptors = []
    BeforeCreatePages.fire(site, descriptors)

    for g in _generator_queue:
        if site.options.shopify_lite and not g.lite:
            logger.info("lite store, skipping {}".format(g.__name__))
            continue

        pages = g(site)
        logger.info("{} created {} pages".format(g.__name__, len(pages)))
        for descriptor in pages:
            CreatePage.fire(site, descriptor)
            if register is not None:
                register(descriptor)
            descriptors.append(descriptor)

    AfterCreatePages.fire(site, descriptors)
    return descriptors
