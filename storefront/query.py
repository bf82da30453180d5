import logging

from storefront.model import (Node, Product, Collection, ShopPolicy, Page, Blog,
                              Article, get_session)


logger = logging.getLogger('storefront')

KINDS = {
    'product': Product,
    'collection': Collection,
    'policy': ShopPolicy,
    'page': Page,
    'blog': Blog,
    'article': Article,
}


class NodeQuery(object):
    """Bulk reads over ingested nodes, shaped as `{'nodes': [...]}`."""

    def __init__(self, session=None):
        self.session = session or get_session()

    def nodes(self, kind, titles=None, tags=None):
        if kind not in KINDS:
            raise KeyError(kind)

        cls = KINDS[kind]
        query = self.session.query(cls)
        if titles:
            query = query.filter(cls.title.in_(list(titles)))

        nodes = query.order_by(Node.key.asc()).all()

        if tags:
            tags = set(tags)
            nodes = [n for n in nodes if tags.intersection(getattr(n, 'tags', ()))]

        logger.debug("queried {} {} nodes".format(len(nodes), kind))
        return {'nodes': [n.as_dict() for n in nodes]}
