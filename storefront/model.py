import logging

from sqlalchemy import Column, Integer, Unicode, UnicodeText, JSON, MetaData
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base, validates

from storefront.util import format_path, last_segment


logger = logging.getLogger(__name__)
_session = None

metadata = MetaData(naming_convention={
    'ix': 'ix_%(column_0_label)s',
    'uq': 'uq_%(table_name)s_%(column_0_name)s',
    'ck': 'ck_%(table_name)s_%(constraint_name)s',
    'fk': 'fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s',
    'pk': 'pk_%(table_name)s'
})
Model = declarative_base(metadata=metadata)


class PathAlreadyAssigned(ValueError):
    pass


def normalize_id(value):
    """Source ids are opaque; numbers and strings naming the same node compare equal."""
    if value is None:
        return None
    return str(value)


def get_session():
    return _session


def initialize(engine, create=False, drop=False):
    global _session

    if _session is not None:
        _session.remove()

    _session = scoped_session(sessionmaker(bind=engine))

    if drop:
        logger.warning("dropping all tables in {engine.url!s}".format(engine=engine))
        Model.metadata.drop_all(engine)

    if create:
        logger.info("creating tables in {engine.url!s}".format(engine=engine))
        Model.metadata.create_all(engine)

    return _session


class CacheEntry(Model):
    __tablename__ = 'cache_entry'

    key = Column(Unicode(200), primary_key=True)
    value = Column(JSON)


class Cache(object):
    """Durable key/value store, kept in the same database as the nodes."""

    def __init__(self, session=None):
        self.session = session or get_session()

    def get(self, key, default=None):
        entry = self.session.get(CacheEntry, key)
        if entry is None:
            return default
        return entry.value

    def set(self, key, value):
        entry = self.session.get(CacheEntry, key)
        if entry is None:
            entry = CacheEntry(key=key)
            self.session.add(entry)

        # JSON columns only notice reassignment, so always hand over a new object
        entry.value = list(value) if isinstance(value, (list, tuple)) else value
        self.session.flush()


class Node(Model):
    """
    One ingested catalog entity. `kind` discriminates the subclasses below;
    each subclass knows how to compute its own theme path.
    """
    __tablename__ = 'node'

    key = Column(Integer, primary_key=True)
    kind = Column(Unicode(50), nullable=False)
    source_id = Column(Unicode(200), nullable=False, unique=True)

    handle = Column(Unicode(200))
    title = Column(UnicodeText)
    url = Column(UnicodeText)
    theme_path = Column(UnicodeText)
    data = Column(JSON, default=dict)

    __mapper_args__ = {
        'polymorphic_on': kind,
        'polymorphic_identity': 'node',
    }

    # source record type, e.g. ShopifyProduct
    source_type = None
    deferred = False

    @validates('theme_path')
    def _validate_theme_path(self, key, value):
        if self.theme_path is not None:
            raise PathAlreadyAssigned("{} already has theme path {}".format(self, self.theme_path))
        return value

    @classmethod
    def from_record(cls, record):
        return cls(source_id=normalize_id(record.get('shopifyId') or record['id']),
                   handle=record.get('handle'),
                   title=record.get('title'),
                   url=record.get('url'),
                   data=dict(record))

    def assign_path(self, options, registry):
        raise NotImplementedError(self.__class__.__name__)

    def as_dict(self):
        d = {}
        for k in ('source_id', 'kind', 'handle', 'title', 'theme_path'):
            d[k] = getattr(self, k)
        return d

    def __repr__(self):
        return "<{} {}>".format(self.__class__.__name__, self.source_id)


class Product(Node):
    __mapper_args__ = {'polymorphic_identity': 'product'}
    source_type = 'ShopifyProduct'

    first_image = Column(JSON)

    @property
    def tags(self):
        return list((self.data or {}).get('tags') or [])

    def assign_path(self, options, registry=None):
        self.theme_path = format_path(options.base_path,
                                      options.product_page_base_path,
                                      self.handle)

        images = (self.data or {}).get('images') or []
        self.first_image = images[0] if images else {}
        return True

    def as_dict(self):
        d = super(Product, self).as_dict()
        d['tags'] = self.tags
        d['first_image'] = self.first_image
        return d


class Collection(Node):
    __mapper_args__ = {'polymorphic_identity': 'collection'}
    source_type = 'ShopifyCollection'

    @property
    def product_ids(self):
        return [p['id'] for p in (self.data or {}).get('products') or []]

    def assign_path(self, options, registry=None):
        self.theme_path = format_path(options.base_path,
                                      options.collection_page_base_path,
                                      self.handle)
        return True

    def as_dict(self):
        d = super(Collection, self).as_dict()
        d['products'] = [{'id': id} for id in self.product_ids]
        return d


class ShopPolicy(Node):
    __mapper_args__ = {'polymorphic_identity': 'policy'}
    source_type = 'ShopifyShopPolicy'

    @property
    def policy_type(self):
        return (self.data or {}).get('type')

    def assign_path(self, options, registry=None):
        self.theme_path = format_path(options.base_path,
                                      options.policy_page_base_path,
                                      self.policy_type)
        return True

    def as_dict(self):
        d = super(ShopPolicy, self).as_dict()
        d['type'] = self.policy_type
        return d


class Page(Node):
    __mapper_args__ = {'polymorphic_identity': 'page'}
    source_type = 'ShopifyPage'

    def assign_path(self, options, registry=None):
        self.theme_path = format_path(options.base_path,
                                      options.page_base_path,
                                      self.handle)
        return True


class Blog(Node):
    __mapper_args__ = {'polymorphic_identity': 'blog'}
    source_type = 'ShopifyBlog'

    def assign_path(self, options, registry):
        self.handle = last_segment(self.url)

        # articles look their blog up by id, so the handle has to be durable
        # before any of them is processed
        registry.record(self.source_id, self.handle)
        registry.persist()

        self.theme_path = format_path(options.base_path,
                                      options.blog_page_base_path,
                                      self.handle)
        return True


class Article(Node):
    __mapper_args__ = {'polymorphic_identity': 'article'}
    source_type = 'ShopifyArticle'

    # needs every blog recorded first
    deferred = True

    @property
    def parent_id(self):
        blog = (self.data or {}).get('blog') or {}
        return normalize_id(blog.get('shopifyId') or blog.get('id'))

    def assign_path(self, options, registry):
        self.handle = last_segment(self.url)

        blog_handle = registry.lookup(self.parent_id)
        if blog_handle is None:
            registry.miss(self.source_id, self.parent_id)
            return False

        self.theme_path = format_path(options.base_path,
                                      options.blog_page_base_path,
                                      blog_handle) + \
            format_path('', options.article_page_base_path, self.handle)
        return True

    def as_dict(self):
        d = super(Article, self).as_dict()
        d['blog'] = {'id': self.parent_id}
        return d

NODE_CLASSES = dict((cls.source_type, cls) for cls in
                    (Product, Collection, ShopPolicy, Page, Blog, Article))
