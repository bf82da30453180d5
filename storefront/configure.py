import os
import logging
import logging.config
import importlib
from collections import namedtuple
from configparser import ConfigParser, NoSectionError

from dateutil.tz import tzutc, gettz
import sqlalchemy
from jinja2 import FileSystemLoader, Environment

import storefront.model as model
import storefront.util as util

logger = None


class ConfigurationError(ValueError):
    pass


# option name, default
OPTION_DEFAULTS = (
    ('base_path', ''),
    ('product_page_base_path', 'product'),
    ('collection_page_base_path', 'collection'),
    ('policy_page_base_path', 'policy'),
    ('page_base_path', 'pages'),
    ('blog_page_base_path', 'blog'),
    ('article_page_base_path', 'article'),
    ('cart_page_path', 'cart'),
    ('products_per_collection_page', 9),
    ('articles_per_blog_page', 6),
    ('shopify_lite', False),
    ('enable_webp', True),
    ('collection_titles', None),
    ('product_tags', None),
)

_TRUE = ('true', 'yes', 'on', '1')
_FALSE = ('false', 'no', 'off', '0')


def _parse_bool(name, v):
    if isinstance(v, bool):
        return v

    if isinstance(v, str):
        if v.strip().lower() in _TRUE:
            return True
        if v.strip().lower() in _FALSE:
            return False

    raise ConfigurationError("{} must be a boolean, got {!r}".format(name, v))


def _parse_page_size(name, v):
    if isinstance(v, bool):
        raise ConfigurationError("{} must be an integer, got {!r}".format(name, v))

    try:
        v = int(v)
    except (TypeError, ValueError):
        raise ConfigurationError("{} must be an integer, got {!r}".format(name, v))

    if v < 1:
        raise ConfigurationError("{} must be positive, got {}".format(name, v))

    return v


def _parse_allow_list(name, v):
    if v is None or isinstance(v, tuple):
        return v or None

    if isinstance(v, list):
        return tuple(v) or None

    if isinstance(v, str):
        return util.comma_list(v)

    raise ConfigurationError("{} must be a comma separated list, got {!r}".format(name, v))


class Options(namedtuple('Options', [name for name, _ in OPTION_DEFAULTS])):
    """
    Path and pagination settings for one run.

    Every option has a default, so `Options()` is a valid configuration.
    Values are coerced and validated here, once; page sizes must be positive
    integers because the pagination planner divides by them.
    """
    __slots__ = ()

    def __new__(cls, **kwargs):
        unknown = set(kwargs) - set(cls._fields)
        if unknown:
            raise ConfigurationError("unknown options: {}".format(', '.join(sorted(unknown))))

        values = dict(OPTION_DEFAULTS)
        values.update(kwargs)

        for k in cls._fields:
            if k in ('shopify_lite', 'enable_webp'):
                values[k] = _parse_bool(k, values[k])
            elif k in ('products_per_collection_page', 'articles_per_blog_page'):
                values[k] = _parse_page_size(k, values[k])
            elif k in ('collection_titles', 'product_tags'):
                values[k] = _parse_allow_list(k, values[k])
            elif values[k] is None:
                values[k] = ''
            elif not isinstance(values[k], str):
                raise ConfigurationError("{} must be a string, got {!r}".format(k, values[k]))

        return super(Options, cls).__new__(cls, **values)

    @classmethod
    def from_section(cls, section):
        return cls(**util.pluck(section, cls._fields))

    @property
    def cart_path(self):
        return util.format_path(self.base_path, self.cart_page_path, '')

    @property
    def main_path(self):
        path = util.format_path(self.base_path, '', '')
        if not path.endswith('/'):
            path += '/'
        return path


def _configure_list(config, *keys):
    for k in keys:
        if k in config:
            config[k] = [s.strip() for s in config[k].split('\n') if s.strip()]
        else:
            config[k] = []

    return config


def _configure_logging(parser, config_file):
    if parser.has_section('loggers'):
        logging.config.fileConfig(config_file, disable_existing_loggers=False)
    else:
        logging.basicConfig(level=logging.INFO)

    return logging.getLogger('storefront')


def configure(arguments):
    global logger

    site_name = arguments['<site>']
    here = os.getcwd()
    config_file = arguments['--config']

    # config parser
    parser = ConfigParser(dict(here=here))
    with open(config_file, 'r') as fp:
        parser.read_file(fp)

    # logging
    logger = _configure_logging(parser, config_file)

    # globals
    try:
        storefront = dict(parser.items('storefront'))

    except NoSectionError:
        storefront = {}

    # post-process ini values
    site = "site:{}".format(site_name)
    try:
        site = dict(parser.items(site))
    except NoSectionError:
        raise ConfigurationError("no [{}] section in {}".format(site, config_file))

    site.pop('here')
    storefront.pop('here', None)

    storefront.update(site)
    storefront['site'] = site_name
    storefront['options'] = Options.from_section(storefront)
    storefront.setdefault('generator', 'storefront.generators.storefront')
    storefront.setdefault('build_path', os.path.join(here, 'build'))
    storefront.setdefault('source_path', os.path.join(here, '{}.json'.format(site_name)))

    # sqlalchemy
    store = arguments.get('--file') or '{}.store'.format(site_name)
    dsn = 'sqlite:///{}'.format(os.path.join(here, store))
    engine = sqlalchemy.create_engine(dsn)
    model.initialize(engine, create=True)
    logger.info("using store {}".format(store))
    logger.debug("dsn {}".format(dsn))

    # timezone
    if 'timezone' in storefront:
        storefront['timezone'] = gettz(storefront['timezone'])
    else:
        storefront['timezone'] = tzutc()

    # renderer
    storefront['renderer'] = None
    if storefront.get('template_path'):
        try:
            jinja2 = dict(parser.items('jinja2'))
        except NoSectionError:
            jinja2 = {}
        _configure_list(jinja2, 'filters')
        loader = FileSystemLoader(storefront['template_path'])
        env = Environment(loader=loader)

        for m in jinja2['filters']:
            m = importlib.import_module(m)
            for name in dir(m):
                if name.endswith('_filter'):
                    fname = name.split('_filter', 1)[0]
                    logger.debug('installing {} filter'.format(fname))
                    env.filters[fname] = getattr(m, name)

        storefront['renderer'] = env

    return storefront
