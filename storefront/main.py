"""
Generate storefront pages

Usage:
    storefront [--config=INI] [--debug] generate <site> [--file=FILE]
    storefront [--config=INI] [--debug] initialize <site> [--file=FILE]
    storefront [--config=INI] [--debug] registry <site> [--file=FILE]
    storefront (-h | --help)

Options:
    -h, --help              Show this text
    -c INI, --config=INI    Config path [default: site.ini]
    -f FILE, --file=FILE    Node store, defaults to <site>.store
    --debug                 Drop into the debugger on failure
"""
import os
import sys
import json
import logging
import importlib
from datetime import datetime
from dateutil.tz import tzutc

from docopt import docopt
from jinja2 import TemplateNotFound

import storefront.model as model
import storefront.configure as configure
import storefront.util as util
from storefront.events import AfterIngest, Render
from storefront.generators import Site, build_pages
from storefront.ingest import ingest
from storefront.query import NodeQuery
from storefront.registry import HandleRegistry


logger = logging.getLogger('storefront')


def main(argv=sys.argv):
    arguments = docopt(__doc__, argv=argv[1:])

    try:
        config = configure.configure(arguments)

        if arguments['generate']:
            generate(arguments, config)

        if arguments['initialize']:
            logger.info("store ready for {}".format(config['site']))

        if arguments['registry']:
            registry = HandleRegistry(model.Cache())
            for id, handle in sorted(registry.handles().items()):
                print("{}\t{}".format(id, handle))

    except Exception:
        if arguments['--debug']:
            import pdb
            import traceback

            traceback.print_exc()
            pdb.post_mortem(sys.exc_info()[2])
        else:
            logger.exception("{} failed".format(arguments['<site>']))
        return 1

    return 0


def load_source(path):
    with open(path, 'r') as f:
        source = json.load(f)

    if isinstance(source, list):
        source = {'nodes': source}

    return source.get('mainPage') or [], source.get('nodes') or []


def generate(arguments, config):
    session = model.get_session()
    options = config['options']
    registry = HandleRegistry(model.Cache(session))

    main_page, records = load_source(config['source_path'])

    report = ingest(records, options, registry, session)
    AfterIngest.fire(config, report)

    if report.unresolved:
        logger.warning("{} articles without a blog: {}".format(
            len(report.unresolved),
            ', '.join(n.source_id for n in report.unresolved)))

    # import module which defines the page generators
    importlib.import_module(config['generator'])

    site = Site(options, NodeQuery(session), main_page)
    pages = []
    build_pages(site, register=pages.append)

    write_list = [(os.path.join(config['build_path'], 'routes.json'),
                   json.dumps(manifest(pages), indent=2))]

    renderer = config.get('renderer')
    if renderer is not None:
        renderer.filters['route'] = make_router(config, pages)

        for descriptor in pages:
            context = make_context(config, site=site, **descriptor.context)
            Render.fire(site, descriptor, context)

            template = '{}.jinja2'.format(descriptor.template_kind.value)
            logger.info("rendering {} via {}".format(descriptor.path, template))
            s = render(renderer, template, 'page.jinja2', context)
            write_list.append((output_path(config, descriptor.path), s))

    for path, s in write_list:
        logger.info("writing {}".format(path))
        util.write(path, s)

    return pages


def manifest(pages):
    return [{
        'path': d.path,
        'template': d.template_kind.value,
        'context': d.context,
    } for d in pages]


def output_path(config, path):
    return os.path.join(config['build_path'], path.strip('/'), 'index.html')


def make_context(config, **kwargs):
    values = {}
    values.update(kwargs)
    values['now'] = datetime.now(tzutc()).astimezone(config['timezone'])
    return values


def make_router(config, pages):
    routes = {}
    for d in pages:
        handle = d.context.get('handle')
        if not handle:
            continue

        # first page of a listing only
        routes.setdefault((d.template_kind.value, handle), d.path)
        routes.setdefault((None, handle), d.path)

    def router(handle, kind=None, absolute=False):
        if (kind, handle) not in routes:
            raise KeyError(handle)

        p = routes[(kind, handle)]
        if absolute:
            return util.url_join(config.get('url', ''), p)
        return p

    return router


def render(renderer, template, fallback, context):
    try:
        template = renderer.get_template(template)
    except TemplateNotFound:
        if fallback:
            template = renderer.get_template(fallback)
        else:
            raise

    return template.render(context)


if __name__ == '__main__':
    sys.exit(main())
