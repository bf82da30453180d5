import logging
from collections import namedtuple

from storefront.events import CreateNode, AfterIngest
from storefront.model import Node, NODE_CLASSES, get_session


logger = logging.getLogger('storefront')

IngestReport = namedtuple('IngestReport', ['nodes', 'assigned', 'unresolved'])


def record_type(record):
    return (record.get('internal') or {}).get('type')


def create_node(record):
    cls = NODE_CLASSES.get(record_type(record))
    if cls is None:
        logger.debug("ignoring record of type {}".format(record_type(record)))
        return None

    return cls.from_record(record)


def create_node_fields(node, options, registry):
    assigned = node.assign_path(options, registry)
    if assigned:
        logger.debug("{!r} at {}".format(node, node.theme_path))

    CreateNode.fire(node, options, registry)
    return assigned


def ingest(records, options, registry, session=None):
    """
    Create nodes for `records` and assign their theme paths.

    Articles are assigned in a second pass, after every blog in `records`
    has been recorded, so the order of `records` does not matter. An article
    whose blog is neither in `records` nor remembered from an earlier run is
    kept without a path and reported as unresolved.
    """
    session = session or get_session()

    # nodes are sourced afresh on every run; the blog registry is not
    session.query(Node).delete()

    nodes = []
    seen = set()
    for record in records:
        node = create_node(record)
        if node is None:
            continue

        if node.source_id in seen:
            logger.warning("duplicate record {}, skipping".format(node.source_id))
            continue

        seen.add(node.source_id)
        nodes.append(node)

    assigned = 0
    unresolved = []
    for node in sorted(nodes, key=lambda n: n.deferred):
        if create_node_fields(node, options, registry):
            assigned += 1
        else:
            unresolved.append(node)

    session.add_all(nodes)
    session.flush()

    logger.info("ingested {} nodes, {} without a path".format(len(nodes), len(unresolved)))
    return IngestReport(nodes, assigned, unresolved)


@AfterIngest.subscribe
def commit_session(*args, **kwargs):
    get_session().commit()
