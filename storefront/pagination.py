from collections import namedtuple


Window = namedtuple('Window', ['limit', 'skip', 'page_index', 'total_pages'])


def plan(count, per_page):
    """
    Split `count` items into windows of `per_page`. The last window may be
    partial; no items means no windows.

        >>> plan(5, 2)
        [Window(limit=2, skip=0, page_index=1, total_pages=3), Window(limit=2, skip=2, page_index=2, total_pages=3), Window(limit=2, skip=4, page_index=3, total_pages=3)]
    """
    if per_page < 1:
        raise ValueError("per_page must be positive, got {}".format(per_page))

    total_pages = -(-count // per_page)
    return [Window(per_page, (i - 1) * per_page, i, total_pages)
            for i in range(1, total_pages + 1)]


def page_path(theme_path, page_index):
    if page_index == 1:
        return theme_path
    return '{}/{}'.format(theme_path, page_index)


def paginate(theme_path, count, per_page, context=None):
    for window in plan(count, per_page):
        values = dict(context or {})
        values.update({
            'theme_path': theme_path,
            'limit': window.limit,
            'skip': window.skip,
            'num_pages': window.total_pages,
            'current_page': window.page_index,
        })
        yield page_path(theme_path, window.page_index), values
