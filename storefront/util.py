import os
import logging


def pluck(d, keys):
    return {k: d[k] for k in keys if k in d}


def strip_slashes(s):
    return s.strip('/') if s else ''


def format_path(base, segment, leaf):
    """
    Join `base`, `segment` and `leaf` into an absolute path. Empty parts are
    left out entirely, so no `//` ever appears.

        >>> format_path('shop', '/product/', 'mug')
        '/shop/product/mug'
        >>> format_path('', 'blog', '')
        '/blog'
    """
    parts = [strip_slashes(base), strip_slashes(segment), leaf or '']
    return '/' + '/'.join(p for p in parts if p)


def last_segment(url):
    return (url or '').split('/')[-1]


def comma_list(s):
    if not s:
        return None

    values = tuple(v.strip() for v in s.split(',') if v.strip())
    return values or None


def _make_path(p):
    if isinstance(p, (tuple, list)):
        parts = list(p[:1])
        for el in p[1:]:
            parts.append(el.lstrip('/'))
        p = os.path.join(*parts)

    dirname = os.path.dirname(p)
    if dirname and not os.path.exists(dirname):
        os.makedirs(dirname)

    return p


def write(path, content):
    logger = logging.getLogger('storefront')
    path = _make_path(path)

    if isinstance(content, str):
        content = content.encode('utf8')

    with open(path, 'wb') as f:
        logger.debug('writing to {}'.format(f.name))
        f.write(content)

    return path


def url_join(*parts):
    base = parts[0]
    if base.endswith('/'):
        base = base[:-1]

    parts = [p[1:] if p.startswith('/') else p for p in parts[1:]]
    url = [base]
    url.extend(parts)
    return '/'.join(url)
