import logging
import threading

from storefront.model import Cache


logger = logging.getLogger('storefront')


def merge_entries(*lists):
    """Concatenate registry entry lists, dropping exact repeats."""
    merged = []
    seen = set()
    for entries in lists:
        for entry in entries or []:
            marker = (entry['id'], entry['handle'])
            if marker in seen:
                continue
            seen.add(marker)
            merged.append({'id': entry['id'], 'handle': entry['handle']})

    return merged


class HandleRegistry(object):
    """
    Maps blog ids to blog handles so that articles, which only know the id of
    their blog, can build paths nested under it.

    Entries recorded in this run are accumulated in memory and merged into
    the durable cache on every `persist()`; lookups always read the cache, so
    blogs seen by an earlier run still resolve. Entries are never removed.
    """

    key = 'available_blogs'

    def __init__(self, cache=None):
        self.cache = cache or Cache()
        self._entries = []
        self._misses = []
        self._lock = threading.RLock()

    def record(self, parent_id, handle):
        with self._lock:
            logger.debug("recording blog {} as {}".format(parent_id, handle))
            self._entries.append({'id': parent_id, 'handle': handle})

    def persist(self):
        with self._lock:
            stored = self.cache.get(self.key)
            # this run's entries first, a renamed blog resolves to its new handle
            entries = merge_entries(self._entries, stored)
            self.cache.set(self.key, entries)
            return entries

    def lookup(self, parent_id):
        with self._lock:
            entries = self.cache.get(self.key)
            if not entries:
                logger.debug("blog registry is empty, cannot resolve {}".format(parent_id))
                return None

            for entry in entries:
                if entry['id'] == parent_id:
                    return entry['handle']

            return None

    def miss(self, node_id, parent_id):
        with self._lock:
            logger.warning("no blog {} for article {}, article has no path".format(parent_id, node_id))
            self._misses.append((node_id, parent_id))

    @property
    def misses(self):
        return list(self._misses)

    def handles(self):
        with self._lock:
            handles = {}
            for entry in self.cache.get(self.key) or []:
                handles.setdefault(entry['id'], entry['handle'])
            return handles
