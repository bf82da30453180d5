import logging

logger = logging.getLogger('storefront')


class Event(object):
    """
    A named hook. Subscribers run in subscription order; one returning
    `False` stops the rest.
    """

    def __init__(self, name):
        self.name = name
        self.subscribers = []

    def subscribe(self, subscriber):
        self.subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber):
        self.subscribers.remove(subscriber)

    def fire(self, *args, **kwargs):
        if self.subscribers:
            logger.debug('firing {!r}'.format(self))

        for s in self.subscribers:
            if s(*args, **kwargs) is False:
                return False

        return True

    def __repr__(self):
        names = ['.'.join([f.__module__, f.__name__]) for f in self.subscribers]
        return "<Event: {}, subscribers=[{}]>".format(self.name, ', '.join(names))


# ingestion
CreateNode = Event('CreateNode')
AfterIngest = Event('AfterIngest')

# page generation
BeforeCreatePages = Event('BeforeCreatePages')
CreatePage = Event('CreatePage')
AfterCreatePages = Event('AfterCreatePages')

# rendering, subscribers may add to the template context
Render = Event('Render')
