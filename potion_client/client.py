from .path import ID_STYLES
from .queryable import Queryable
from .reference import SubResource
from .transport import HttpxTransport


class Client(object):
    """
    Entry point to a REST API. Holds the transport and the configuration shared by all nodes created from it.

    ::

        client = Client('https://graph.microsoft.com/v1.0', POTION_CLIENT_HEADERS={'Authorization': 'Bearer ...'})
        tasks = client.me.todo.lists['AAMk'].tasks
        await tasks.add({'title': 'Buy milk'})

    Configuration keys:

    ===========================  ==============  ====================================================================
    Key                          Default         Description
    ===========================  ==============  ====================================================================
    POTION_CLIENT_ID_STYLE       ``'segment'``   ``'segment'`` renders item ids as ``tasks/42``, ``'parentheses'``
                                                 as ``tasks('42')``
    POTION_CLIENT_TIMEOUT        ``10``          Timeout in seconds of the default transport
    POTION_CLIENT_HEADERS        ``{}``          Headers sent with every request by the default transport
    ===========================  ==============  ====================================================================

    :param str base_url: service root; required unless a ``transport`` is given
    :param transport.Transport transport: transport to submit requests with; defaults to a
        :class:`transport.HttpxTransport` for ``base_url``
    """

    me = SubResource('potion_client.users.Me')
    users = SubResource('potion_client.users.Users')

    def __init__(self, base_url=None, transport=None, **config):
        self.config = config = dict(config)
        config.setdefault('POTION_CLIENT_ID_STYLE', 'segment')
        config.setdefault('POTION_CLIENT_TIMEOUT', 10)
        config.setdefault('POTION_CLIENT_HEADERS', {})

        if config['POTION_CLIENT_ID_STYLE'] not in ID_STYLES:
            raise ValueError('POTION_CLIENT_ID_STYLE must be one of {}'.format(', '.join(ID_STYLES)))

        if transport is None:
            if base_url is None:
                raise ValueError('Either base_url or transport is required')
            transport = HttpxTransport(base_url,
                                       timeout=config['POTION_CLIENT_TIMEOUT'],
                                       headers=config['POTION_CLIENT_HEADERS'])

        self.base_url = base_url
        self.transport = transport

    @property
    def id_style(self):
        return self.config['POTION_CLIENT_ID_STYLE']

    def root(self, path=None):
        """
        :param str path: optional path literal
        :return: a :class:`Queryable` at the service root, or at ``path``
        """
        return Queryable(self, path)

    async def submit(self, request):
        return await self.transport.submit(request)

    async def aclose(self):
        await self.transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def __repr__(self):
        return '<{} {!r}>'.format(self.__class__.__name__, self.base_url)
