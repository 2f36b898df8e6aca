from collections import namedtuple
from urllib.parse import urlsplit, parse_qsl

from . import signals
from .exceptions import InvalidArgumentError, PreconditionError, TransportError

# operation name -> capability tag, for every operation any trait provides
OPERATIONS = {}


def _require_item(node, operation):
    if not node.path.is_item:
        raise PreconditionError('"{}" requires an item, but {!r} has no id selector'.format(
            operation, node.path.to_request_path()))


def _require_payload(payload, operation):
    if not isinstance(payload, dict):
        raise InvalidArgumentError('"{}" expects a dict, got {}'.format(operation, type(payload).__name__))


def _payload_schema(node):
    if node.schema is not None:
        return node.schema
    if node.meta.item is not None:
        return node.item_class().schema
    return None


class Trait(object):
    """
    Base class for capability mixins.

    A trait adds one capability --- one or more operations and the requests they issue --- to any
    :class:`queryable.Queryable` subclass it is mixed into. Traits are independent of each other; the capability set of
    a class is the union of the traits it inherits from, regardless of their order.

    .. attribute:: capability

        Capability tag, e.g. ``'addable'``

    .. attribute:: operations

        Names of the methods the trait adds.
    """
    capability = None
    operations = ()


class GetById(Trait):
    """
    Selects a member of a collection. The class of the returned node is declared with ``Meta.item``.

    ::

        task = client.me.todo.lists['AAMk'].tasks.get_by_id('AAMl')

    """
    capability = 'getById'
    operations = ('get_by_id',)

    def get_by_id(self, id):
        """
        :param id: a non-empty string or an integer
        :raises InvalidArgumentError: if ``id`` is empty or of another type
        :return: a node for the item; no request is made
        """
        if isinstance(id, bool) or not isinstance(id, (str, int)):
            raise InvalidArgumentError('Item id must be a string or an integer, got {!r}'.format(id))
        if isinstance(id, str) and not id.strip():
            raise InvalidArgumentError('Item id must not be empty')
        return self.select(id)

    def __getitem__(self, id):
        return self.get_by_id(id)


class Addable(Trait):
    """
    Creates a member of a collection with ``POST`` to the collection path.

    The payload is validated against the schema of the collection, or of its ``Meta.item`` class. If
    ``Meta.odata_type`` is set it is sent as the ``@odata.type`` property.
    """
    capability = 'addable'
    operations = ('add',)

    def add(self, payload):
        """
        :param dict payload: properties of the new item
        :raises ValidationError: if ``payload`` does not match the item schema, e.g. misses a required field
        :return: an awaitable resolving to the created item as returned by the service
        """
        _require_payload(payload, 'add')
        schema = _payload_schema(self)
        body = dict(payload) if schema is None else schema.convert(payload)

        if self.meta.odata_type is not None:
            body = dict([('@odata.type', self.meta.odata_type)] + list(body.items()))

        return self._add(self.request('POST', body=body))

    async def _add(self, request):
        signals.before_add.send(self, request=request)
        payload = await self.submit(request)
        signals.after_add.send(self, request=request, payload=payload)
        return payload


class Updateable(Trait):
    """
    Updates an item with ``PATCH`` to the item path. Only the given properties are sent.
    """
    capability = 'updateable'
    operations = ('update',)

    def update(self, properties):
        """
        :param dict properties: properties to change
        :raises PreconditionError: if the node has no id selector
        :raises ValidationError: if ``properties`` do not match the item schema
        """
        _require_item(self, 'update')
        _require_payload(properties, 'update')
        schema = _payload_schema(self)
        body = dict(properties) if schema is None else schema.convert(properties, update=True, patchable=True)
        return self._update(self.request('PATCH', body=body))

    async def _update(self, request):
        signals.before_update.send(self, request=request)
        payload = await self.submit(request)
        signals.after_update.send(self, request=request, payload=payload)
        return payload


class Deletable(Trait):
    """
    Deletes an item with ``DELETE`` to the item path.
    """
    capability = 'deletable'
    operations = ('delete',)

    def delete(self):
        """
        :raises PreconditionError: if the node has no id selector
        """
        _require_item(self, 'delete')
        return self._delete(self.request('DELETE'))

    async def _delete(self, request):
        signals.before_delete.send(self, request=request)
        payload = await self.submit(request)
        signals.after_delete.send(self, request=request, payload=payload)
        return payload


def _token_from_link(link, parameter):
    query = dict(parse_qsl(urlsplit(link).query))
    for key in (parameter, '$skiptoken', '$deltatoken'):
        if key in query:
            return query[key]
    return None


class DeltaPage(namedtuple('DeltaPage', ('changes', 'token', 'synchronized'))):
    """
    One page of a delta query.

    .. attribute:: changes

        list of changed items

    .. attribute:: token

        continuation token to pass to the next :meth:`DeltaEnabled.delta` call, or ``None``

    .. attribute:: synchronized

        ``True`` when this was the last page; ``token`` then is the token for the next round of changes
    """

    @classmethod
    def from_payload(cls, payload, parameter='token'):
        payload = payload or {}
        if not isinstance(payload, dict) or not isinstance(payload.get('value') or [], list):
            raise TransportError(None, 'Unexpected delta response', details={'payload': payload})
        changes = list(payload.get('value') or ())

        next_link = payload.get('@odata.nextLink')
        if next_link:
            return cls(changes, _token_from_link(next_link, parameter), False)

        delta_link = payload.get('@odata.deltaLink')
        if delta_link:
            return cls(changes, _token_from_link(delta_link, parameter), True)
        return cls(changes, None, True)


class DeltaEnabled(Trait):
    """
    Incremental synchronization of a collection with ``GET <collection>/delta``.

    The continuation token is sent in the ``Meta.delta_token_parameter`` query parameter (``token`` by default).
    Query decorations of the collection, such as ``$select``, are kept.
    """
    capability = 'deltaEnabled'
    operations = ('delta', 'delta_pages')

    def _delta_path(self, token):
        path = self.path.with_segment('delta').with_query(self.path.query)
        if token is not None:
            path = path.with_query([(self.meta.delta_token_parameter, token)])
        return path

    def delta(self, token=None):
        """
        :param str token: a token returned by a previous delta call, or ``None`` to start over
        :raises InvalidArgumentError: if ``token`` is not a non-empty string
        :return: an awaitable resolving to a :class:`DeltaPage`
        """
        if token is not None and (not isinstance(token, str) or not token):
            raise InvalidArgumentError('Delta token must be a non-empty string, got {!r}'.format(token))
        return self._delta(self.request('GET', path=self._delta_path(token)))

    async def _delta(self, request):
        payload = await self.submit(request)
        return DeltaPage.from_payload(payload, self.meta.delta_token_parameter)

    async def delta_pages(self, token=None):
        """
        Iterates over delta pages, following continuation tokens until the service reports that the caller is
        synchronized.

        ::

            async for page in tasks.delta_pages():
                apply(page.changes)
            save(page.token)

        """
        while True:
            page = await self.delta(token)
            yield page
            if page.synchronized or page.token is None:
                return
            token = page.token


for trait in (GetById, Addable, Updateable, Deletable, DeltaEnabled):
    for operation in trait.operations:
        OPERATIONS[operation] = trait.capability
