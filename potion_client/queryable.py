from collections import namedtuple
import logging

from . import signals
from .capabilities import OPERATIONS, Trait
from .exceptions import TransportError, UnsupportedOperationError
from .fields import Raw
from .path import Path
from .reference import QueryableReference, SubResource
from .schema import FieldSet
from .utils import AttributeDict

log = logging.getLogger(__name__)

ODATA_QUERY_OPTIONS = ('select', 'filter', 'expand', 'orderby', 'top', 'skip', 'count', 'search')


class PendingRequest(namedtuple('PendingRequest', ('method', 'path', 'body', 'headers'))):
    """
    A request ready to be submitted: upper-case method, rendered path, JSON-compatible body or ``None`` and a dict
    of headers.
    """


class QueryableMeta(type):

    def __new__(mcs, name, bases, members):
        class_ = super(QueryableMeta, mcs).__new__(mcs, name, bases, members)
        class_.meta = meta = AttributeDict(getattr(class_, 'meta', {}) or {})
        class_.sub_resources = sub_resources = dict(getattr(class_, 'sub_resources') or {})

        for base in reversed(bases):
            if hasattr(base, 'Meta'):
                meta.update({k: v for k, v in base.Meta.__dict__.items() if not k.startswith('__')})

        if 'Meta' in members:
            changes = members['Meta'].__dict__
            for k, v in changes.items():
                if not k.startswith('__'):
                    meta[k] = v

            if not changes.get('name', None):
                meta['name'] = name.lower()
        else:
            meta['name'] = name.lower()

        schema = {}
        for base in bases:
            if hasattr(base, 'Schema'):
                schema.update(base.Schema.__dict__)

        if 'Schema' in members:
            schema.update(members['Schema'].__dict__)

        fields = {k: f for k, f in schema.items() if isinstance(f, Raw)}
        if fields:
            class_.schema = FieldSet(fields, required_fields=meta.required_fields)

        class_.capabilities = frozenset(klass.__dict__['capability']
                                        for klass in class_.__mro__
                                        if issubclass(klass, Trait) and klass.__dict__.get('capability'))

        for n, m in members.items():
            if isinstance(m, SubResource):
                if m.attribute is None:
                    m.attribute = n
                m.bind(class_)
                sub_resources[n] = m

        return class_


class Queryable(object, metaclass=QueryableMeta):
    """
    A node in the resource tree of a REST API: a :class:`path.Path` and the capabilities of the class.

    A node is created from a :class:`client.Client` (a root node) or from another node (a child node, which shares
    the client and derives its own path). Creating and navigating nodes never performs I/O; calling a node, or one of
    the operations added by its traits, submits exactly one request.

    Capabilities are added by mixing in :class:`capabilities.Trait` classes; nested resources are declared with
    :class:`reference.SubResource`.

    :class:`Meta` class attributes:

    =======================  ==============================  ==============================================================================
    Attribute name           Default                         Description
    =======================  ==============================  ==============================================================================
    name                     ---                             Name of the node class; defaults to the lower-case of the class name
    default_path             ``None``                        Path literal appended to the parent path when no path is given
    item                     ``None``                        Reference to the class of nodes returned by :meth:`select`; :class:`Instance`
                                                             when not set
    required_fields          ``None``                        Fields in ``Schema`` that must be present when creating an item
    odata_type               ``None``                        ``@odata.type`` sent with items created by :class:`capabilities.Addable`
    delta_token_parameter    ``'token'``                     Query parameter carrying the continuation token of a delta query
    =======================  ==============================  ==============================================================================

    Usage example:

    .. code-block:: python

        class Task(Updateable, Deletable, Instance):
            attachments = SubResource('Attachments')

            class Schema:
                title = fields.String()

        class Tasks(GetById, Addable, DeltaEnabled, Collection):
            class Meta:
                default_path = 'tasks'
                item = 'Task'

    .. attribute:: meta

        A :class:`AttributeDict` of configuration attributes collected from the :class:`Meta` attributes of the base classes.

    .. attribute:: capabilities

        A frozenset of the capability tags of all traits of the class.

    .. attribute:: schema

        A :class:`FieldSet` containing fields collected from the :class:`Schema` attributes of the base classes.

    .. attribute:: sub_resources

        A dictionary of the :class:`SubResource` accessors of the class, keyed by attribute name.

    :param base: a :class:`client.Client` or a parent :class:`Queryable`
    :param path: a path literal (``'me/todo'``) or :class:`path.Path` used instead of ``Meta.default_path``
    """
    meta = None
    schema = None
    capabilities = frozenset()
    sub_resources = None

    def __init__(self, base, path=None):
        if isinstance(base, Queryable):
            self.client = base.client
            parent = base.path
        else:
            self.client = base
            parent = Path(id_style=base.id_style)

        if path is None:
            path = self.meta.default_path

        if isinstance(path, Path):
            self.path = path
        elif path:
            for name in path.strip('/').split('/'):
                parent = parent.with_segment(name)
            self.path = parent
        else:
            self.path = parent

    @classmethod
    def item_class(cls):
        """
        :return: the class of nodes returned by :meth:`select`
        """
        if cls.meta.item is None:
            return Instance
        return QueryableReference(cls.meta.item).resolve(cls)

    def request(self, method='GET', body=None, headers=None, path=None):
        """
        Builds the request for this node without submitting it.

        :param str method: HTTP method
        :param body: JSON-compatible request body
        :param dict headers: request headers
        :param path.Path path: path to use instead of the path of the node
        :rtype: PendingRequest
        """
        path = self.path if path is None else path
        return PendingRequest(method.upper(), path.to_request_path(), body, dict(headers or {}))

    async def submit(self, request):
        """
        Submits a request through the transport of the client.

        :raises TransportError: if the request failed; errors of other types raised by the transport are wrapped
        :return: the parsed response payload
        """
        log.debug('%s %s', request.method, request.path)
        signals.before_request.send(self, request=request)
        try:
            payload = await self.client.submit(request)
        except TransportError as e:
            signals.request_failed.send(self, request=request, error=e)
            raise
        except Exception as e:
            error = TransportError(None, str(e) or e.__class__.__name__, details={
                'method': request.method,
                'path': request.path
            })
            signals.request_failed.send(self, request=request, error=error)
            raise error from e

        log.debug('%s %s succeeded', request.method, request.path)
        signals.after_request.send(self, request=request, payload=payload)
        return payload

    async def invoke(self, method='GET', body=None, headers=None):
        return await self.submit(self.request(method, body, headers))

    def __call__(self):
        """
        Reads the resource with ``GET`` on the path of the node.
        """
        return self.invoke('GET')

    def derive_child(self, segment, cls=None):
        """
        :param str segment: a path literal segment
        :param cls: class of the child node, :class:`Queryable` by default
        """
        if cls is None:
            cls = Queryable
        return cls(self, self.path.with_segment(segment))

    def select(self, id):
        """
        Navigates to the item with the given id. The class of the node returned is declared with ``Meta.item``.
        """
        return self.item_class()(self, self.path.with_id(id))

    def with_query(self, **params):
        """
        Returns a copy of this node with query decorations. OData query option names, e.g. ``select`` or ``top``,
        are prefixed with ``$``; lists are joined with commas.

        ::

            tasks.with_query(select=['title', 'status'], top=10)  # tasks?$select=title,status&$top=10

        """
        query = []
        for key, value in params.items():
            if key in ODATA_QUERY_OPTIONS:
                key = '$' + key
            if isinstance(value, (list, tuple)):
                value = ','.join(str(v) for v in value)
            elif isinstance(value, bool):
                value = 'true' if value else 'false'
            query.append((key, value))
        return self.__class__(self, self.path.with_query(query))

    def __getattr__(self, name):
        if name in OPERATIONS:
            raise UnsupportedOperationError(self, name)
        raise AttributeError("'{}' object has no attribute '{}'".format(self.__class__.__name__, name))

    def __eq__(self, other):
        if not isinstance(other, Queryable):
            return NotImplemented
        return self.__class__ is other.__class__ and self.client is other.client and self.path == other.path

    def __hash__(self):
        return hash((self.__class__, id(self.client), self.path))

    def __repr__(self):
        return '<{} {!r}>'.format(self.__class__.__name__, self.path.to_request_path())

    class Meta:
        name = None
        default_path = None
        item = None
        required_fields = None
        odata_type = None
        delta_token_parameter = 'token'


class Collection(Queryable):
    """
    A node for a collection of items, e.g. ``tasks``.
    """


class Instance(Queryable):
    """
    A node for a single item, e.g. ``tasks/AAMl``, or a singleton such as ``me``.
    """
