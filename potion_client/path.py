import re
from collections import namedtuple

from urllib.parse import quote

from .exceptions import InvalidPathError

ID_STYLES = ('segment', 'parentheses')

_ILLEGAL_SEGMENT = re.compile(r'[/?#%\s]')

# characters OData query options are written with
_QUERY_SAFE = "$,'()"


class Segment(namedtuple('Segment', ('name', 'id'))):
    """
    A literal path segment, optionally terminated by an id selector.
    """

    def __new__(cls, name, id=None):
        return super(Segment, cls).__new__(cls, name, id)


def _render_id(id, style):
    if style == 'parentheses':
        if isinstance(id, int) and not isinstance(id, bool):
            return '({})'.format(id)
        return "('{}')".format(quote(str(id).replace("'", "''"), safe="'"))
    return '/{}'.format(quote(str(id), safe=''))


def _is_empty_id(id):
    return id is None or (isinstance(id, str) and not id.strip())


class Path(object):
    """
    Immutable address of a remote resource.

    A path is an ordered sequence of :class:`Segment` objects (each with an optional id selector) and an ordered
    sequence of query decorations. Every ``with_*`` method returns a new path; the original is never changed.

    >>> Path.parse('me/todo').with_segment('lists').with_id('AAMk').to_request_path()
    'me/todo/lists/AAMk'

    :param segments: iterable of :class:`Segment` objects or ``(name, id)`` tuples
    :param query: iterable of ``(key, value)`` pairs
    :param str id_style: ``'segment'`` renders ``tasks/42``, ``'parentheses'`` renders ``tasks('42')``
    """
    __slots__ = ('_segments', '_query', '_id_style')

    def __init__(self, segments=(), query=(), id_style='segment'):
        if id_style not in ID_STYLES:
            raise InvalidPathError('Unknown id style "{}"'.format(id_style))
        object.__setattr__(self, '_segments', tuple(Segment(*s) for s in segments))
        object.__setattr__(self, '_query', tuple((k, v) for k, v in query))
        object.__setattr__(self, '_id_style', id_style)

    def __setattr__(self, key, value):
        raise AttributeError('{} is immutable'.format(self.__class__.__name__))

    @classmethod
    def parse(cls, literal, id_style='segment'):
        """
        Creates a path from a ``/``-separated literal such as ``'me/todo'``. Leading and trailing slashes are ignored.
        """
        path = cls(id_style=id_style)
        for name in literal.strip('/').split('/'):
            path = path.with_segment(name)
        return path

    @property
    def segments(self):
        return self._segments

    @property
    def query(self):
        return self._query

    @property
    def id_style(self):
        return self._id_style

    @property
    def selector(self):
        """
        The id selector of the terminal segment, or ``None``.
        """
        if not self._segments:
            return None
        return self._segments[-1].id

    @property
    def is_item(self):
        return self.selector is not None

    def _derive(self, segments=None, query=None):
        return Path(self._segments if segments is None else segments,
                    self._query if query is None else query,
                    self._id_style)

    def with_segment(self, name):
        """
        :param str name: a literal segment, e.g. ``'tasks'``
        :raises InvalidPathError: if ``name`` is empty or contains characters that are not allowed in a segment
        :return: a new path ending with ``name``; query decorations are not carried over
        """
        if not isinstance(name, str) or not name:
            raise InvalidPathError('Path segment must be a non-empty string, got {!r}'.format(name))
        if name in ('.', '..') or _ILLEGAL_SEGMENT.search(name):
            raise InvalidPathError('Illegal path segment {!r}'.format(name))
        return self._derive(segments=self._segments + (Segment(name),), query=())

    def with_id(self, id):
        """
        :param id: string or integer id of an item
        :raises InvalidPathError: if the path is empty, ``id`` is empty or the terminal segment already has a selector
        """
        if not self._segments:
            raise InvalidPathError('Cannot select an id on an empty path')
        if _is_empty_id(id):
            raise InvalidPathError('Id selector must not be empty')
        last = self._segments[-1]
        if last.id is not None:
            raise InvalidPathError('"{}" already has the id selector {!r}'.format(last.name, last.id))
        return self._derive(segments=self._segments[:-1] + (Segment(last.name, id),))

    def with_query(self, *args, **kwargs):
        """
        Adds query decorations. Accepts a mapping or iterable of pairs and/or keyword arguments. A key that is
        already present keeps its position and takes the new value.
        """
        updates = []
        for arg in args:
            updates.extend(arg.items() if hasattr(arg, 'items') else arg)
        updates.extend(kwargs.items())

        query = list(self._query)
        for key, value in updates:
            for i, (k, _) in enumerate(query):
                if k == key:
                    query[i] = (key, value)
                    break
            else:
                query.append((key, value))
        return self._derive(query=query)

    def to_request_path(self):
        """
        Renders the path as it is sent on the wire, without a leading slash.
        """
        parts = []
        for segment in self._segments:
            if segment.id is None:
                parts.append(segment.name)
            else:
                parts.append(segment.name + _render_id(segment.id, self._id_style))

        rendered = '/'.join(parts)
        if self._query:
            rendered += '?' + '&'.join('{}={}'.format(quote(str(k), safe=_QUERY_SAFE),
                                                      quote(str(v), safe=_QUERY_SAFE))
                                       for k, v in self._query)
        return rendered

    def __len__(self):
        return len(self._segments)

    def __eq__(self, other):
        if not isinstance(other, Path):
            return NotImplemented
        return (self._segments, self._query, self._id_style) == (other._segments, other._query, other._id_style)

    def __hash__(self):
        return hash((self._segments, self._query, self._id_style))

    def __str__(self):
        return self.to_request_path()

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self.to_request_path())
