from importlib import import_module
import inspect
import sys


class QueryableReference(object):
    """
    A reference to a :class:`Queryable` class that may not have been defined yet.

    References can be one of the following:

    - a :class:`Queryable` class
    - ``"self"`` --- which resolves to the class the reference is bound to
    - a string with a class name defined in the module of the class the reference is bound to
    - a string with a module name and class name, e.g. ``"potion_client.todo.Task"``
    """

    def __init__(self, value):
        self.value = value

    def resolve(self, binding=None):
        """
        Attempt to resolve the reference value and return the matching :class:`Queryable` class.

        :param binding: the class this reference was declared on
        """
        name = self.value

        if name == 'self':
            return binding

        from .queryable import Queryable
        if inspect.isclass(name) and issubclass(name, Queryable):
            return name

        if isinstance(name, str):
            if '.' in name:
                module_name, class_name = name.rsplit('.', 1)
                return getattr(import_module(module_name), class_name)

            if binding is not None:
                module = sys.modules.get(binding.__module__)
                target = getattr(module, name, None)
                if inspect.isclass(target) and issubclass(target, Queryable):
                    return target

        if binding is not None:
            raise RuntimeError('Queryable named "{}" cannot be found in module "{}".'.format(name, binding.__module__))
        raise RuntimeError('Queryable named "{}" cannot be found; the reference is not bound.'.format(name))

    def __repr__(self):
        return "<QueryableReference '{}'>".format(self.value)


class QueryableBound(object):
    queryable = None

    def _on_bind(self, queryable):
        pass

    def bind(self, queryable):
        if self.queryable is None:
            self.queryable = queryable
            self._on_bind(queryable)
        elif self.queryable != queryable:
            return self.rebind(queryable)
        return self

    def rebind(self, queryable):
        raise NotImplementedError('{} is already bound to {}'
                                  ' and does not support rebinding to {}'.format(repr(self), self.queryable, queryable))


class SubResource(QueryableBound):
    """
    An accessor for a resource nested below another, e.g. the tasks of a task list.

    Reading the attribute from a node returns a new node of the ``target`` class derived from that node. Each access
    creates a new, independent node.

    Usage example:

    .. code-block:: python

        class TaskList(Updateable, Deletable, Instance):
            tasks = SubResource('Tasks')

    :param target: a reference to the child class, as accepted by :class:`QueryableReference`
    :param str path: an optional path literal used instead of the child's default path
    """

    def __init__(self, target, path=None):
        self.reference = QueryableReference(target)
        self.path = path
        self.attribute = None

    def rebind(self, queryable):
        # inherited accessors resolve relative to the class they were declared on
        return self

    @property
    def target(self):
        return self.reference.resolve(self.queryable)

    def __get__(self, obj, owner):
        if obj is None:
            return self
        return self.target(obj, self.path)

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self.reference.value)
