from .capabilities import GetById
from .queryable import Collection, Instance
from .reference import SubResource


class User(Instance):
    todo = SubResource('potion_client.todo.Todo')


class Users(GetById, Collection):
    class Meta:
        default_path = 'users'
        item = 'User'


class Me(User):
    """
    The signed-in user.
    """

    class Meta:
        default_path = 'me'
