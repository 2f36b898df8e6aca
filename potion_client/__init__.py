from .client import Client
from .capabilities import Trait, GetById, Addable, Updateable, Deletable, DeltaEnabled, DeltaPage
from .exceptions import (
    PotionClientException,
    InvalidPathError,
    InvalidArgumentError,
    PreconditionError,
    ValidationError,
    UnsupportedOperationError,
    TransportError
)
from .path import Path
from .queryable import Queryable, Collection, Instance, PendingRequest
from .reference import SubResource
from .transport import Transport, HttpxTransport

__all__ = (
    'Client',
    'Queryable',
    'Collection',
    'Instance',
    'PendingRequest',
    'Path',
    'SubResource',
    'Trait',
    'GetById',
    'Addable',
    'Updateable',
    'Deletable',
    'DeltaEnabled',
    'DeltaPage',
    'Transport',
    'HttpxTransport',
    'PotionClientException',
    'InvalidPathError',
    'InvalidArgumentError',
    'PreconditionError',
    'ValidationError',
    'UnsupportedOperationError',
    'TransportError',
    'fields',
    'schema',
    'signals',
    'todo',
    'users'
)
