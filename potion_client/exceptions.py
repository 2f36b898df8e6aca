class PotionClientException(Exception):
    """
    Base class for every error raised by the client.

    Errors raised before a request is submitted are *local*; only :class:`TransportError` originates
    from the remote service.
    """
    message = None

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super(PotionClientException, self).__init__(self.message)

    def as_dict(self):
        return {
            'error': self.__class__.__name__,
            'message': self.message
        }


class InvalidPathError(PotionClientException):
    message = 'Invalid path'


class InvalidArgumentError(PotionClientException):
    message = 'Invalid argument'


class PreconditionError(PotionClientException):
    message = 'Precondition failed'


class UnsupportedOperationError(PotionClientException, AttributeError):

    def __init__(self, node, operation):
        self.node = node
        self.operation = operation
        super(UnsupportedOperationError, self).__init__(
            '{} does not support "{}"'.format(node.__class__.__name__, operation))

    def as_dict(self):
        dct = super(UnsupportedOperationError, self).as_dict()
        dct['operation'] = self.operation
        return dct


class ValidationError(PotionClientException):
    message = 'Payload failed validation'

    def __init__(self, errors, root=None):
        self.root = root
        self.errors = list(errors)
        super(ValidationError, self).__init__()

    def descend(self, key):
        """
        Prefixes the path of every error with ``key``, the property or index the errors were found in.
        """
        for error in self.errors:
            error.path.appendleft(key)
        return self

    def _complete_path(self, error):
        path = tuple(error.absolute_path)
        if self.root is not None:
            return (self.root,) + path
        return path

    def _format_errors(self):
        for error in self.errors:
            yield {
                'validationOf': {error.validator: error.validator_value},
                'path': self._complete_path(error),
                'message': error.message
            }

    def as_dict(self):
        dct = super(ValidationError, self).as_dict()
        dct['errors'] = list(self._format_errors())
        return dct


class TransportError(PotionClientException):
    message = 'Request failed'

    def __init__(self, status_code=None, message=None, details=None):
        self.status_code = status_code
        self.details = details
        super(TransportError, self).__init__(message)

    def __str__(self):
        if self.status_code is None:
            return self.message
        return '{} ({})'.format(self.message, self.status_code)

    def as_dict(self):
        dct = super(TransportError, self).as_dict()
        dct['status'] = self.status_code
        if self.details is not None:
            dct['details'] = self.details
        return dct
