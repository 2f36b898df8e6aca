from collections import OrderedDict
from functools import cached_property

from jsonschema import Draft4Validator, FormatChecker

from .exceptions import ValidationError


class Schema(object):
    """
    The base class for all types with a schema. Has :attr:`response` and a :attr:`request` attributes
    for the schema to be used, respectively, for data returned by the service and data sent to it.

    Any class inheriting from schema needs to implement :meth:`schema`.

    ..  attribute:: response

        JSON-schema describing data returned by the service.

    .. attribute:: request

        JSON-schema used for validation of data sent to the service.

    """

    def schema(self):
        """
        Abstract method returning the JSON schema used by both :attr:`response` and :attr:`request`.

        :return: a JSON-schema or a tuple of JSON-schemas in the formats ``(response_schema, request_schema)`` or
            ``(read_schema, create_schema, update_schema)``
        """
        raise NotImplementedError()

    @cached_property
    def response(self):
        schema = self.schema()
        if isinstance(schema, tuple):
            return schema[0]
        return schema

    @cached_property
    def request(self):
        schema = self.schema()
        if isinstance(schema, tuple):
            return schema[1]
        return schema

    @property
    def create(self):
        return self.request

    @cached_property
    def update(self):
        schema = self.schema()
        if isinstance(schema, tuple):
            return schema[-1]
        return schema

    @cached_property
    def _validator(self):
        Draft4Validator.check_schema(self.request)
        return Draft4Validator(self.request, format_checker=FormatChecker())

    @cached_property
    def _update_validator(self):
        Draft4Validator.check_schema(self.update)
        return Draft4Validator(self.update, format_checker=FormatChecker())

    def format(self, value):
        """
        Formats a python object for JSON serialization. Noop by default.

        :param object value:
        :return:
        """
        return value

    def validate(self, instance, update=False):
        """
        Validates a JSON-compatible object against :attr:`request`, or :attr:`update` when ``update`` is ``True``.

        :param instance: JSON object
        :raises ValidationError: if validation failed
        :return: ``instance``
        """
        if update:
            validator = self._update_validator
        else:
            validator = self._validator

        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
        if errors:
            raise ValidationError(errors)
        return instance


class SchemaImpl(Schema):
    def __init__(self, schema):
        self._schema = schema

    def schema(self):
        return self._schema


class FieldSet(Schema):
    """
    A schema representation of a dictionary of :class:`fields.Raw` objects.

    Uses the fields' ``io`` attributes to determine whether they may be sent when creating or updating. Read-only
    fields are rejected in request payloads; properties that are not declared are passed through.

    :param dict fields: a dictionary of :class:`fields.Raw` objects
    :param required_fields: a list or tuple of field names that are required when creating
    """

    def __init__(self, fields, required_fields=None):
        self.fields = fields or {}
        self.required = set(required_fields or ())

    def set(self, key, field):
        self.fields[key] = field

    def _request_properties(self, io):
        properties = OrderedDict()
        for key, field in self.fields.items():
            if io in field.io:
                properties[key] = field.request
            else:
                # never valid
                properties[key] = {"not": {}}
        return properties

    def _schema(self, patchable=False):
        read_schema = {
            "type": "object",
            "properties": OrderedDict((
                (key, field.response) for key, field in self.fields.items() if 'r' in field.io))
        }

        create_schema = {
            "type": "object",
            "properties": self._request_properties('c')
        }

        update_schema = {
            "type": "object",
            "properties": self._request_properties('u')
        }

        if not patchable and self.required:
            create_schema['required'] = sorted(self.required)

        return read_schema, create_schema, update_schema

    def schema(self):
        return self._schema()

    @cached_property
    def patchable(self):
        return SchemaImpl(self._schema(True))

    def format(self, payload):
        """
        Formats the declared properties of ``payload`` for JSON serialization; other properties are copied as-is.
        """
        output = OrderedDict()
        for key, value in payload.items():
            field = self.fields.get(key)
            try:
                output[key] = value if field is None else field.format(value)
            except ValidationError as e:
                raise e.descend(key)
        return output

    def convert(self, payload, update=False, patchable=False):
        """
        Formats and validates a request payload. Values of the wrong type are left as they are by formatting and
        rejected by validation.

        :param dict payload: properties to send
        :param bool update: whether to validate against the update schema
        :param bool patchable: when ``True`` does not check for required fields
        :raises ValidationError: if validation failed
        :return: the formatted payload
        """
        instance = self.format(payload)
        if patchable:
            self.patchable.validate(instance, update)
        else:
            self.validate(instance, update)
        return instance
