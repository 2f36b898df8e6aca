import logging
from datetime import datetime, date, timezone

import aniso8601
import jsonschema

from .exceptions import ValidationError
from .schema import Schema

log = logging.getLogger(__name__)


class Raw(Schema):
    """
    This is the base class for all field types, can be given any JSON-schema.

    >>> f = fields.Raw({"type": "string"}, io="r")
    >>> f.response
    {'readOnly': True, 'type': 'string'}

    :param io: one or more of "r" (read), "c" (create), "u" (update) and "w" (write), default: "rw";
     used to control which payloads may contain the field
    :param schema: JSON-schema for field, or :class:`callable` resolving to a JSON-schema when called
    :param nullable: whether the field is nullable.
    :param title: optional title for JSON schema
    :param description: optional description for JSON schema
    """

    def __init__(self, schema, io="rw", nullable=False, title=None, description=None):
        self._schema = schema
        self.nullable = nullable
        self.title = title
        self.description = description
        self.io = io

    def _finalize_schema(self, schema, io):
        """
        :return: new schema updated for field `nullable`, `title` and `description` attributes.
        """
        schema = dict(schema)

        if self.io == "r" and "r" in io:
            schema["readOnly"] = True

        if "null" in schema.get("type", []):
            self.nullable = True
        elif self.nullable:
            # enum is independent of type validation:
            if "enum" in schema and None not in schema["enum"]:
                schema["enum"] = schema["enum"] + [None]

            if "type" in schema:
                type_ = schema["type"]
                if isinstance(type_, (str, dict)):
                    schema["type"] = [type_, "null"]
                else:
                    schema["type"] = type_ + ["null"]

            if "anyOf" in schema:
                if not any("null" in choice.get("type", []) for choice in schema["anyOf"]):
                    schema["anyOf"] = schema["anyOf"] + [{"type": "null"}]
            elif "type" not in schema:
                log.warning('%s is nullable but "null" type cannot be added', self)

        for attr in ("title", "description"):
            value = getattr(self, attr)
            if value is not None:
                schema[attr] = value
        return schema

    @property
    def io(self):
        return self._io

    @io.setter
    def io(self, value):
        io = ''
        if 'w' in value or 'c' in value:
            io += 'c'
        if 'r' in value:
            io += 'r'
        if 'w' in value or 'u' in value:
            io += 'u'
        self._io = io

    def schema(self):
        """
        JSON schema representation
        """
        schema = self._schema
        if callable(schema):
            schema = schema()

        if isinstance(schema, Schema):
            read_schema, write_schema = schema.response, schema.request
        elif isinstance(schema, tuple):
            read_schema, write_schema = schema
        else:
            return self._finalize_schema(schema, "r"), self._finalize_schema(schema, "w")

        return self._finalize_schema(read_schema, "r"), self._finalize_schema(write_schema, "w")

    def format(self, value):
        """
        Format a Python value representation for output in JSON. Noop by default.

        Formatting never coerces a value of the wrong type; such values are passed through and rejected when the
        payload is validated.
        """
        if value is not None:
            return self.formatter(value)
        return value

    def formatter(self, value):
        return value

    def __repr__(self):
        return '{}(io={})'.format(self.__class__.__name__, repr(self.io))


class Any(Raw):
    """
    A field type that allows any value.
    """
    def __init__(self, **kwargs):
        super(Any, self).__init__({"type": ["null", "string", "number", "boolean", "object", "array"]}, **kwargs)


def _field_from_object(parent, cls_or_instance):
    if isinstance(cls_or_instance, type):
        container = cls_or_instance()
    else:
        container = cls_or_instance
    if not isinstance(container, Schema):
        raise RuntimeError('{} expected Raw or Schema, but got {}'.format(parent, container.__class__.__name__))
    if not isinstance(container, Raw):
        container = Raw(container)
    return container


class Array(Raw):
    """
    A field for an array of a given field type.

    :param Raw cls_or_instance: field class or instance
    :param int min_items: minimum number of items
    :param int max_items: maximum number of items
    :param bool unique: if ``True``, all values in the list must be unique
    """

    def __init__(self, cls_or_instance, min_items=None, max_items=None, unique=None, **kwargs):
        self.container = container = _field_from_object(self, cls_or_instance)

        schema_properties = [('type', 'array')]
        schema_properties += [(k, v) for k, v in [('minItems', min_items), ('maxItems', max_items), ('uniqueItems', unique)] if v is not None]
        schema = lambda s: dict([('items', s)] + schema_properties)

        super(Array, self).__init__(lambda: (schema(container.response), schema(container.request)), **kwargs)

    def formatter(self, value):
        if not isinstance(value, (list, tuple)):
            return value

        output = []
        for i, item in enumerate(value):
            try:
                output.append(self.container.format(item))
            except ValidationError as e:
                raise e.descend(i)
        return output


List = Array


class Object(Raw):
    """
    A field for an object with named properties, properties all of a single type, or both.

    Unknown properties are passed through unchanged when formatting.

    :param properties: field class, instance, or dictionary of {property: field} pairs
    :param additional_properties: field class or instance; ``True`` allows any value, ``False`` forbids them
    """

    def __init__(self, properties=None, additional_properties=True, **kwargs):
        self.properties = None
        self.additional_properties = None

        if isinstance(properties, dict):
            self.properties = properties
        elif isinstance(properties, (type, Raw)):
            self.additional_properties = _field_from_object(self, properties)

        if isinstance(additional_properties, (type, Raw)):
            self.additional_properties = _field_from_object(self, additional_properties)
        elif additional_properties is True and self.additional_properties is None:
            self.additional_properties = Any()

        def schema():
            request = {"type": "object"}
            response = {"type": "object"}

            for schema, attr in ((request, "request"), (response, "response")):
                if self.properties:
                    schema["properties"] = {key: getattr(field, attr) for key, field in self.properties.items()}
                if self.additional_properties:
                    schema["additionalProperties"] = getattr(self.additional_properties, attr)
                else:
                    schema["additionalProperties"] = False

            return response, request

        super(Object, self).__init__(schema, **kwargs)

    def formatter(self, value):
        if not isinstance(value, dict):
            return value

        properties = self.properties or {}
        output = {}
        for key, item in value.items():
            field = properties.get(key, self.additional_properties)
            try:
                output[key] = item if field is None else field.format(item)
            except ValidationError as e:
                raise e.descend(key)
        return output


class String(Raw):
    """
    :param int min_length: minimum length of string
    :param int max_length: maximum length of string
    :param str pattern: regex pattern that the string must match
    :param list enum: list of strings with enumeration
    """

    def __init__(self, min_length=None, max_length=None, pattern=None, enum=None, format=None, **kwargs):
        schema = {"type": "string"}

        if enum is not None:
            enum = list(enum)

        for v, k in ((min_length, 'minLength'),
                     (max_length, 'maxLength'),
                     (pattern, 'pattern'),
                     (enum, 'enum'),
                     (format, 'format')):
            if v is not None:
                schema[k] = v

        super(String, self).__init__(schema, **kwargs)


class Uri(String):
    def __init__(self, **kwargs):
        super(Uri, self).__init__(format="uri", **kwargs)


class Boolean(Raw):
    def __init__(self, **kwargs):
        super(Boolean, self).__init__({"type": "boolean"}, **kwargs)


class Integer(Raw):

    def __init__(self, minimum=None, maximum=None, **kwargs):
        schema = {"type": "integer"}

        if minimum is not None:
            schema['minimum'] = minimum
        if maximum is not None:
            schema['maximum'] = maximum

        super(Integer, self).__init__(schema, **kwargs)


class Number(Raw):
    def __init__(self,
                 minimum=None,
                 maximum=None,
                 **kwargs):

        schema = {"type": "number"}

        if minimum is not None:
            schema['minimum'] = minimum
        if maximum is not None:
            schema['maximum'] = maximum

        super(Number, self).__init__(schema, **kwargs)


def _invalid_datetime(value, message):
    return ValidationError([jsonschema.exceptions.ValidationError(
        message, validator='format', validator_value='date-time', instance=value)])


def _parse_datetime(value):
    try:
        return aniso8601.parse_datetime(value)
    except ValueError:
        raise _invalid_datetime(value, '{!r} is not an ISO 8601 date-time'.format(value))


class DateTimeString(Raw):
    """
    A field for ISO8601-formatted date-time strings. Accepts :class:`datetime.datetime` objects or ISO8601 strings,
    which are normalized.
    """

    def __init__(self, **kwargs):
        super(DateTimeString, self).__init__({"type": "string", "format": "date-time"}, **kwargs)

    def formatter(self, value):
        if isinstance(value, str):
            value = _parse_datetime(value)
        elif not isinstance(value, datetime):
            return value

        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class DateTimeTimeZone(Object):
    """
    A ``dateTimeTimeZone`` object as used by Microsoft Graph:

    ::

        {"dateTime": "2021-05-01T00:00:00", "timeZone": "UTC"}

    Accepts such an object or a :class:`datetime.datetime`/:class:`datetime.date`; naive values are taken to be UTC.
    A ``dateTime`` string with a UTC offset is converted to UTC; it is rejected when ``timeZone`` names another zone.
    """

    def __init__(self, **kwargs):
        super(DateTimeTimeZone, self).__init__({
            "dateTime": String(),
            "timeZone": String()
        }, additional_properties=False, **kwargs)

    @staticmethod
    def _format_object(value):
        value = dict(value)
        if not isinstance(value.get('dateTime'), str):
            return value

        moment = _parse_datetime(value['dateTime'])
        if moment.tzinfo is not None:
            if value.get('timeZone', 'UTC') != 'UTC':
                raise _invalid_datetime(value['dateTime'], '{!r} has a UTC offset, but the time zone is {!r}'.format(
                    value['dateTime'], value['timeZone']))
            moment = moment.astimezone(timezone.utc)
            value['timeZone'] = 'UTC'

        value['dateTime'] = moment.replace(tzinfo=None).isoformat()
        return value

    def formatter(self, value):
        if isinstance(value, dict):
            try:
                return self._format_object(value)
            except ValidationError as e:
                raise e.descend('dateTime')

        if not isinstance(value, date):
            return value

        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)

        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)

        return {
            "dateTime": value.replace(tzinfo=None).isoformat(),
            "timeZone": "UTC"
        }
