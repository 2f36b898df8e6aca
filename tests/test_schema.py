from unittest import TestCase

from potion_client import fields
from potion_client.exceptions import ValidationError
from potion_client.schema import Schema, SchemaImpl, FieldSet


class SchemaTestCase(TestCase):

    def test_schema_class(self):
        class FooSchema(Schema):

            def __init__(self, schema):
                self._schema = schema

            def schema(self):
                return self._schema

        foo_response = {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "createdAt": {"type": "string", "format": "date-time"}
            }
        }

        foo_request = {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 3},
                "properties": {
                    "type": "object",
                    "additionalProperties": {"type": "string"}
                }
            }
        }

        foo = FooSchema((foo_response, foo_request))
        bar = FooSchema({"type": "boolean"})

        self.assertEqual(foo_request, foo.request)
        self.assertEqual(foo_request, foo.create)
        self.assertEqual(foo_request, foo.update)
        self.assertEqual(foo_response, foo.response)
        self.assertEqual({"type": "boolean"}, bar.request)
        self.assertEqual({"type": "boolean"}, bar.response)
        self.assertEqual({"name": "Foo foo"}, foo.format({"name": "Foo foo"}))
        self.assertEqual(False, bar.format(False))
        self.assertEqual(True, bar.validate(True))

        with self.assertRaises(ValidationError) as cx:
            bar.validate("True")

        self.assertEqual({
            "error": "ValidationError",
            "message": "Payload failed validation",
            "errors": [{
                "validationOf": {"type": "boolean"},
                "path": (),
                "message": "'True' is not of type 'boolean'"
            }]
        }, cx.exception.as_dict())

        self.assertEqual({
            "name": "Foo",
            "properties": {
                "is": "foo"
            }
        }, foo.validate({"name": "Foo", "properties": {"is": "foo"}}))

        with self.assertRaises(ValidationError) as cx:
            foo.validate({"name": "Foo", "properties": {"is": 1}})

        self.assertEqual(("properties", "is"), cx.exception.as_dict()["errors"][0]["path"])

    def test_update_schema(self):
        foo = SchemaImpl(({"type": "object"}, {"type": "object", "required": ["name"]}, {"type": "object"}))

        self.assertEqual({}, foo.validate({}, update=True))

        with self.assertRaises(ValidationError):
            foo.validate({})

    def test_errors_sorted_by_path(self):
        foo = SchemaImpl({
            "type": "object",
            "properties": {
                "b": {"type": "string"},
                "a": {"type": "string"}
            }
        })

        with self.assertRaises(ValidationError) as cx:
            foo.validate({"b": 1, "a": 2})

        self.assertEqual([("a",), ("b",)], [e["path"] for e in cx.exception.as_dict()["errors"]])


class FieldSetTestCase(TestCase):

    def setUp(self):
        self.fs = FieldSet({
            "id": fields.String(io="r"),
            "name": fields.String(min_length=1),
            "secret": fields.String(io="c"),
            "size": fields.Integer(minimum=0)
        }, required_fields=("secret", "name"))

    def test_fieldset_schema_io(self):
        read, create, update = self.fs.schema()

        self.assertEqual({
            "type": "object",
            "properties": {
                "id": {"type": "string", "readOnly": True},
                "name": {"type": "string", "minLength": 1},
                "size": {"type": "integer", "minimum": 0}
            }
        }, read)

        self.assertEqual({
            "type": "object",
            "properties": {
                "id": {"not": {}},
                "name": {"type": "string", "minLength": 1},
                "secret": {"type": "string"},
                "size": {"type": "integer", "minimum": 0}
            },
            "required": ["name", "secret"]
        }, create)

        self.assertEqual({
            "type": "object",
            "properties": {
                "id": {"not": {}},
                "name": {"type": "string", "minLength": 1},
                "secret": {"not": {}},
                "size": {"type": "integer", "minimum": 0}
            }
        }, update)

    def test_fieldset_patchable(self):
        read, create, update = self.fs.patchable.schema()
        self.assertNotIn("required", create)

    def test_fieldset_format(self):
        self.assertEqual({"name": "Foo", "size": "3", "other": "x"},
                         dict(self.fs.format({"name": "Foo", "size": "3", "other": "x"})))

    def test_fieldset_convert(self):
        self.assertEqual({"name": "Foo", "secret": "s", "size": 3},
                         dict(self.fs.convert({"name": "Foo", "secret": "s", "size": 3})))

        for size in (3.0, "3", True):
            with self.assertRaises(ValidationError, msg=repr(size)) as cx:
                self.fs.convert({"name": "Foo", "secret": "s", "size": size})
            self.assertEqual(("size",), cx.exception.as_dict()["errors"][0]["path"])

        with self.assertRaises(ValidationError) as cx:
            self.fs.convert({"name": "Foo"})

        self.assertEqual("'secret' is a required property", cx.exception.as_dict()["errors"][0]["message"])

        with self.assertRaises(ValidationError):
            self.fs.convert({"name": "Foo", "secret": "s", "id": "1"})

    def test_fieldset_convert_update(self):
        self.assertEqual({"size": 4}, dict(self.fs.convert({"size": 4}, update=True, patchable=True)))

        with self.assertRaises(ValidationError):
            self.fs.convert({"secret": "s"}, update=True, patchable=True)

        with self.assertRaises(ValidationError):
            self.fs.convert({"size": -1}, update=True, patchable=True)

    def test_fieldset_set(self):
        fs = FieldSet({})
        fs.set("name", fields.String())

        self.assertEqual({"name": "Foo"}, dict(fs.convert({"name": "Foo"})))

    def test_fieldset_format_error_path(self):
        fs = FieldSet({
            "due": fields.DateTimeTimeZone(),
            "reminders": fields.Array(fields.DateTimeString())
        })

        with self.assertRaises(ValidationError) as cx:
            fs.convert({"due": {"dateTime": "tomorrow", "timeZone": "UTC"}})
        self.assertEqual(("due", "dateTime"), cx.exception.as_dict()["errors"][0]["path"])

        with self.assertRaises(ValidationError) as cx:
            fs.convert({"reminders": ["2021-05-01T00:00:00Z", "later"]})
        self.assertEqual(("reminders", 1), cx.exception.as_dict()["errors"][0]["path"])
