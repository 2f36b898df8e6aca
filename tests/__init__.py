import json
from collections import deque
from pprint import pformat
from unittest import IsolatedAsyncioTestCase

from potion_client import Client, Transport


class RecordingTransport(Transport):
    """
    Records submitted requests and answers them with queued responses. A queued exception is raised instead of
    being returned.
    """

    def __init__(self):
        self.requests = []
        self.responses = deque()

    def respond(self, *payloads):
        self.responses.extend(payloads)
        return self

    async def submit(self, request):
        self.requests.append(request)
        payload = self.responses.popleft() if self.responses else None
        if isinstance(payload, Exception):
            raise payload
        return payload

    @property
    def last(self):
        return self.requests[-1]

    def display_all(self):
        return pformat([tuple(r) for r in self.requests])

    def assert_count(self, expected):
        count = len(self.requests)
        assert count == expected, self.display_all()


class BaseTestCase(IsolatedAsyncioTestCase):

    def setUp(self):
        super(BaseTestCase, self).setUp()
        self.transport = RecordingTransport()
        self.client = self.create_client()

    def create_client(self, **config):
        return Client('https://example.com/v1.0', transport=self.transport, **config)

    def assertJSONEqual(self, first, second, msg=None):
        self.assertEqual(json.loads(json.dumps(first)), json.loads(json.dumps(second)), msg)

    def assertRequest(self, method, path, body=None, request=None):
        request = request or self.transport.last
        self.assertEqual(method, request.method)
        self.assertEqual(path, request.path)
        self.assertJSONEqual(body, request.body)
