import logging

import httpx

from .exceptions import TransportError
from .utils import encode_body

log = logging.getLogger(__name__)


class Transport(object):
    """
    The contract between nodes and the HTTP layer. A transport submits one request and returns the parsed payload
    or raises :class:`exceptions.TransportError`. It is responsible for authentication, retries and timeouts.
    """

    async def submit(self, request):
        """
        :param queryable.PendingRequest request:
        :return: parsed response payload
        """
        raise NotImplementedError()

    async def aclose(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


class HttpxTransport(Transport):
    """
    A transport based on :class:`httpx.AsyncClient`.

    Request paths are resolved against ``base_url``. Responses with a 2xx status are parsed as JSON (or returned as
    text when they are not JSON); an empty response body yields ``None``. No request is retried.

    :param str base_url: service root, e.g. ``'https://graph.microsoft.com/v1.0'``
    :param auth: an :mod:`httpx` authentication, used when the transport creates its own client
    :param float timeout: timeout in seconds, used when the transport creates its own client
    :param dict headers: headers sent with every request
    :param httpx.AsyncClient client: an optional client to use; it is not closed by :meth:`aclose`
    """

    def __init__(self, base_url, auth=None, timeout=10, headers=None, client=None):
        self.base_url = base_url.rstrip('/')
        self.auth = auth
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._client = client
        self._owns_client = client is None

    @property
    def client(self):
        if self._client is None:
            self._client = httpx.AsyncClient(auth=self.auth, timeout=self.timeout)
        return self._client

    def _full_url(self, request):
        return '{}/{}'.format(self.base_url, request.path.lstrip('/'))

    @staticmethod
    def _parse(response):
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(response, data):
        error = data.get('error') if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get('message'):
            return error['message']
        return response.reason_phrase or 'Request failed'

    async def submit(self, request):
        url = self._full_url(request)
        content, headers = encode_body(request.body)
        headers = dict(self.headers, **headers)
        headers.update(request.headers or {})

        log.debug('Request: %s %s', request.method, url)

        try:
            response = await self.client.request(request.method, url, content=content, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(None, '{} {} failed: {}'.format(request.method, url, e), details={
                'method': request.method,
                'url': url
            }) from e

        log.debug('Response: %s %s %s', response.status_code, request.method, url)

        data = self._parse(response)
        if response.is_success:
            return data

        raise TransportError(response.status_code, self._error_message(response, data), details={
            'method': request.method,
            'url': url,
            'body': data
        })

    async def aclose(self):
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
