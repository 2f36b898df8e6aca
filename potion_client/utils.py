import json


def encode_body(body):
    """
    Serializes a request body for the wire.

    :param body: JSON-compatible object, or ``None``
    :return: a tuple ``(content, headers)``; ``content`` is ``None`` when there is no body
    """
    if body is None:
        return None, {}
    return json.dumps(body, separators=(',', ':')).encode('utf-8'), {'Content-Type': 'application/json'}


class AttributeDict(dict):
    __getattr__ = dict.__getitem__
    __setattr__ = dict.__setitem__
