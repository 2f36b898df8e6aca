from blinker import Namespace

_potion_client = Namespace()

before_request = _potion_client.signal('before-request')

after_request = _potion_client.signal('after-request')

request_failed = _potion_client.signal('request-failed')

before_add = _potion_client.signal('before-add')

after_add = _potion_client.signal('after-add')

before_update = _potion_client.signal('before-update')

after_update = _potion_client.signal('after-update')

before_delete = _potion_client.signal('before-delete')

after_delete = _potion_client.signal('after-delete')
