''' Select the fastest available JSON library for i3 payloads. A layout tree
    on a busy desktop runs to hundreds of kilobytes and is requested often,
    so msgspec is preferred, then orjson, then the standard :mod:`json`.
    The ``I3MUX_JSON`` environment variable, if set when this module is
    first imported, names the backend to use instead.

    Whichever backend is chosen, :func:`dumps` returns bytes and
    :func:`decode` reports malformed input as
    :class:`i3mux.errors.BadReply`.
'''

import os

from .errors import BadReply

backends = ('msgspec', 'orjson', 'json')


def _load(name):

    if name == 'msgspec':
        import msgspec
        encoder = msgspec.json.Encoder()
        decoder = msgspec.json.Decoder()
        return encoder.encode, decoder.decode, msgspec.DecodeError

    if name == 'orjson':
        import orjson
        return orjson.dumps, orjson.loads, orjson.JSONDecodeError

    if name == 'json':
        import json

        def json_dumps(value):
            return json.dumps(value).encode()

        return json_dumps, json.loads, ValueError

    raise ValueError('unknown JSON backend: ' + repr(name))



def _select():

    requested = os.environ.get('I3MUX_JSON')

    if requested:
        return (requested,) + _load(requested)

    for name in backends:
        try:
            return (name,) + _load(name)
        except ImportError:
            continue

    raise ImportError('no JSON backend available')


backend, dumps, loads, DecodeError = _select()



def decode(payload):
    """ Parse a raw reply or event *payload* as JSON. An empty payload is
        as malformed as a truncated one.
    """

    if len(payload) == 0:
        raise BadReply('invalid JSON payload: empty')

    try:
        return loads(payload)
    except DecodeError as e:
        raise BadReply('invalid JSON payload: ' + str(e)) from e


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
