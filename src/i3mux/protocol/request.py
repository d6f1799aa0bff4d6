""" The request/reply side of the protocol. Every query or command is one
    request frame followed by one reply frame of the same kind; the
    :class:`Requests` mixin below turns each operation into that exchange
    plus the decoding of the reply into its typed form.

    The mixin relies on a single method, ``call(kind, payload, accept)``,
    which must send the request and return the raw payload of the matching
    reply. Both :class:`i3mux.Connection` and :class:`i3mux.Client`
    provide one.
"""

from .. import json
from .. import reply
from . import fields
from .subscribe import encode_topics


def is_not_object(payload):
    """ Accept any bar reply that is not a JSON object: a bar id list is an
        array, and a malformed reply should reach the decoder rather than
        be left waiting in the buffer.
    """

    return payload.lstrip()[:1] != b'{'


def is_not_array(payload):
    """ The counterpart of :func:`is_not_object`, for bar configurations.
    """

    return payload.lstrip()[:1] != b'['


def _text(value):

    try:
        value.decode
    except AttributeError:
        value = str(value)
        value = value.encode()

    return value


def decode(function, payload):
    """ Parse *payload* as JSON and hand it to the decoder *function*.
    """

    return function(json.decode(payload))



class Requests:
    """ Typed i3 IPC operations, for classes that provide :func:`call`.
    """

    def call(self, kind, payload=b'', accept=None):
        raise NotImplementedError('subclasses must implement call()')


    def command(self, text):
        """ Run one or more i3 commands, separated by commas or semicolons
            as in the i3 configuration file. Returns a list of
            :class:`i3mux.reply.CommandOutcome`, one per command.
        """

        payload = self.call(fields.RUN_COMMAND, _text(text))
        return decode(reply.decode_command, payload)


    def get_workspaces(self):
        payload = self.call(fields.GET_WORKSPACES)
        return decode(reply.decode_workspaces, payload)


    def subscribe(self, topics):
        """ Subscribe to the named event *topics*, for example
            ``('workspace', 'window')``. Returns the
            :class:`i3mux.reply.CommandOutcome` i3 sends in reply.
        """

        request = encode_topics(topics)
        payload = self.call(fields.SUBSCRIBE, request)
        return decode(reply.decode_command_outcome, payload)


    def get_outputs(self):
        payload = self.call(fields.GET_OUTPUTS)
        return decode(reply.decode_outputs, payload)


    def get_tree(self):
        """ Return the root :class:`i3mux.reply.Node` of the layout tree.
        """

        payload = self.call(fields.GET_TREE)
        return decode(reply.decode_tree, payload)


    def get_marks(self):
        payload = self.call(fields.GET_MARKS)
        return decode(reply.decode_marks, payload)


    def get_bar_ids(self):
        payload = self.call(fields.GET_BAR_CONFIG, b'', is_not_object)
        return decode(reply.decode_bar_ids, payload)


    def get_bar_config(self, bar_id):
        """ Return the :class:`i3mux.reply.BarConfig` for *bar_id*. This
            shares its message kind with :func:`get_bar_ids`; the two are
            told apart by the shape of the reply.
        """

        payload = self.call(fields.GET_BAR_CONFIG, _text(bar_id), is_not_array)
        return decode(reply.decode_bar_config, payload)


    def get_version(self):
        payload = self.call(fields.GET_VERSION)
        return decode(reply.decode_version, payload)


    def get_binding_modes(self):
        payload = self.call(fields.GET_BINDING_MODES)
        return decode(reply.decode_binding_modes, payload)


    def get_config(self):
        payload = self.call(fields.GET_CONFIG)
        return decode(reply.decode_config, payload)


    def send_tick(self, payload=''):
        """ Ask i3 to send a tick event carrying *payload* to every client
            subscribed to ticks.
        """

        payload = self.call(fields.SEND_TICK, _text(payload))
        return decode(reply.decode_tick, payload)


# end of class Requests


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
