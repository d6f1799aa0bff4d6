import json
import socket
import sys
import threading

import pytest

import i3mux
from i3mux.protocol import fields
from i3mux.transport import UnixTransport


def encode_json(value):
    if isinstance(value, bytes):
        return value
    return json.dumps(value).encode()


class FakeI3:
    """ The server end of a socket pair, speaking just enough of the i3 IPC
        framing to script exchanges with a client under test.
    """

    def __init__(self, sock):
        self.transport = UnixTransport(sock, sys.byteorder)
        self.sock = sock
        self.requests = list()
        self.thread = None

    def reply(self, kind, value):
        self.transport.write_frame(kind, encode_json(value))

    def event(self, subtype, value):
        self.transport.write_frame(subtype | fields.EVENT_BIT, encode_json(value))

    def raw(self, data):
        self.transport.write_exact(data)

    def read_request(self):
        return self.transport.read_frame()

    def serve(self, handler):
        """ Answer requests on a background thread. *handler* is called with
            (kind, payload) and returns the reply value, or None to send
            nothing.
        """

        def run():
            while True:
                try:
                    kind, payload = self.transport.read_frame()
                except (i3mux.ProtocolError, OSError):
                    return

                self.requests.append((kind, payload))
                value = handler(kind, payload)
                if value is not None:
                    try:
                        self.reply(kind, value)
                    except OSError:
                        return

        self.thread = threading.Thread(target=run)
        self.thread.daemon = True
        self.thread.start()

    def close(self):
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.transport.close()


@pytest.fixture
def socket_pair():
    client_end, server_end = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    yield client_end, server_end
    client_end.close()
    server_end.close()


@pytest.fixture
def fake_i3(socket_pair):
    server = FakeI3(socket_pair[1])
    yield server
    server.close()


@pytest.fixture
def connection(socket_pair):
    transport = UnixTransport(socket_pair[0], sys.byteorder)
    conn = i3mux.Connection(transport, tick_kind=7)
    yield conn
    conn.disconnect()


def _rect(x=0, y=0, width=0, height=0):
    return {'x': x, 'y': y, 'width': width, 'height': height}


@pytest.fixture
def make_node():
    """ Return a function building the JSON for one layout tree node, with
        every required field present.
    """

    def make(id, children=(), **overrides):
        node = {
            'id': id,
            'name': 'node %d' % (id),
            'type': 'con',
            'border': 'normal',
            'current_border_width': 2,
            'layout': 'splith',
            'percent': None,
            'rect': _rect(0, 0, 1920, 1080),
            'window_rect': _rect(2, 0, 1916, 1078),
            'deco_rect': _rect(0, 0, 0, 0),
            'geometry': _rect(0, 0, 800, 600),
            'window': None,
            'urgent': False,
            'focused': False,
            'nodes': list(children),
        }
        node.update(overrides)
        return node

    return make


@pytest.fixture
def bar_config_json():
    return {
        'id': 'bar-0',
        'mode': 'dock',
        'position': 'bottom',
        'status_command': 'i3status',
        'font': 'pango:monospace 8',
        'workspace_buttons': True,
        'binding_mode_indicator': True,
        'verbose': False,
        'colors': {
            'background': '#000000',
            'statusline': '#ffffff',
            'focused_workspace_bg': '#4c7899',
        },
    }


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
