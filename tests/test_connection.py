import json
import socket
import struct
import sys

import pytest

import i3mux
from i3mux.protocol import fields
from i3mux.protocol import message
from i3mux.transport import UnixTransport


def test_command(connection, fake_i3):

    fake_i3.reply(fields.RUN_COMMAND, [{'success': True}, {'success': False, 'error': 'bad'}])

    outcomes = connection.command('focus left; nop')

    assert [outcome.success for outcome in outcomes] == [True, False]
    assert outcomes[1].error == 'bad'

    kind, payload = fake_i3.read_request()
    assert kind == fields.RUN_COMMAND
    assert payload == b'focus left; nop'


def test_request_frames(connection, fake_i3):

    fake_i3.reply(fields.GET_MARKS, [])
    connection.get_marks()

    fake_i3.reply(fields.SEND_TICK, {'success': True})
    assert connection.send_tick('ping').success == True

    assert fake_i3.read_request() == (fields.GET_MARKS, b'')
    assert fake_i3.read_request() == (fields.SEND_TICK, b'ping')


def test_events_interleaved_with_reply(connection, fake_i3):

    fake_i3.event(fields.EVENT_MODE, {'change': 'resize'})
    fake_i3.event(fields.EVENT_MODE, {'change': 'default'})
    fake_i3.reply(fields.GET_BINDING_MODES, ['default', 'resize'])
    fake_i3.event(fields.EVENT_SHUTDOWN, {'change': 'exit'})

    assert connection.get_binding_modes() == ['default', 'resize']

    first = connection.next_event()
    second = connection.next_event()
    third = connection.next_event()

    assert first.change == 'resize'
    assert second.change == 'default'
    assert third.change == i3mux.event.ShutdownChange.EXIT


def test_bar_ids_and_config_share_a_kind(connection, fake_i3, bar_config_json):

    # A bar config reply that arrives first must not be mistaken for the
    # id list, and must still be there for the config request after.

    fake_i3.reply(fields.GET_BAR_CONFIG, bar_config_json)
    fake_i3.reply(fields.GET_BAR_CONFIG, ['bar-0'])

    assert connection.get_bar_ids() == ['bar-0']
    assert len(connection.demux.pending_replies) == 1

    config = connection.get_bar_config('bar-0')
    assert config.id == 'bar-0'
    assert len(connection.demux.pending_replies) == 0

    assert fake_i3.read_request() == (fields.GET_BAR_CONFIG, b'')
    assert fake_i3.read_request() == (fields.GET_BAR_CONFIG, b'bar-0')


def test_bar_reply_of_neither_shape(connection, fake_i3):

    fake_i3.reply(fields.GET_BAR_CONFIG, 'neither')

    with pytest.raises(i3mux.BadReply):
        connection.get_bar_ids()

    # Decoding errors leave the connection usable.
    fake_i3.reply(fields.GET_MARKS, ['m'])
    assert connection.get_marks() == ['m']


def test_bad_reply_keeps_connection(connection, fake_i3):

    fake_i3.reply(fields.GET_VERSION, b'{"major": ')

    with pytest.raises(i3mux.BadReply):
        connection.get_version()

    assert connection.closed == False

    fake_i3.reply(fields.GET_CONFIG, {'config': 'bar {}'})
    assert connection.get_config().config == 'bar {}'


def test_truncated_frame_closes(connection, fake_i3):

    header = message.encode(fields.GET_TREE, b'x' * 100, sys.byteorder)[:fields.HEADER_SIZE]
    fake_i3.raw(header + b'x' * 10)
    fake_i3.sock.shutdown(socket.SHUT_WR)

    with pytest.raises(i3mux.UnexpectedEof):
        connection.get_tree()

    assert connection.closed == True
    assert isinstance(connection.failure, i3mux.UnexpectedEof)

    with pytest.raises(i3mux.ConnectionClosed):
        connection.get_tree()

    with pytest.raises(i3mux.ConnectionClosed):
        connection.next_event()


def test_bad_magic_closes(connection, fake_i3):

    fake_i3.raw(b'i3-IPC' + struct.pack('=II', 2, fields.GET_MARKS) + b'[]')

    with pytest.raises(i3mux.BadMagic) as caught:
        connection.get_marks()

    assert caught.value.got == b'i3-IPC'

    with pytest.raises(i3mux.ConnectionClosed):
        connection.get_marks()


def test_subscribe(connection, fake_i3):

    fake_i3.reply(fields.SUBSCRIBE, {'success': True})

    outcome = connection.subscribe(['window', 'tick'])
    assert outcome.success == True

    kind, payload = fake_i3.read_request()
    assert kind == fields.SUBSCRIBE
    assert json.loads(payload) == ['window', 'tick']


def test_subscribe_unknown_topic(connection, fake_i3):

    with pytest.raises(ValueError):
        connection.subscribe(['window', 'weather'])


def test_unknown_event_is_consumed(connection, fake_i3):

    fake_i3.event(42, {})
    fake_i3.event(7, {'first': True, 'payload': ''})

    with pytest.raises(i3mux.UnknownType):
        connection.next_event()

    tick = connection.next_event()
    assert tick.first == True


def test_events_generator(connection, fake_i3):

    fake_i3.event(fields.EVENT_OUTPUT, {'change': 'unspecified'})
    fake_i3.event(fields.EVENT_MODE, {'change': 'default'})

    events = connection.events()
    assert next(events).topic == 'output'
    assert next(events).topic == 'mode'

    connection.disconnect()

    with pytest.raises(StopIteration):
        next(events)


def test_events_skip_undecodable(connection, fake_i3, caplog):

    fake_i3.event(99, {})
    fake_i3.event(fields.EVENT_MODE, {'no change': True})
    fake_i3.event(fields.EVENT_MODE, {'change': 'resize'})
    fake_i3.event(fields.EVENT_MODE, {'change': 'default'})

    events = connection.events()

    assert next(events).change == 'resize'
    assert next(events).change == 'default'
    assert connection.closed == False
    assert 'skipping undecodable event' in caplog.text


def test_context_manager(socket_pair):

    transport = UnixTransport(socket_pair[0], sys.byteorder)

    with i3mux.Connection(transport, tick_kind=7) as connection:
        assert connection.closed == False

    assert connection.closed == True
    assert transport.is_open == False

    # Disconnecting twice is harmless.
    connection.disconnect()

    with pytest.raises(i3mux.ConnectionClosed):
        connection.get_version()


def listen(path):
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    listener.bind(path)
    listener.listen(1)
    return listener


def test_connect_via_environment(tmp_path, monkeypatch):

    path = str(tmp_path / 'i3.sock')
    listener = listen(path)
    monkeypatch.setenv('I3SOCK', path)

    try:
        connection = i3mux.connect(tick_kind=7)
        accepted, _address = listener.accept()
    finally:
        listener.close()

    server = UnixTransport(accepted, sys.byteorder)

    try:
        server.write_frame(fields.GET_VERSION, json.dumps({
            'major': 4,
            'minor': 23,
            'patch': 0,
            'human_readable': '4.23',
            'loaded_config_file_name': '/etc/i3/config',
        }).encode())
        assert connection.get_version().minor == 23
    finally:
        connection.disconnect()
        server.close()


def test_connect_explicit_path(tmp_path, monkeypatch):

    monkeypatch.setenv('I3SOCK', str(tmp_path / 'elsewhere.sock'))

    path = str(tmp_path / 'explicit.sock')
    listener = listen(path)

    try:
        connection = i3mux.connect(path)
    finally:
        listener.close()

    connection.disconnect()
    assert connection.closed == True


def test_connect_missing_socket(tmp_path):

    with pytest.raises(i3mux.NoIpcSocket):
        i3mux.connect(str(tmp_path / 'absent.sock'))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
