""" Typed representations of the events i3 sends to subscribed clients, and
    the dispatch from an event subtype to the decoder for its payload. The
    same strict-but-forward-compatible rules as :mod:`i3mux.reply` apply.
"""

import enum

from . import config
from . import json
from .errors import UnknownType
from .protocol import fields as constants
from .reply import Record, decode_bar_config, decode_node
from .schema import (
    boolean,
    expect_object,
    integer,
    member,
    optional,
    require,
    string,
    strings,
)


class WorkspaceChange(enum.Enum):
    FOCUS = 'focus'
    INIT = 'init'
    EMPTY = 'empty'
    URGENT = 'urgent'
    RENAME = 'rename'
    RELOAD = 'reload'
    RESTORED = 'restored'
    MOVE = 'move'


class OutputChange(enum.Enum):
    UNSPECIFIED = 'unspecified'


class WindowChange(enum.Enum):
    NEW = 'new'
    CLOSE = 'close'
    FOCUS = 'focus'
    TITLE = 'title'
    FULLSCREEN_MODE = 'fullscreen_mode'
    MOVE = 'move'
    FLOATING = 'floating'
    URGENT = 'urgent'
    MARK = 'mark'


class BindingChange(enum.Enum):
    RUN = 'run'


class InputType(enum.Enum):
    KEYBOARD = 'keyboard'
    MOUSE = 'mouse'


class ShutdownChange(enum.Enum):
    RESTART = 'restart'
    EXIT = 'exit'



class Event(Record):
    """ Common base class for all event records. *topic* is the name used
        to subscribe to events of this class.
    """

    topic = None


class WorkspaceEvent(Event):
    topic = constants.WORKSPACE
    fields = ('change', 'current', 'old')


class OutputEvent(Event):
    topic = constants.OUTPUT
    fields = ('change',)


class ModeEvent(Event):
    topic = constants.MODE
    fields = ('change', 'pango_markup')


class WindowEvent(Event):
    topic = constants.WINDOW
    fields = ('change', 'container')


class BarConfigEvent(Event):
    topic = constants.BARCONFIG_UPDATE
    fields = ('bar_config',)


class Binding(Record):
    fields = ('command', 'event_state_mask', 'input_code', 'mods', 'symbol', 'input_type')


class BindingEvent(Event):
    topic = constants.BINDING
    fields = ('change', 'binding')


class ShutdownEvent(Event):
    topic = constants.SHUTDOWN
    fields = ('change',)


class TickEvent(Event):
    topic = constants.TICK
    fields = ('first', 'payload')



def _optional_node(obj, key):
    value = obj.get(key)
    if value is None:
        return None
    return decode_node(value)


def decode_workspace(value):
    what = 'workspace event'
    obj = expect_object(value, what)

    return WorkspaceEvent(
        change=member(WorkspaceChange, obj, 'change', what),
        current=_optional_node(obj, 'current'),
        old=_optional_node(obj, 'old'),
    )


def decode_output(value):
    what = 'output event'
    obj = expect_object(value, what)
    return OutputEvent(change=member(OutputChange, obj, 'change', what))


def decode_mode(value):
    what = 'mode event'
    obj = expect_object(value, what)

    return ModeEvent(
        change=string(obj, 'change', what),
        pango_markup=boolean(obj, 'pango_markup', what, default=False),
    )


def decode_window(value):
    what = 'window event'
    obj = expect_object(value, what)

    return WindowEvent(
        change=member(WindowChange, obj, 'change', what),
        container=decode_node(require(obj, 'container', what)),
    )


def decode_bar_config_update(value):
    return BarConfigEvent(bar_config=decode_bar_config(value))


def decode_binding(value, what='binding'):
    obj = expect_object(value, what)

    mods = obj.get('mods')
    if mods is not None:
        mods = strings(mods, 'mods', what)

    return Binding(
        command=string(obj, 'command', what),
        event_state_mask=strings(require(obj, 'event_state_mask', what), 'event_state_mask', what),
        input_code=integer(obj, 'input_code', what),
        mods=mods,
        symbol=optional(obj, 'symbol', what, (str,)),
        input_type=member(InputType, obj, 'input_type', what),
    )


def decode_binding_event(value):
    what = 'binding event'
    obj = expect_object(value, what)

    return BindingEvent(
        change=member(BindingChange, obj, 'change', what),
        binding=decode_binding(require(obj, 'binding', what)),
    )


def decode_shutdown(value):
    what = 'shutdown event'
    obj = expect_object(value, what)

    # The reason is an ordinary string field; anything other than 'restart'
    # or 'exit' is rejected like any other unknown enumeration value.
    return ShutdownEvent(change=member(ShutdownChange, obj, 'change', what))


def decode_tick(value):
    what = 'tick event'
    obj = expect_object(value, what)

    return TickEvent(
        first=boolean(obj, 'first', what),
        payload=string(obj, 'payload', what),
    )



decoders = dict()
decoders[constants.EVENT_WORKSPACE] = decode_workspace
decoders[constants.EVENT_OUTPUT] = decode_output
decoders[constants.EVENT_MODE] = decode_mode
decoders[constants.EVENT_WINDOW] = decode_window
decoders[constants.EVENT_BARCONFIG_UPDATE] = decode_bar_config_update
decoders[constants.EVENT_BINDING] = decode_binding_event
decoders[constants.EVENT_SHUTDOWN] = decode_shutdown


def decoder(kind, tick_kind=None):
    """ Return the decoder function for the event subtype *kind*. The tick
        event subtype is *tick_kind* if given, otherwise the value from
        :func:`i3mux.config.tick_event`.
    """

    if tick_kind is None:
        tick_kind = config.tick_event()

    if kind == tick_kind:
        return decode_tick

    try:
        return decoders[kind]
    except KeyError:
        raise UnknownType(kind)



def decode(kind, payload, tick_kind=None):
    """ Decode the raw *payload* of an event with subtype *kind* (event bit
        already removed) into the matching :class:`Event` subclass.
    """

    function = decoder(kind, tick_kind)
    return function(json.decode(payload))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
