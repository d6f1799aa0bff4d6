import gc
import logging

import pytest

import i3mux
from i3mux.callbacks import Registry


class Listener:

    def __init__(self):
        self.seen = list()

    def a_method(self, value):
        self.seen.append(value)


def test_reference_to_function():

    def function(value):
        pass

    reference = i3mux.callbacks.ref(function)
    assert reference() is function


def test_reference_to_method():
    """ A standard weak reference to a bound method is dead on arrival; the
        local wrapper must keep it alive as long as its object.
    """

    thing = Listener()

    reference = i3mux.callbacks.ref(thing.a_method)
    dereferenced = reference()
    assert dereferenced is not None
    assert callable(dereferenced)

    del dereferenced
    del thing
    gc.collect()

    assert reference() is None


def test_topics():

    registry = Registry()
    everything = Listener()
    windows = Listener()

    registry.add(everything.a_method)
    registry.add(windows.a_method, 'window')

    registry.invoke('window', 'first')
    registry.invoke('mode', 'second')

    assert everything.seen == ['first', 'second']
    assert windows.seen == ['first']
    assert len(registry) == 2


def test_dead_callbacks_dropped():

    registry = Registry()
    thing = Listener()

    registry.add(thing.a_method, 'tick')
    registry.add(thing.a_method)
    assert len(registry) == 2

    del thing
    gc.collect()

    assert registry.matching('tick') == []
    assert len(registry) == 0


def test_failing_callback_logged(caplog):

    registry = Registry()
    thing = Listener()

    def broken(value):
        raise RuntimeError('broken')

    registry.add(broken)
    registry.add(thing.a_method)

    with caplog.at_level(logging.ERROR, logger='i3mux.callbacks'):
        registry.invoke('output', 'value')

    assert thing.seen == ['value']
    assert 'broken' in caplog.text


def test_not_callable():

    registry = Registry()

    with pytest.raises(TypeError):
        registry.add('window')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
