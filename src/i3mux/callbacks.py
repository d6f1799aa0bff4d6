""" Weakly held event callbacks. A :class:`i3mux.Client` keeps the callbacks
    registered with it in a :class:`Registry`, so that registering a bound
    method does not keep the object it belongs to alive; once the object is
    gone its callbacks quietly drop out of the registry.
"""

import logging
import threading
import weakref


logger = logging.getLogger(__name__)


def ref(thing):
    """ Return a weak reference to the supplied callback. A plain weak
        reference to a bound method dies as soon as the temporary method
        object does; :class:`weakref.WeakMethod` is used for those instead.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)



class Registry:
    """ Thread-safe collection of weakly held callbacks, each registered
        either for one event topic or, with a topic of None, for all of
        them.
    """

    def __init__(self):

        self.lock = threading.Lock()
        self.everything = list()
        self.specific = dict()


    def __len__(self):

        with self.lock:
            count = len(self.everything)
            for references in self.specific.values():
                count += len(references)

        return count


    def add(self, callback, topic=None):

        if callable(callback):
            pass
        else:
            raise TypeError('callback must be callable')

        reference = ref(callback)

        with self.lock:
            if topic is None:
                self.everything.append(reference)
            else:
                try:
                    references = self.specific[topic]
                except KeyError:
                    references = list()
                    self.specific[topic] = references

                references.append(reference)


    def matching(self, topic):
        """ Return the live callbacks that should see an event of *topic*:
            the ones registered for every topic first, then the ones
            registered for this topic, each in registration order. Dead
            references found along the way are discarded.
        """

        callbacks = list()
        dead = list()

        with self.lock:
            references = self.everything + self.specific.get(topic, [])

            for reference in references:
                callback = reference()
                if callback is None:
                    dead.append(reference)
                else:
                    callbacks.append(callback)

            for reference in dead:
                self._discard(reference, topic)

        return callbacks


    def _discard(self, reference, topic):

        try:
            self.everything.remove(reference)
        except ValueError:
            pass
        else:
            return

        references = self.specific[topic]
        references.remove(reference)

        if len(references) == 0:
            del self.specific[topic]


    def invoke(self, topic, value):
        """ Call every callback matching *topic* with *value*. An exception
            raised by one callback is logged and does not stop the others.
        """

        for callback in self.matching(topic):
            try:
                callback(value)
            except Exception:
                logger.exception('event callback %r failed', callback)


# end of class Registry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
