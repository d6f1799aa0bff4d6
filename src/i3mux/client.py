""" A thread-safe wrapper around a :class:`i3mux.Connection`. One background
    thread owns the connection: it is the only thread that reads from or
    writes to the i3 socket. Callers hand requests to that thread through a
    queue and block until the reply arrives; events are decoded on that
    thread and handed to registered callbacks.

    Requests are written one at a time. i3 replies carry no request id, only
    the request kind, so a second request is not written until the reply to
    the first has been claimed.
"""

import atexit
import itertools
import logging
import queue
import threading

import zmq

from . import callbacks
from . import event
from .connection import connect
from .errors import BadReply, ConnectionClosed, ProtocolError, UnknownType
from .protocol import fields
from .protocol import message
from .protocol.request import Requests


logger = logging.getLogger(__name__)

zmq_context = zmq.Context()
_signal_ids = itertools.count()


class PendingRequest:
    """ Client-side helper that carries one request to the connection thread
        and the reply, or the error, back to the caller.
    """

    def __init__(self, kind, payload, accept=None):

        self.kind = kind
        self.payload = payload
        self.accept = accept
        self.response = None
        self.error = None
        self.rep_event = threading.Event()


    def _complete(self, response):
        """ Locally store the response and signal any callers blocking via
            :func:`wait` to proceed.
        """

        self.response = response
        self.rep_event.set()


    def _fail(self, error):
        self.error = error
        self.rep_event.set()


    def poll(self):
        """ Return True if the request is complete, otherwise return False.
        """

        return self.rep_event.is_set()


    def wait(self, timeout=None):
        """ Block until the request has been handled, or until *timeout*
            seconds have passed. Returns True if the request is complete.
        """

        return self.rep_event.wait(timeout)


# end of class PendingRequest



class Client(Requests):
    """ Own a :class:`i3mux.Connection` on a dedicated background thread,
        and expose the request operations of :class:`i3mux.Connection` in a
        form safe to call from any thread. If no *connection* is provided
        one is established via :func:`i3mux.connect` using *path*.

        Events are only delivered to callbacks registered with
        :func:`register`; callbacks run on the connection thread and must
        not issue requests through this client.
    """

    def __init__(self, path=None, connection=None):

        if connection is None:
            connection = connect(path)

        self.connection = connection
        self.subscribed = set()
        self.failure = None
        self.shutdown = False

        self.callbacks = callbacks.Registry()

        self._outbox = queue.SimpleQueue()
        self._inflight = None
        self._state_lock = threading.Lock()

        internal = 'inproc://i3mux.Client:signal:%d' % (next(_signal_ids))
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        # The signal socket is shared by every calling thread; ZeroMQ sockets
        # are not thread-safe on their own.

        self._signal_lock = threading.Lock()

        active.add(self)

        self.thread = threading.Thread(target=self.run, name='i3mux.Client')
        self.thread.daemon = True
        self.thread.start()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def call(self, kind, payload=b'', accept=None, timeout=None):
        """ Queue a request for the connection thread and block until its
            reply arrives. If *timeout* seconds pass first the builtin
            :class:`TimeoutError` is raised; the request stays queued, and
            its eventual reply is discarded.
        """

        if threading.current_thread() is self.thread:
            raise RuntimeError('requests cannot be issued from the connection thread')

        kind = message.check_kind(kind)
        pending = PendingRequest(kind, payload, accept)

        with self._state_lock:
            if self.shutdown:
                raise self._closed_error()
            self._outbox.put(pending)

        self._signal()

        if not pending.wait(timeout):
            raise TimeoutError('no reply to request kind %d in %.2f sec' % (kind, timeout))

        if pending.error is not None:
            raise pending.error

        return pending.response


    def close(self):
        """ Stop the connection thread and disconnect. Requests still
            pending fail with :class:`i3mux.errors.ConnectionClosed`.
        """

        with self._state_lock:
            running = not self.shutdown
            self.shutdown = True

        if running:
            self._signal()

        if self.thread is not threading.current_thread():
            self.thread.join()

        with self._signal_lock:
            self._signal_tx.close(linger=0)

        active.discard(self)


    def _closed_error(self):
        if self.failure is not None:
            return ConnectionClosed('client connection failed: %s' % (self.failure))
        return ConnectionClosed('client is closed')


    def _signal(self):

        with self._signal_lock:
            if self._signal_tx.closed:
                return
            self._signal_tx.send(b'')


    def register(self, callback, topic=None):
        """ Register a callback that will be invoked with each decoded event.
            If a *topic* is specified, such as 'window', the callback is
            only invoked for events of that topic; otherwise it is invoked
            for every event. Callbacks are held by weak reference.

            The client subscribes to the topic, or to every topic if none
            is given, if it has not already done so.
        """

        if topic is not None and topic not in fields.TOPICS:
            raise ValueError('unknown subscription topic: ' + repr(topic))

        self.callbacks.add(callback, topic)

        if topic is None:
            wanted = fields.TOPICS
        else:
            wanted = (topic,)

        missing = [name for name in sorted(wanted) if name not in self.subscribed]

        if missing:
            outcome = self.subscribe(missing)
            if outcome.success:
                self.subscribed.update(missing)
            else:
                raise ProtocolError('i3 refused subscription to %s' % (', '.join(missing)))


    def propagate(self, decoded):
        """ Invoke any/all callbacks registered via :func:`register` for a
            newly arrived event.
        """

        self.callbacks.invoke(decoded.topic, decoded)


    # Everything below runs on the connection thread.

    def run(self):

        poller = zmq.Poller()
        poller.register(self._signal_rx, zmq.POLLIN)

        error = None

        try:
            descriptor = self.connection.fileno()
            poller.register(descriptor, zmq.POLLIN)

            # Events may have been buffered before the client took over.
            self._dispatch_events()

            while self.shutdown == False:
                for active_socket, flag in poller.poll(1000):
                    if active_socket == descriptor:
                        self._handle_incoming()
                    else:
                        self._handle_outgoing()

        except (ProtocolError, OSError) as e:
            logger.debug('connection thread stopping: %s', e)
            error = e

        finally:
            self._stop(error)


    def _stop(self, error):

        with self._state_lock:
            self.shutdown = True
            if error is not None:
                self.failure = error

        if error is None:
            error = self._closed_error()

        pending = self._inflight
        self._inflight = None

        if pending is not None:
            pending._fail(error)

        while True:
            try:
                pending = self._outbox.get(block=False)
            except queue.Empty:
                break
            pending._fail(error)

        self._signal_rx.close(linger=0)
        self.connection.disconnect()


    def _handle_outgoing(self):

        # One signal per queued request; clear one and try to start work.
        try:
            self._signal_rx.recv(flags=zmq.NOBLOCK)
        except zmq.Again:
            pass

        self._start_next()


    def _start_next(self):

        if self._inflight is not None:
            return

        while True:
            try:
                pending = self._outbox.get(block=False)
            except queue.Empty:
                return

            self._inflight = pending

            try:
                self.connection.write(pending.kind, pending.payload)
            except (ValueError, TypeError) as e:
                # Nothing was written; only this request is affected.
                self._inflight = None
                pending._fail(e)
                continue

            return


    def _handle_incoming(self):

        self.connection.pump()
        self._match_reply()
        self._dispatch_events()


    def _match_reply(self):

        pending = self._inflight
        demux = self.connection.demux

        if pending is None:
            dropped = demux.discard_replies()
            if dropped:
                logger.warning('discarded %d unsolicited replies', dropped)
            return

        payload = demux.take_reply(pending.kind, pending.accept)

        if payload is None:
            return

        self._inflight = None
        pending._complete(payload)
        self._start_next()


    def _dispatch_events(self):

        demux = self.connection.demux

        while True:
            item = demux.take_event()
            if item is None:
                break

            kind, payload = item

            try:
                decoded = event.decode(kind, payload, self.connection.tick_kind)
            except (BadReply, UnknownType) as e:
                logger.warning('dropping event %d: %s', kind, e)
                continue

            self.propagate(decoded)


# end of class Client



active = set()
client_connections = dict()


def client(path=None):
    """ Factory function for a :class:`Client` instance. Use of this method is
        encouraged to streamline re-use of established connections; a client
        that has been closed is replaced with a new one.
    """

    try:
        instance = client_connections[path]
    except KeyError:
        instance = None

    if instance is None or instance.shutdown:
        instance = Client(path)
        client_connections[path] = instance

    return instance



def shutdown():
    for instance in list(active):
        instance.close()

    client_connections.clear()


atexit.register(shutdown)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
