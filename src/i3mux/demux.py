""" The demultiplexer separates the two flows sharing an i3 IPC connection:
    replies to our own requests, and the events we subscribed to. Each frame
    pulled from the transport lands in one of two ordered buffers depending
    on the event bit of its kind; callers then ask for the next event, or
    for the next reply of a given kind, and more frames are pulled only when
    nothing buffered satisfies them.

    i3 gives replies no request identifier, only the kind of the request. A
    reply is therefore matched to its request purely by kind, which is only
    sound if a single request is in flight at a time. Both buffers are
    first-in, first-out: the oldest matching reply is handed out first, and
    events are returned in the order they arrived.
"""

import collections
import logging

from .protocol import fields


logger = logging.getLogger(__name__)


class Demultiplexer:
    """ Route frames read from *transport* into the pending reply and
        pending event buffers. The buffers hold (kind, payload) tuples; the
        kind of a buffered event has the event bit removed.

        A :class:`Demultiplexer` is not thread-safe; it must be driven by a
        single thread at a time.
    """

    def __init__(self, transport):

        self.transport = transport
        self.pending_replies = collections.deque()
        self.pending_events = collections.deque()


    def pump(self):
        """ Read exactly one frame from the transport and buffer it. This
            blocks until a whole frame is available, and propagates any
            transport errors untouched.
        """

        kind, payload = self.transport.read_frame()

        if kind & fields.EVENT_BIT:
            kind = kind & fields.KIND_MASK
            self.pending_events.append((kind, payload))
            logger.debug('buffered event %d, %d pending', kind, len(self.pending_events))
        else:
            self.pending_replies.append((kind, payload))
            logger.debug('buffered reply %d, %d pending', kind, len(self.pending_replies))


    def take_event(self):
        """ Return the oldest buffered (kind, payload) event, or None if
            no events are buffered. Never reads from the transport.
        """

        try:
            return self.pending_events.popleft()
        except IndexError:
            return None


    def next_event(self):
        """ Return the oldest buffered (kind, payload) event, reading from
            the transport until one is available.
        """

        while True:
            event = self.take_event()
            if event is not None:
                return event

            self.pump()


    def take_reply(self, kind, accept=None):
        """ Remove and return the payload of the oldest buffered reply of
            the given *kind*. If *accept* is provided it is called with the
            payload of each candidate, and only replies for which it returns
            True are considered. Returns None if nothing buffered matches;
            never reads from the transport.
        """

        index = 0

        for buffered_kind, payload in self.pending_replies:
            if buffered_kind == kind:
                if accept is None or accept(payload):
                    del self.pending_replies[index]
                    return payload
            index += 1

        return None


    def next_reply(self, kind, accept=None):
        """ Return the payload of the oldest buffered reply of the given
            *kind*, as with :func:`take_reply`, reading from the transport
            until a matching reply arrives. Events read along the way are
            buffered for :func:`next_event`.

            There is no timeout: if the server never sends a matching reply
            this will block forever.
        """

        while True:
            payload = self.take_reply(kind, accept)
            if payload is not None:
                return payload

            self.pump()


    def discard_replies(self):
        """ Drop every buffered reply, returning how many were dropped.
            Used when no request is outstanding, so nothing could claim them.
        """

        count = len(self.pending_replies)
        self.pending_replies.clear()
        return count


    def clear(self):
        self.pending_replies.clear()
        self.pending_events.clear()


# end of class Demultiplexer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
