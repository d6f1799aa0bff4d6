""" Encoding and decoding of the binary envelope wrapped around every i3 IPC
    message. A frame on the wire is the six byte marker ``i3-ipc``, the
    payload length and the message kind as unsigned 32-bit integers, and
    then the payload itself::

        [i3-ipc][length][kind][payload...]

    Both integers use the byte order of the host running i3. The top bit of
    the kind is set for events; the remaining 31 bits select the subtype.
"""

import struct

from ..errors import BadMagic
from . import fields


_header = dict()
_header['little'] = struct.Struct('<6sII')
_header['big'] = struct.Struct('>6sII')

_maximum_length = 0xFFFFFFFF


def _header_struct(byteorder):

    try:
        return _header[byteorder]
    except KeyError:
        raise ValueError("byteorder must be 'little' or 'big', not " + repr(byteorder))



def check_kind(kind):
    """ Return *kind* as an int, raising ValueError if it does not fit the
        32-bit kind field of a frame header.
    """

    kind = int(kind)
    if kind < 0 or kind > _maximum_length:
        raise ValueError('message kind out of range: ' + repr(kind))

    return kind



def encode(kind, payload=b'', byteorder='little'):
    """ Return the complete frame, header included, for a message of the
        given *kind* carrying *payload*. A str *payload* is encoded as UTF-8.
    """

    try:
        payload.decode
    except AttributeError:
        payload = str(payload)
        payload = payload.encode()

    length = len(payload)
    if length > _maximum_length:
        raise ValueError('payload too large for an i3 IPC frame: %d bytes' % (length))

    kind = check_kind(kind)
    header = _header_struct(byteorder).pack(fields.MAGIC, length, kind)
    return header + payload



def decode_header(header, byteorder='little'):
    """ Interpret the fixed 14 byte *header* of a frame, returning a
        (length, kind) tuple. :class:`i3mux.errors.BadMagic` is raised
        if the header does not begin with the expected marker.
    """

    if len(header) != fields.HEADER_SIZE:
        raise ValueError('an i3 IPC header is %d bytes, not %d' % (fields.HEADER_SIZE, len(header)))

    magic, length, kind = _header_struct(byteorder).unpack(header)

    if magic != fields.MAGIC:
        raise BadMagic(bytes(magic))

    return length, kind



def decode(frame, byteorder='little'):
    """ Decode a complete *frame*, as returned by :func:`encode`, into a
        :class:`Message`. Trailing bytes beyond the declared length are
        rejected rather than ignored.
    """

    length, kind = decode_header(frame[:fields.HEADER_SIZE], byteorder)
    payload = bytes(frame[fields.HEADER_SIZE:])

    if len(payload) != length:
        raise ValueError('frame declares %d payload bytes, carries %d' % (length, len(payload)))

    return Message(kind, payload)



class Message:
    """ A single frame's worth of content: the raw 32-bit *kind*, event bit
        included, and the undecoded *payload* bytes.
    """

    __slots__ = ('kind', 'payload')

    def __init__(self, kind, payload=b''):
        self.kind = kind
        self.payload = payload


    def __eq__(self, other):
        if isinstance(other, Message):
            return self.kind == other.kind and self.payload == other.payload
        return NotImplemented


    def __iter__(self):
        return iter((self.kind, self.payload))


    def __repr__(self):
        if self.event:
            tag = 'event %d' % (self.subtype)
        else:
            tag = 'reply %d' % (self.subtype)

        return '<Message %s, %d bytes>' % (tag, len(self.payload))


    @property
    def event(self):
        """ True if the event bit is set in the kind.
        """

        return bool(self.kind & fields.EVENT_BIT)


    @property
    def subtype(self):
        """ The kind with the event bit stripped.
        """

        return self.kind & fields.KIND_MASK


# end of class Message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
