""" Field extraction helpers shared by the reply and event decoders. Each
    takes the enclosing JSON object, the key, and a short description of
    what is being decoded, which is used in the :class:`BadReply` message.
"""

from .errors import BadReply


def describe(value):
    text = repr(value)
    if len(text) > 60:
        text = text[:57] + '...'
    return type(value).__name__ + ' ' + text


def expect_object(value, what):
    if isinstance(value, dict):
        return value
    raise BadReply('%s: expected a JSON object, got %s' % (what, describe(value)))


def expect_list(value, what):
    if isinstance(value, list):
        return value
    raise BadReply('%s: expected a JSON array, got %s' % (what, describe(value)))


def require(obj, key, what):
    try:
        return obj[key]
    except KeyError:
        raise BadReply('%s: missing required field %r' % (what, key))


def check(value, types, key, what):
    # bool is a subclass of int; never accept it where a number is wanted.
    if isinstance(value, bool) and bool not in types:
        raise BadReply('%s: field %r has wrong type (%s)' % (what, key, describe(value)))
    if isinstance(value, types):
        return value
    raise BadReply('%s: field %r has wrong type (%s)' % (what, key, describe(value)))


def boolean(obj, key, what, default=None):
    if default is not None and obj.get(key) is None:
        return default
    return check(require(obj, key, what), (bool,), key, what)


def integer(obj, key, what):
    return check(require(obj, key, what), (int,), key, what)


def string(obj, key, what):
    return check(require(obj, key, what), (str,), key, what)


def optional(obj, key, what, types):
    value = obj.get(key)
    if value is None:
        return None
    return check(value, types, key, what)


def strings(value, key, what):
    value = check(value, (list,), key, what)
    for item in value:
        check(item, (str,), key, what)
    return list(value)


def member(cls, obj, key, what):
    value = require(obj, key, what)
    return enum_value(cls, value, '%s: field %r' % (what, key))


def enum_value(cls, value, what):
    """ Return the member of the enumeration *cls* for the JSON *value*.
        Anything outside the enumeration is a :class:`BadReply`.
    """

    if isinstance(value, str):
        try:
            return cls(value)
        except ValueError:
            pass

    raise BadReply('%s: unknown %s value %s' % (what, cls.__name__, describe(value)))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
