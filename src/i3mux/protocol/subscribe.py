""" The subscription side of the protocol. A client subscribes by sending a
    JSON array of topic names as an ordinary request; i3 answers with a
    single command outcome, and from then on interleaves event frames with
    the replies to any further requests.
"""

from .. import json
from . import fields


def encode_topics(topics):
    """ Return the subscribe request payload for the iterable of topic
        names in *topics*. Duplicates are dropped, order is otherwise
        preserved. A ValueError is raised for names i3 would not
        recognize, before anything is sent.
    """

    if isinstance(topics, (str, bytes)):
        topics = (topics,)

    names = list()

    for topic in topics:
        try:
            topic.decode
        except AttributeError:
            pass
        else:
            topic = topic.decode()

        if topic not in fields.TOPICS:
            raise ValueError('unknown subscription topic: ' + repr(topic))

        if topic not in names:
            names.append(topic)

    if len(names) == 0:
        raise ValueError('at least one subscription topic is required')

    return json.dumps(names)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
