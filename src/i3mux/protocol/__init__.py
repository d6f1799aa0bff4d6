""" The i3 IPC protocol proper: the frame envelope, the protocol constants,
    and the request and subscription operations built on top of them. Nothing
    in this package touches a socket; see :mod:`i3mux.transport`.
"""

from . import fields
from . import message
from . import request
from . import subscribe

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
