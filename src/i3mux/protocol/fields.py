"""Protocol constants.

Keep these in one place to avoid bare numbers in message handling.
"""

MAGIC = b"i3-ipc"
HEADER_SIZE = 14

EVENT_BIT = 1 << 31
KIND_MASK = EVENT_BIT - 1

# Request (and reply) kinds.
RUN_COMMAND = 0
GET_WORKSPACES = 1
SUBSCRIBE = 2
GET_OUTPUTS = 3
GET_TREE = 4
GET_MARKS = 5
GET_BAR_CONFIG = 6
GET_VERSION = 7
GET_BINDING_MODES = 8
GET_CONFIG = 9
SEND_TICK = 10

# Event kinds, with the event bit stripped. The tick subtype is read from
# i3mux.config.tick_event() rather than fixed here.
EVENT_WORKSPACE = 0
EVENT_OUTPUT = 1
EVENT_MODE = 2
EVENT_WINDOW = 3
EVENT_BARCONFIG_UPDATE = 4
EVENT_BINDING = 5
EVENT_SHUTDOWN = 6

# Subscription topics, as named in the subscribe payload.
WORKSPACE = "workspace"
OUTPUT = "output"
MODE = "mode"
WINDOW = "window"
BARCONFIG_UPDATE = "barconfig_update"
BINDING = "binding"
SHUTDOWN = "shutdown"
TICK = "tick"

TOPICS = frozenset((WORKSPACE, OUTPUT, MODE, WINDOW, BARCONFIG_UPDATE, BINDING, SHUTDOWN, TICK))
