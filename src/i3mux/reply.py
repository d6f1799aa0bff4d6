""" Typed representations of the replies i3 sends in answer to requests, and
    the functions that build them from decoded JSON. Decoding is strict about
    what must be present and lenient about what else is there: a missing
    required field, or a field of the wrong type, raises
    :class:`i3mux.errors.BadReply`; fields this module does not know about
    are ignored, so that newer i3 releases can add them freely.
"""

import enum

from .errors import BadReply
from .schema import (
    boolean,
    check,
    describe,
    enum_value,
    expect_list,
    expect_object,
    integer,
    member,
    optional,
    require,
    string,
    strings,
)


class Record:
    """ Minimal base class for the reply and event records. Subclasses list
        their attribute names in *fields*; every field must be supplied to
        the constructor as a keyword argument.
    """

    fields = ()

    def __init__(self, **kwargs):

        for name in self.fields:
            try:
                value = kwargs.pop(name)
            except KeyError:
                raise TypeError('%s requires field %r' % (type(self).__name__, name))
            setattr(self, name, value)

        if kwargs:
            unexpected = ', '.join(sorted(kwargs))
            raise TypeError('%s got unexpected fields: %s' % (type(self).__name__, unexpected))


    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented

        for name in self.fields:
            if getattr(self, name) != getattr(other, name):
                return False

        return True


    def __repr__(self):
        pairs = list()
        for name in self.fields:
            pairs.append('%s=%r' % (name, getattr(self, name)))

        return '%s(%s)' % (type(self).__name__, ', '.join(pairs))


# end of class Record



class Unrecognized:
    """ Stand-in for a value outside a known enumeration, for the few fields
        where i3 is known to grow new values between releases. The raw
        string is preserved as *value*, mirroring :class:`enum.Enum`
        members.
    """

    __slots__ = ('value',)

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        if isinstance(other, Unrecognized):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((Unrecognized, self.value))

    def __repr__(self):
        return 'Unrecognized(%r)' % (self.value,)


# end of class Unrecognized



class CommandOutcome(Record):
    """ The result of one command from a run-command request, or of a
        subscribe request.
    """

    fields = ('success', 'error', 'parse_error')

    def __bool__(self):
        return self.success


def decode_command_outcome(value):
    what = 'command outcome'
    obj = expect_object(value, what)

    success = boolean(obj, 'success', what)
    error = optional(obj, 'error', what, (str,))
    parse_error = boolean(obj, 'parse_error', what, default=False)

    return CommandOutcome(success=success, error=error, parse_error=parse_error)


def decode_command(value):
    outcomes = list()
    for item in expect_list(value, 'command reply'):
        outcomes.append(decode_command_outcome(item))
    return outcomes



class Rect(Record):
    fields = ('x', 'y', 'width', 'height')


def decode_rect(value, what='rect'):
    obj = expect_object(value, what)
    x = integer(obj, 'x', what)
    y = integer(obj, 'y', what)
    width = integer(obj, 'width', what)
    height = integer(obj, 'height', what)
    return Rect(x=x, y=y, width=width, height=height)



class Workspace(Record):
    fields = ('num', 'name', 'visible', 'focused', 'urgent', 'rect', 'output', 'id')


def decode_workspace(value):
    what = 'workspace'
    obj = expect_object(value, what)

    return Workspace(
        num=integer(obj, 'num', what),
        name=string(obj, 'name', what),
        visible=boolean(obj, 'visible', what),
        focused=boolean(obj, 'focused', what),
        urgent=boolean(obj, 'urgent', what),
        rect=decode_rect(require(obj, 'rect', what), what + ' rect'),
        output=string(obj, 'output', what),
        id=optional(obj, 'id', what, (int,)),
    )


def decode_workspaces(value):
    return [decode_workspace(item) for item in expect_list(value, 'workspace list')]



class Output(Record):
    fields = ('name', 'active', 'current_workspace', 'rect', 'primary')


def decode_output(value):
    what = 'output'
    obj = expect_object(value, what)

    return Output(
        name=string(obj, 'name', what),
        active=boolean(obj, 'active', what),
        current_workspace=optional(obj, 'current_workspace', what, (str,)),
        rect=decode_rect(require(obj, 'rect', what), what + ' rect'),
        primary=boolean(obj, 'primary', what, default=False),
    )


def decode_outputs(value):
    return [decode_output(item) for item in expect_list(value, 'output list')]



class NodeType(enum.Enum):
    ROOT = 'root'
    OUTPUT = 'output'
    CON = 'con'
    FLOATING_CON = 'floating_con'
    WORKSPACE = 'workspace'
    DOCKAREA = 'dockarea'


class Border(enum.Enum):
    NORMAL = 'normal'
    NONE = 'none'
    PIXEL = 'pixel'


class Layout(enum.Enum):
    SPLITH = 'splith'
    SPLITV = 'splitv'
    STACKED = 'stacked'
    TABBED = 'tabbed'
    DOCKAREA = 'dockarea'
    OUTPUT = 'output'


def decode_border(value, what='border'):

    # Older i3 releases spell the pixel border '1pixel'.
    if value == '1pixel':
        return Border.PIXEL

    return enum_value(Border, value, what)


def decode_layout(value, what='layout'):
    """ Return the :class:`Layout` member for *value*. Unlike the other
        enumerations, an unknown layout name is preserved as an
        :class:`Unrecognized` instance rather than rejected; only a
        non-string value is an error.
    """

    if not isinstance(value, str):
        raise BadReply('%s: expected a string, got %s' % (what, describe(value)))

    try:
        return Layout(value)
    except ValueError:
        return Unrecognized(value)



class Node(Record):
    """ One container in the i3 layout tree. The children in *nodes* and
        *floating_nodes* are complete :class:`Node` instances, in the order
        i3 reported them.
    """

    fields = (
        'nodes', 'floating_nodes', 'id', 'name', 'type', 'border',
        'current_border_width', 'layout', 'percent', 'rect', 'window_rect',
        'deco_rect', 'geometry', 'window', 'urgent', 'focused', 'marks',
        'focus',
    )

    def __iter__(self):
        """ Iterate over this node and all of its descendants, depth first,
            tiled children before floating ones.
        """

        yield self
        for child in self.nodes:
            yield from child
        for child in self.floating_nodes:
            yield from child


    def find(self, id):
        """ Return the node in this subtree with the given container *id*,
            or None.
        """

        for node in self:
            if node.id == id:
                return node

        return None


    def focused_node(self):
        for node in self:
            if node.focused:
                return node

        return None



def _children(obj, key, what):
    value = obj.get(key)
    if value is None:
        return []

    children = list()
    for item in expect_list(value, '%s field %r' % (what, key)):
        children.append(decode_node(item))

    return children


def decode_node(value):
    what = 'node'
    obj = expect_object(value, what)

    marks = obj.get('marks')
    if marks is None:
        marks = []
    else:
        marks = strings(marks, 'marks', what)

    focus = obj.get('focus')
    if focus is None:
        focus = []
    else:
        focus = list(check(focus, (list,), 'focus', what))
        for item in focus:
            check(item, (int,), 'focus', what)

    percent = optional(obj, 'percent', what, (int, float))
    if percent is not None:
        percent = float(percent)

    return Node(
        nodes=_children(obj, 'nodes', what),
        floating_nodes=_children(obj, 'floating_nodes', what),
        id=integer(obj, 'id', what),
        name=optional(obj, 'name', what, (str,)),
        type=member(NodeType, obj, 'type', what),
        border=decode_border(require(obj, 'border', what), what + ": field 'border'"),
        current_border_width=integer(obj, 'current_border_width', what),
        layout=decode_layout(require(obj, 'layout', what), what + ": field 'layout'"),
        percent=percent,
        rect=decode_rect(require(obj, 'rect', what), what + ' rect'),
        window_rect=decode_rect(require(obj, 'window_rect', what), what + ' window_rect'),
        deco_rect=decode_rect(require(obj, 'deco_rect', what), what + ' deco_rect'),
        geometry=decode_rect(require(obj, 'geometry', what), what + ' geometry'),
        window=optional(obj, 'window', what, (int,)),
        urgent=boolean(obj, 'urgent', what),
        focused=boolean(obj, 'focused', what),
        marks=marks,
        focus=focus,
    )


def decode_tree(value):
    return decode_node(value)



def decode_marks(value):
    return strings(value, 'marks', 'mark list')


def decode_bar_ids(value):
    return strings(value, 'ids', 'bar id list')


def decode_binding_modes(value):
    return strings(value, 'modes', 'binding mode list')



class BarPart(enum.Enum):
    BACKGROUND = 'background'
    STATUSLINE = 'statusline'
    SEPARATOR = 'separator'
    FOCUSED_BACKGROUND = 'focused_background'
    FOCUSED_STATUSLINE = 'focused_statusline'
    FOCUSED_SEPARATOR = 'focused_separator'
    FOCUSED_WORKSPACE_TEXT = 'focused_workspace_text'
    FOCUSED_WORKSPACE_BACKGROUND = 'focused_workspace_bg'
    FOCUSED_WORKSPACE_BORDER = 'focused_workspace_border'
    ACTIVE_WORKSPACE_TEXT = 'active_workspace_text'
    ACTIVE_WORKSPACE_BACKGROUND = 'active_workspace_bg'
    ACTIVE_WORKSPACE_BORDER = 'active_workspace_border'
    INACTIVE_WORKSPACE_TEXT = 'inactive_workspace_text'
    INACTIVE_WORKSPACE_BACKGROUND = 'inactive_workspace_bg'
    INACTIVE_WORKSPACE_BORDER = 'inactive_workspace_border'
    URGENT_WORKSPACE_TEXT = 'urgent_workspace_text'
    URGENT_WORKSPACE_BACKGROUND = 'urgent_workspace_bg'
    URGENT_WORKSPACE_BORDER = 'urgent_workspace_border'
    BINDING_MODE_TEXT = 'binding_mode_text'
    BINDING_MODE_BACKGROUND = 'binding_mode_bg'
    BINDING_MODE_BORDER = 'binding_mode_border'


def bar_part(name):
    """ Return the :class:`BarPart` for a color table key, or an
        :class:`Unrecognized` instance for keys this module does not know.
        The long spellings such as ``focused_workspace_background`` are
        accepted for the ``_bg`` keys i3 sends.
    """

    try:
        return BarPart(name)
    except ValueError:
        pass

    if name.endswith('_background'):
        try:
            return BarPart(name[:-len('background')] + 'bg')
        except ValueError:
            pass

    return Unrecognized(name)


def decode_bar_colors(value):
    """ Build the color table of a bar configuration: a dictionary mapping
        :class:`BarPart` (or :class:`Unrecognized`) keys to color strings.
        Every value must be a string; one bad value fails the whole table.
    """

    what = 'bar colors'
    obj = expect_object(value, what)

    colors = dict()
    for key, color in obj.items():
        if not isinstance(color, str):
            raise BadReply('%s: color for %r is not a string (%s)' % (what, key, describe(color)))
        colors[bar_part(key)] = color

    return colors



class BarConfig(Record):
    fields = (
        'id', 'mode', 'position', 'status_command', 'font',
        'workspace_buttons', 'binding_mode_indicator', 'verbose', 'colors',
    )


def decode_bar_config(value):
    what = 'bar config'
    obj = expect_object(value, what)

    return BarConfig(
        id=string(obj, 'id', what),
        mode=string(obj, 'mode', what),
        position=string(obj, 'position', what),
        status_command=string(obj, 'status_command', what),
        font=string(obj, 'font', what),
        workspace_buttons=boolean(obj, 'workspace_buttons', what),
        binding_mode_indicator=boolean(obj, 'binding_mode_indicator', what),
        verbose=boolean(obj, 'verbose', what),
        colors=decode_bar_colors(require(obj, 'colors', what)),
    )



class Version(Record):
    fields = ('major', 'minor', 'patch', 'human_readable', 'loaded_config_file_name')


def decode_version(value):
    what = 'version'
    obj = expect_object(value, what)

    return Version(
        major=integer(obj, 'major', what),
        minor=integer(obj, 'minor', what),
        patch=integer(obj, 'patch', what),
        human_readable=string(obj, 'human_readable', what),
        loaded_config_file_name=string(obj, 'loaded_config_file_name', what),
    )



class Config(Record):
    """ The configuration text i3 last loaded. *included_configs* lists the
        files pulled in by ``include`` directives, as reported by i3 4.20
        and later, each as a dictionary with the raw details.
    """

    fields = ('config', 'included_configs')


def decode_config(value):
    what = 'config'
    obj = expect_object(value, what)

    included = obj.get('included_configs')
    if included is None:
        included = []
    else:
        included = list(check(included, (list,), 'included_configs', what))

    return Config(config=string(obj, 'config', what), included_configs=included)



class TickReply(Record):
    fields = ('success',)

    def __bool__(self):
        return self.success


def decode_tick(value):
    what = 'tick reply'
    obj = expect_object(value, what)
    return TickReply(success=boolean(obj, 'success', what))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
