"""
Render node views back to XML text, optionally decorated with ANSI colors.

Only markup is colored: tag names and angle brackets (magenta for elements,
green for declarations), attribute names (yellow) and attribute values
(cyan). Text and comment content is written trimmed and escaped, without
color and without comment delimiters.
"""

from collections import namedtuple

import util
from util import WriteError
from xmlnodes import NodeKind

GREEN = '\033[32m'
YELLOW = '\033[33m'
MAGENTA = '\033[35m'
CYAN = '\033[36m'
RESET = '\033[0m'
RESET_COLOR = '\033[39m'

RenderConfig = namedtuple('RenderConfig', ['emit_self', 'use_color', 'emit_children'])


class ColorWriter(object):
    """
    Writes text to a sink and keeps track of the active color.

    When disabled, color changes are no-ops and only the text reaches the
    sink. ``color`` holds the escape code last opened, or None once a reset
    has been written.
    """

    def __init__(self, sink, enabled):
        self.sink = sink
        self.enabled = enabled
        self.color = None

    def write(self, text):
        try:
            self.sink.write(text)
        except (IOError, ValueError) as e:
            raise WriteError("write XML: %s" % e)

    def open(self, color):
        if self.enabled:
            self._code(color)
            self.color = color

    def reset(self, code=RESET):
        if self.enabled:
            self._code(code)
            self.color = None

    def _code(self, code):
        try:
            self.sink.write(code)
        except (IOError, ValueError) as e:
            raise WriteError("write color code: %s" % e)


def render(sink, node, config):
    """
    render one matched node
    :param sink: object with a write(str) method
    :param node: xmlnodes.Node
    :param config: RenderConfig, with emit_self false only the children of node are rendered
    """
    writer = ColorWriter(sink, config.use_color)

    if config.emit_self:
        render_node(writer, node, config.emit_children)
        return

    for child in node.children():
        render_node(writer, child, config.emit_children)


def render_node(writer, node, recurse):
    kind = node.kind

    if kind is NodeKind.TEXT or kind is NodeKind.COMMENT:
        writer.write(util.escape_text(node.text_content.strip()))
        return

    if kind is NodeKind.DECLARATION:
        writer.open(GREEN)
        writer.write("<?" + node.local_name)
    elif kind is NodeKind.ELEMENT:
        writer.open(MAGENTA)
        writer.write("<" + node.full_name)
    else:
        raise ValueError("unsupported node kind %r" % kind)

    writer.reset()

    # the closing quote of each attribute stays yellow, the loop reopens yellow after each value
    for attr in node.attributes:
        writer.open(YELLOW)
        writer.write(' %s="' % util.qualify(attr.prefix, attr.local_name))
        writer.reset()
        writer.open(CYAN)
        writer.write(attr.value)
        writer.reset()
        writer.open(YELLOW)
        writer.write('"')

    writer.reset()

    if kind is NodeKind.DECLARATION:
        writer.open(GREEN)
        writer.write("?>")
    else:
        writer.open(MAGENTA)
        writer.write(">")

    writer.reset()

    if recurse:
        for child in node.children():
            render_node(writer, child, recurse)

    if kind is not NodeKind.DECLARATION:
        writer.open(MAGENTA)
        writer.write("</" + node.full_name + ">")
        writer.reset(RESET_COLOR)
