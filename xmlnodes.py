"""
Read-only node views over lxml documents and XPath results.

lxml keeps text as the ``text`` and ``tail`` strings of elements instead of
as separate nodes, so the views here put those strings back into document
order as Text nodes. Views are built lazily while the renderer walks the
tree and never modify or copy it.
"""

import math
from collections import namedtuple
from enum import Enum

from lxml import etree as lxml_etree

import util


class NodeKind(Enum):
    ELEMENT = 'element'
    TEXT = 'text'
    COMMENT = 'comment'
    DECLARATION = 'declaration'


Attribute = namedtuple('Attribute', ['prefix', 'local_name', 'value'])


class Node(object):
    """
    A node as seen by the renderer.

    ``children`` is either a sequence of nodes or a callable returning an
    iterable of nodes, the latter is used for lxml backed views so that
    descendants are only visited when the renderer asks for them.
    """

    __slots__ = ('kind', 'local_name', 'prefix', 'attributes', 'text_content', '_children')

    def __init__(self, kind, local_name='', prefix='', attributes=(), text_content='', children=()):
        self.kind = kind
        self.local_name = local_name
        self.prefix = prefix or ''
        self.attributes = tuple(attributes)
        self.text_content = text_content
        self._children = children

    @property
    def full_name(self):
        return util.qualify(self.prefix, self.local_name)

    def children(self):
        if self.kind is NodeKind.TEXT or self.kind is NodeKind.COMMENT:
            return iter(())
        return iter(self._children() if callable(self._children) else self._children)

    def __repr__(self):
        if self.kind is NodeKind.TEXT or self.kind is NodeKind.COMMENT:
            return '<Node %s %r>' % (self.kind.value, self.text_content)
        return '<Node %s %s>' % (self.kind.value, self.full_name)


def element(name, attributes=(), children=(), prefix=''):
    return Node(NodeKind.ELEMENT, local_name=name, prefix=prefix,
                attributes=[Attribute(*attr) for attr in attributes], children=children)


def text(content):
    return Node(NodeKind.TEXT, text_content=content)


def comment(content):
    return Node(NodeKind.COMMENT, text_content=content)


def declaration(data, children=()):
    return Node(NodeKind.DECLARATION, local_name=data, children=children)


def namespace_declarations(el):
    parent = el.getparent()
    inherited = parent.nsmap if parent is not None else {}
    declared = []
    for prefix, url in el.nsmap.items():
        if inherited.get(prefix) == url:
            continue
        if prefix is None:
            declared.append(Attribute('', 'xmlns', url))
        else:
            declared.append(Attribute('xmlns', prefix, url))
    return declared


def element_attributes(el):
    attributes = namespace_declarations(el)
    for key, value in el.attrib.items():
        qname = lxml_etree.QName(key)
        attributes.append(Attribute(util.prefix_for(el, qname.namespace), qname.localname, value))
    return attributes


def element_children(el):
    if el.text is not None:
        yield text(el.text)
    for child in el:
        view = from_lxml(child)
        if view is not None:
            yield view
        if child.tail is not None:
            yield text(child.tail)


def from_lxml(el):
    """
    build the view of one lxml tree node, entity references have no view and give None
    """
    if isinstance(el, lxml_etree._Comment):
        return comment(el.text or '')
    if isinstance(el, lxml_etree._ProcessingInstruction):
        data = el.target if not el.text else '%s %s' % (el.target, el.text)
        return declaration(data)
    if isinstance(el, lxml_etree._Entity):
        return None
    return Node(NodeKind.ELEMENT,
                local_name=lxml_etree.QName(el).localname,
                prefix=el.prefix,
                attributes=element_attributes(el),
                children=lambda: element_children(el))


def format_number(value):
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    return str(int(value)) if value == int(value) else repr(value)


def from_result(result):
    """
    turn an XPath evaluation result into the list of views to render
    :param result: whatever ElementTree.xpath returned
    :return: list of Node
    """
    if isinstance(result, bool):
        return [text('true' if result else 'false')]
    if isinstance(result, float):
        return [text(format_number(result))]
    if isinstance(result, str):
        return [text(result)]
    views = []
    for item in result:
        if isinstance(item, str):
            views.append(text(item))
            continue
        if isinstance(item, tuple):
            # namespace axis results are (prefix, url) pairs
            views.append(text(item[1]))
            continue
        if isinstance(item, lxml_etree._ElementTree):
            item = item.getroot()
        view = from_lxml(item)
        if view is not None:
            views.append(view)
    return views
