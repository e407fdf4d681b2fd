import unittest

from utils4test import *
from util import WriteError
from xmlnodes import comment, declaration, element, text
from xmlrender import CYAN, GREEN, MAGENTA, RESET, RESET_COLOR, YELLOW, ColorWriter, RenderConfig, render


class TestRenderPlain(unittest.TestCase):

    def test_empty_element(self):
        self.assertEqual('<foo></foo>', render_to_string(element('foo')))

    def test_namespaced_element(self):
        self.assertEqual('<ns:bar></ns:bar>', render_to_string(element('bar', prefix='ns')))

    def test_attribute_order_and_raw_values(self):
        node = element('e', attributes=[('', 'id', '1'), ('', 'class', 'a&b')])
        self.assertEqual('<e id="1" class="a&b"></e>', render_to_string(node))

    def test_namespaced_attribute(self):
        node = element('e', attributes=[('xlink', 'href', '#x')])
        self.assertEqual('<e xlink:href="#x"></e>', render_to_string(node))

    def test_text_is_trimmed_and_escaped(self):
        self.assertEqual('a &lt; b', render_to_string(text('  a < b  ')))

    def test_text_escapes_quotes_and_line_breaks(self):
        self.assertEqual('&#34;x&#39; &amp;&#xA;&gt;', render_to_string(text('"x\' &\n>')))

    def test_comment_is_rendered_as_text(self):
        self.assertEqual('keep &amp; go', render_to_string(comment(' keep & go ')))

    def test_declaration_has_no_closing_tag(self):
        node = declaration('xml version="1.0"')
        self.assertEqual('<?xml version="1.0"?>', render_to_string(node))
        self.assertEqual('<?xml version="1.0"?>', render_to_string(node, emit_children=False))

    def test_declaration_with_attributes(self):
        node = declaration('xml')
        node.attributes = (xmlnodes.Attribute('', 'version', '1.0'),)
        self.assertEqual('<?xml version="1.0"?>', render_to_string(node))

    def test_nested_children_in_order(self):
        node = element('root', children=[element('a', children=[text('x')]), text(' y '), element('b')])
        self.assertEqual('<root><a>x</a>y<b></b></root>', render_to_string(node))

    def test_contents_only(self):
        node = element('root', children=[element('a'), element('b')])
        self.assertEqual('<a></a><b></b>', render_to_string(node, emit_self=False))

    def test_contents_only_of_text_is_empty(self):
        self.assertEqual('', render_to_string(text('abc'), emit_self=False))

    def test_no_children(self):
        visited = []

        def children():
            visited.append(True)
            return [element('a')]

        node = element('root', children=children)
        self.assertEqual('<root></root>', render_to_string(node, emit_children=False))
        self.assertEqual([], visited)

    def test_contents_only_without_grandchildren(self):
        node = element('root', children=[element('a', children=[element('deep')]), text('t')])
        self.assertEqual('<a></a>t', render_to_string(node, emit_self=False, emit_children=False))

    def test_text_children_are_never_visited(self):
        node = xmlnodes.Node(xmlnodes.NodeKind.TEXT, text_content='x', children=[element('hidden')])
        self.assertEqual('<a>x</a>', render_to_string(element('a', children=[node])))


class TestRenderColor(unittest.TestCase):

    def test_element_without_attributes(self):
        expected = MAGENTA + '<a' + RESET + RESET + MAGENTA + '>' + RESET + MAGENTA + '</a>' + RESET_COLOR
        self.assertEqual(expected, render_to_string(element('a'), use_color=True))

    def test_attribute_color_sequence(self):
        node = element('a', attributes=[('', 'id', '1'), ('', 'x', '2')])
        expected = (MAGENTA + '<a' + RESET +
                    YELLOW + ' id="' + RESET + CYAN + '1' + RESET + YELLOW + '"' +
                    YELLOW + ' x="' + RESET + CYAN + '2' + RESET + YELLOW + '"' +
                    RESET +
                    MAGENTA + '>' + RESET +
                    MAGENTA + '</a>' + RESET_COLOR)
        self.assertEqual(expected, render_to_string(node, use_color=True))

    def test_declaration_is_green(self):
        expected = GREEN + '<?pi data' + RESET + RESET + GREEN + '?>' + RESET
        self.assertEqual(expected, render_to_string(declaration('pi data'), use_color=True))

    def test_text_is_not_colored(self):
        rendered = render_to_string(element('a', children=[text('plain')]), use_color=True)
        self.assertIn(RESET + 'plain' + MAGENTA + '</a>', rendered)

    def test_colors_do_not_change_markup(self):
        node = element('root', attributes=[('', 'k', 'v')], children=[element('b', prefix='p'), text('t & u')])
        self.assertEqual(render_to_string(node), strip_colors(render_to_string(node, use_color=True)))


class TestColorWriter(unittest.TestCase):

    def test_disabled_writer_writes_text_only(self):
        out = StringIO()
        writer = ColorWriter(out, False)
        writer.open(YELLOW)
        writer.write('abc')
        writer.reset()
        self.assertEqual('abc', out.getvalue())
        self.assertIsNone(writer.color)

    def test_tracks_active_color(self):
        writer = ColorWriter(StringIO(), True)
        writer.open(CYAN)
        self.assertEqual(CYAN, writer.color)
        writer.reset(RESET_COLOR)
        self.assertIsNone(writer.color)
        self.assertEqual(CYAN + RESET_COLOR, writer.sink.getvalue())


class TestRenderErrors(unittest.TestCase):

    def test_write_failure_keeps_partial_output(self):
        sink = FailingSink(2)
        node = element('root', children=[element('a'), element('b')])
        with self.assertRaises(WriteError) as ctx:
            render(sink, node, RenderConfig(True, False, True))
        self.assertTrue(str(ctx.exception).startswith('write XML: '))
        self.assertEqual(['<root', '>'], sink.written)

    def test_write_error_is_an_io_error(self):
        with self.assertRaises(IOError):
            render(FailingSink(0), text('x'), RenderConfig(True, False, True))

    def test_color_code_failure(self):
        with self.assertRaises(WriteError) as ctx:
            render(FailingSink(0), element('a'), RenderConfig(True, True, True))
        self.assertTrue(str(ctx.exception).startswith('write color code: '))


if __name__ == '__main__':
    unittest.main()
