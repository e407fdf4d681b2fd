#!/usr/bin/env python
"""
Select nodes from an XML document on stdin with an XPath expression and
print each of them on its own line.
"""
import argparse
import sys
from collections import namedtuple

from lxml import etree as lxml_etree

import util
import xmlnodes
import xmlrender
from util import CommandLineError, ParseError, QueryError, WriteError, XmlQueryError, diag

defaults = {
    'expression': '',
    'contents_only': False,
    'color': False,
    'no_color': False,
    'no_children': False,
    'print_help': False,
    'verbose': 0,
    'reraise_errors': False,
}

Options = namedtuple('Options', ['expression', 'contents_only', 'color', 'no_color', 'no_children',
                                 'print_help', 'verbose', 'reraise_errors'])

description = 'Select nodes from the XML document read from standard input and print them, one per line.'


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise CommandLineError(message)


def build_parser():
    parser = ArgumentParser(prog='xmlquery', description=description, add_help=False)
    parser.add_argument('-h', '-help', '--help', dest='print_help', action='store_true',
                        help='print this help')
    parser.add_argument('-expr', '--expr', dest='expression', metavar='EXPRESSION',
                        help='XPath expression to select nodes from the input')
    parser.add_argument('-contents-only', '--contents-only', dest='contents_only', action='store_true',
                        help='print only the contents of selected nodes')
    parser.add_argument('-color', '--color', dest='color', action='store_true',
                        help='use colored output')
    parser.add_argument('-no-color', '--no-color', dest='no_color', action='store_true',
                        help="don't use colored output")
    parser.add_argument('-no-children', '--no-children', dest='no_children', action='store_true',
                        help="don't output child nodes of selected nodes")
    parser.add_argument('-v', '-verbose', '--verbose', dest='verbose', action='count', default=0,
                        help='diagnostic output on stderr, repeat for more detail')
    parser.add_argument('-reraise-errors', '--reraise-errors', dest='reraise_errors', action='store_true',
                        help='raise errors with a traceback instead of exiting')
    return parser


def validate_options(raw, usage=None, out=None):
    """
    turn raw flag values into Options
    :param raw: mapping of option name to value, missing or None values use the defaults
    :param usage: text printed when help is requested
    :param out: where the help text goes, stdout when None
    :return: Options
    """
    values = dict(defaults)
    values.update({key: value for key, value in dict(raw).items() if key in defaults and value is not None})

    if values['print_help']:
        print(usage or '', end='', file=sys.stdout if out is None else out)
        sys.exit(0)

    if not values['expression']:
        raise CommandLineError("no expression specified")

    if values['color'] and values['no_color']:
        raise CommandLineError("cannot use -color and -no-color together")

    return Options(**values)


def resolve_color(is_terminal, color_flag, no_color_flag):
    use_color = is_terminal or color_flag

    if no_color_flag:
        use_color = False

    return use_color


def output_is_terminal(stream):
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty is not None and isatty())


def parse_xml(xml_file):
    try:
        return lxml_etree.parse(xml_file)

    except lxml_etree.XMLSyntaxError as e:
        raise ParseError("parse XML: %s" % e)

    except IOError as e:
        raise ParseError("parse XML: %s" % e)


def query(xml_tree, expression, out_diag=None):
    namespaces = util.namespace_map(xml_tree)
    diag(3, "DETAIL", "namespace prefixes %s" % namespaces, out_diag)

    try:
        result = xml_tree.xpath(expression, namespaces=namespaces)

    except lxml_etree.XPathError as e:
        raise QueryError("execute query: %s" % e)

    return xmlnodes.from_result(result)


def process(options, stdin=None, stdout=None, stderr=None):
    """
    parse the input, run the query and print every selected node
    :param options: validated Options
    :param stdin: binary stream with the XML document, sys.stdin when None
    :param stdout: text stream for the selected nodes, sys.stdout when None
    :param stderr: text stream for diagnostics, sys.stderr when None
    """
    out_diag = sys.stderr if stderr is None else stderr
    out_xml = sys.stdout if stdout is None else stdout
    in_xml = sys.stdin.buffer if stdin is None else stdin

    # 0 - no output other than errors
    # >=1 - PARAM:    parameter
    # >=2 - PROGRESS: progress output
    # >=3 - DETAIL:   detailed output
    util.set_verbosity(options.verbose)
    diag(1, "PARAM", "expression %r" % options.expression, out_diag)
    diag(1, "PARAM", "contents-only %s, no-children %s, color %s, no-color %s" % (
        options.contents_only, options.no_children, options.color, options.no_color), out_diag)

    diag(2, "PROGRESS", "parsing XML from input", out_diag)
    xml_tree = parse_xml(in_xml)

    use_color = resolve_color(output_is_terminal(out_xml), options.color, options.no_color)
    diag(2, "PROGRESS", "colored output %s" % ("on" if use_color else "off"), out_diag)

    diag(2, "PROGRESS", "executing query", out_diag)
    nodes = query(xml_tree, options.expression, out_diag=out_diag)
    diag(2, "PROGRESS", "%d node%s selected" % (len(nodes), '' if len(nodes) == 1 else 's'), out_diag)

    config = xmlrender.RenderConfig(emit_self=not options.contents_only,
                                    use_color=use_color,
                                    emit_children=not options.no_children)

    for node in nodes:
        diag(3, "DETAIL", "rendering %r" % node, out_diag)
        xmlrender.render(out_xml, node, config)

        try:
            out_xml.write("\n")
        except (IOError, ValueError) as e:
            raise WriteError("write XML: %s" % e)


def main(argv=None):
    parser = build_parser()
    options = None

    try:
        args = parser.parse_args(argv)
        options = validate_options(vars(args), usage=parser.format_help())
        process(options)

    except CommandLineError as e:
        print(e.message, file=sys.stderr)
        print(file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    except XmlQueryError as e:
        print("XMLQUERY ERROR: %s" % e.message, file=sys.stderr)
        if options is not None and options.reraise_errors:
            raise
        return 2

    return 0


if __name__ == '__main__':
    sys.exit(main())
