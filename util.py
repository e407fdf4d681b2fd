import sys
from io import StringIO

from xml.sax.saxutils import escape

_verbose = 0

XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'

# same replacements as the classic XML text escaper, quotes and line breaks included
_text_entities = {
    '"': '&#34;',
    "'": '&#39;',
    '\t': '&#x9;',
    '\n': '&#xA;',
    '\r': '&#xD;',
}


def set_verbosity(n):
    global _verbose
    _verbose = n


def diag(level, prefix, message, out=None):
    """
    print a diagnostic line when the verbosity is at least level
    """
    if _verbose >= level:
        print("%s: %s" % (prefix, message), file=sys.stderr if out is None else out)


class CapturingStdout(list):

    def __enter__(self):
        self._stdout = sys.stdout
        sys.stdout = self._stringio = StringIO()
        return self

    def __exit__(self, *args):
        self.extend(self._stringio.getvalue().splitlines())
        sys.stdout = self._stdout


class CapturingStderr(list):

    def __enter__(self):
        self._stderr = sys.stderr
        sys.stderr = self._stringio = StringIO()
        return self

    def __exit__(self, *args):
        self.extend(self._stringio.getvalue().splitlines())
        sys.stderr = self._stderr


def escape_text(s):
    return escape(s, _text_entities)


def qualify(prefix, name):
    return prefix + ':' + name if prefix else name


def namespace_map(doc):
    """
    collect the prefixes declared anywhere in the document, first declaration wins
    :param doc: lxml element tree or element
    :return: dict of prefix: namespace url, without the default namespace
    """
    root = doc.getroot() if hasattr(doc, 'getroot') else doc
    nsmap = {}
    for el in root.iter():
        if not isinstance(el.tag, str):
            continue
        for prefix, url in el.nsmap.items():
            if prefix is not None and prefix not in nsmap:
                nsmap[prefix] = url
    return nsmap


def prefix_for(el, url):
    if url is None:
        return ''
    if url == XML_NAMESPACE:
        return 'xml'
    for prefix, ns_url in el.nsmap.items():
        if ns_url == url and prefix is not None:
            return prefix
    return ''


class XmlQueryError(Exception):
    def __init__(self, message):
        super(XmlQueryError, self).__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class CommandLineError(XmlQueryError):
    pass


class ParseError(XmlQueryError):
    pass


class QueryError(XmlQueryError):
    pass


class WriteError(XmlQueryError, IOError):
    pass
