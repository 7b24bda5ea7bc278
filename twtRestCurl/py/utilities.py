"""
some useful utilities used in multiple places
:author: nickmilon
"""
from datetime import datetime


FMT_DT_RFC1123 = "%a, %d %b %Y %H:%M:%S GMT"   # HTTP date format, always expressed in GMT


def is_empty(value):
    """:returns: True for None and for zero length strings, False for anything else (0, False and ' ' are values)"""
    return value is None or (isinstance(value, (str, bytes)) and len(value) == 0)


def to_text(value, encoding='utf-8'):
    """renders a request parameter value as text

    :param value: str, bytes, bool, int, datetime or any object with a sensible str()
    :returns: str

    :Example:
        >>> to_text(True), to_text(12), to_text(datetime(2008, 6, 10, 12))
        ('true', '12', 'Tue, 10 Jun 2008 12:00:00 GMT')
    """
    if isinstance(value, bytes):
        return value.decode(encoding)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, datetime):
        if value.utcoffset() is not None:
            value = value - value.utcoffset()
        return value.strftime(FMT_DT_RFC1123)
    return str(value)


class DotDot(dict):
    """
    A dictionary that can handle dot notation to access its members (useful when parsing JSON content),
    to keep casting to it cheap it doesn't handle creating multilevel keys using dot notation.

    :Example:
        >>> dd = DotDot()
        >>> dd.a = 1
        >>> dd
        {'a': 1}
        >>> dd.b = {'b1': 21, 'b2': 22}
        >>> dd.b.b1
        21
    """
    def __getattr__(self, attr):
        try:
            item = self[attr]
        except KeyError as e:
            raise AttributeError(e)    # expected Error by pickle on __getstate__ etc
        if isinstance(item, dict) and not isinstance(item, DotDot):
            item = DotDot(item)
        return item
    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__


class AdHocTree(object):
    """builds an arbitrary tree structure using object attributes,
    calling a node delegates to the ``_adHocCmd_`` method of the root's parent

    :Usage:
        >>> aht = AdHocTree().statuses.update
        >>> aht
        <AdHocTree: root/statuses/update>
        >>> aht.path()
        'root/statuses/update'
    """

    __slots__ = ['parent', 'name']  # don't create __dict__ just those 2 slots

    def __init__(self, parent=None, name="root"):
        """
        :param obj parent: parent object, defaults to None
        :param str name: name of the Tree, defaults to root
        """
        self.parent = parent
        self.name = name

    def __call__(self, *args, **kwargs):
        """calls _adHocCmd_ method on root's parent if exists"""
        elements = list(self)
        try:
            cmd = elements[-1].parent.__getattribute__('_adHocCmd_')
            # we don't use get or getattr here to avoid circular references
        except AttributeError:
            raise NotImplementedError("_adHocCmd_ {!s}".format(type(elements[-1].parent)))
        return cmd(elements[0], *args, **kwargs)

    def __getattr__(self, attr):
        if attr.startswith('__'):   # keep copy, pickle and friends away from the tree
            raise AttributeError(attr)
        return AdHocTree(self, attr)

    def __reduce__(self):
        """its pickle-able"""
        return (self.__class__, (self.parent, self.name))

    def __iter__(self):
        """iterates breadth-first up to root"""
        curAttr = self
        while isinstance(curAttr, AdHocTree):
            yield curAttr
            curAttr = curAttr.parent

    def __reversed__(self):
        return reversed(list(self))

    def __str__(self):
        return self.path()

    def __repr__(self):
        return '<{}: {}>'.format(self.__class__.__name__, self.path())

    def path(self, separator="/"):
        """:returns: a string representing the path to root element separated by separator"""
        return separator.join(i.name for i in reversed(self))
