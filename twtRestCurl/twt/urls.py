"""
module urls: pure functions that turn (resource, action, format, suffix, parameters)
into request urls and form bodies, no I/O here
"""
from enum import Enum
from urllib.parse import quote, quote_plus, urlencode
from twtRestCurl.py.utilities import to_text, is_empty
from twtRestCurl.twt.constants import TWT_URL_BASE, TWT_URL_API, TWT_URL_API_FLAT, PARM_SOURCE, OutputFormat


def _name(member):
    return (member.value if isinstance(member, Enum) else str(member)).lower()


def _pairs(parms):
    """:returns: a list of (key, text) tuples preserving caller's order, empty values are dropped"""
    if parms is None:
        return []
    items = parms.items() if isinstance(parms, dict) else parms
    return [(k, to_text(v)) for k, v in items if not is_empty(v)]


def encode_query(parms):
    """url-encodes parameters (form style), order is preserved

    :param parms: a dict or a sequence of (key, value) tuples, None or empty values are skipped
    :returns: str i.e: 'user_a=alice&user_b=bob' or '' if nothing to encode
    """
    return urlencode(_pairs(parms))


encode_body = encode_query   # POST bodies use the very same encoding


def append_source(body, source):
    """appends the attribution source as the last field of an encoded body"""
    if is_empty(source):
        return body or ''
    field = '{}={}'.format(PARM_SOURCE, quote_plus(to_text(source)))
    return '{}&{}'.format(body, field) if body else field


def build_url(resource, action=None, fmt=OutputFormat.JSON, path_suffix=None, query=None, base=TWT_URL_BASE):
    """builds a request url of the form ``<base>/<resource>/<action>[/<path_suffix>].<format>[?query]``
    or ``<base>/<resource>.<format>[?query]`` when action is None

    :param resource: a :class:`ResourceCategory` member (or its name)
    :param action: an :class:`Action` member (or its name) or None for collection urls
    :param fmt: an :class:`OutputFormat` member (or its name)
    :param path_suffix: an id or screen name, url-quoted and inserted after the action
    :param query: query parameters see :func:`encode_query`
    :param str base: scheme and host part of url without a trailing slash

    :Example:
        >>> build_url(ResourceCategory.STATUSES, Action.UPDATE, OutputFormat.JSON)
        'http://twitter.com/statuses/update.json'
        >>> build_url('friendships', 'exists', 'xml', query=[('user_a', 'alice'), ('user_b', 'bob')])
        'http://twitter.com/friendships/exists.xml?user_a=alice&user_b=bob'
    """
    fmt = OutputFormat.get(fmt)
    base = base.rstrip('/')
    if action is None:
        url = TWT_URL_API_FLAT.format(base=base, resource=_name(resource), format=fmt.value)
    else:
        action = _name(action)
        if not is_empty(path_suffix):
            action = '{}/{}'.format(action, quote(to_text(path_suffix), safe=''))
        url = TWT_URL_API.format(base=base, resource=_name(resource), action=action, format=fmt.value)
    query_str = encode_query(query)
    return '{}?{}'.format(url, query_str) if query_str else url
