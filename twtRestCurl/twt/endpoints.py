'''
Created on Oct 28, 2014

the catalog of twitter REST end points, one :class:`OperationSpec` per operation,
and the validation that turns a call into a :class:`PreparedRequest`

@author: milon
'''

import logging
from collections import namedtuple
from twtRestCurl.py.requests import ErrorRq
from twtRestCurl.py.utilities import DotDot, AdHocTree, is_empty
from twtRestCurl.twt import urls
from twtRestCurl.twt.constants import (OutputFormat, ResourceCategory as R, Action as A,
                                       FORMATS_ALL, FORMATS_JSON_XML, DELIVERY_DEVICES, TWT_URL_BASE,
                                       TWT_URL_HELP_REST)

LOG = logging.getLogger(__name__)
LOG.debug("loading module: " + __name__)


class ErrorTwtValidation(ErrorRq, ValueError):
    """a call that can't be sent, always raised before any network activity"""


class ErrorTwtMissingParameters(ErrorTwtValidation):
    def __init__(self, parm_names_lst, end_point=''):
        self.parm_names = list(parm_names_lst)
        msg = "Missing parameters {} {}".format(" ".join(self.parm_names), end_point).strip()
        super(ErrorTwtMissingParameters, self).__init__(msg)


class ErrorTwtFormatNotSupported(ErrorTwtValidation):
    def __init__(self, fmt, end_point, formats):
        msg = "{} supports only {} output formats, got {!s}".format(
            end_point, ",".join(sorted(f.value for f in formats)), fmt)
        super(ErrorTwtFormatNotSupported, self).__init__(msg)


class ErrorTwtInvalidParameter(ErrorTwtValidation):
    def __init__(self, parm_name, value, choices):
        msg = "{} can only have the values: {} got {!r}".format(parm_name, ",".join(choices), value)
        super(ErrorTwtInvalidParameter, self).__init__(msg)


class ErrorTwtUnknownParameters(ErrorTwtValidation):
    def __init__(self, parm_names_lst, end_point):
        msg = "unknown parameter(s)[{}] in {}".format(" ".join(sorted(parm_names_lst)), end_point)
        super(ErrorTwtUnknownParameters, self).__init__(msg)


class ErrorTwtUnknownEndPoint(ErrorTwtValidation):
    def __init__(self, end_point):
        super(ErrorTwtUnknownEndPoint, self).__init__("no such end point: {}".format(end_point))


OperationSpec = namedtuple('OperationSpec', [
    'name',         # operation name, also the key in catalog i.e. 'statuses/update'
    'resource',     # ResourceCategory
    'action',       # Action or None for flat collection urls i.e. favorites.json
    'method',       # GET or POST
    'formats',      # frozenset of accepted OutputFormat(s)
    'path_parm',    # name of parameter that goes into url path (id or screen name) or None
    'query',        # tuple of parameter names that go into query string (in order)
    'body',         # tuple of parameter names that go into POST body (in order)
    'required',     # tuple of parameter names that must be present and non empty
    'choices',      # dict {parameter name: allowed values} values are trimmed and lower cased
    'auth',         # False if request must never carry credentials
])

PreparedRequest = namedtuple('PreparedRequest', ['spec', 'fmt', 'method', 'url', 'body'])


def _op(resource, action, method, formats=FORMATS_JSON_XML, path_parm=None, query=(), body=(), required=(),
        choices=None, auth=True, name=None):
    if name is None:
        name = resource.value if action is None else '{}/{}'.format(resource.value, action.value)
    return OperationSpec(name, resource, action, method, frozenset(formats), path_parm, tuple(query), tuple(body),
                         tuple(required), choices or {}, auth)


_OPERATIONS = [
    _op(R.STATUSES, A.PUBLIC_TIMELINE, 'GET', FORMATS_ALL, auth=False),
    _op(R.STATUSES, A.USER_TIMELINE, 'GET', FORMATS_ALL, path_parm='id'),
    _op(R.STATUSES, A.FRIENDS_TIMELINE, 'GET', FORMATS_ALL),
    _op(R.STATUSES, A.FRIENDS, 'GET', path_parm='id'),
    _op(R.STATUSES, A.FOLLOWERS, 'GET'),
    _op(R.STATUSES, A.FEATURED, 'GET'),
    _op(R.STATUSES, A.REPLIES, 'GET', FORMATS_ALL, query=('page', 'since', 'since_id')),
    _op(R.STATUSES, A.UPDATE, 'POST', body=('status',), required=('status',)),
    _op(R.STATUSES, A.DESTROY, 'POST', path_parm='id', required=('id',)),
    _op(R.USERS, A.SHOW, 'GET', path_parm='id', required=('id',)),
    _op(R.DIRECT_MESSAGES, None, 'GET', FORMATS_ALL, query=('since', 'since_id', 'page')),
    _op(R.DIRECT_MESSAGES, A.SENT, 'GET', FORMATS_ALL, query=('since', 'since_id', 'page')),
    _op(R.DIRECT_MESSAGES, A.NEW, 'POST', body=('user', 'text'), required=('user', 'text')),
    _op(R.DIRECT_MESSAGES, A.DESTROY, 'POST', path_parm='id', required=('id',)),
    _op(R.FRIENDSHIPS, A.CREATE, 'POST', path_parm='id', query=('follow',), required=('id',)),
    _op(R.FRIENDSHIPS, A.DESTROY, 'POST', path_parm='id', required=('id',)),
    _op(R.FRIENDSHIPS, A.EXISTS, 'GET', FORMATS_ALL, query=('user_a', 'user_b'), required=('user_a', 'user_b')),
    _op(R.ACCOUNT, A.VERIFY_CREDENTIALS, 'GET'),
    _op(R.ACCOUNT, A.END_SESSION, 'POST'),
    _op(R.ACCOUNT, A.UPDATE_DELIVERY_DEVICE, 'POST', query=('device',), required=('device',),
        choices={'device': DELIVERY_DEVICES}),
    _op(R.ACCOUNT, A.UPDATE_PROFILE_COLORS, 'POST',
        body=('profile_background_color', 'profile_text_color', 'profile_link_color',
              'profile_sidebar_fill_color', 'profile_sidebar_border_color')),
    _op(R.ACCOUNT, A.RATE_LIMIT_STATUS, 'GET'),
    _op(R.ACCOUNT, A.UPDATE_PROFILE, 'POST', body=('name', 'email', 'url', 'location', 'description')),
    _op(R.FAVORITES, None, 'GET', FORMATS_ALL, query=('id', 'page')),
    _op(R.FAVORITES, A.CREATE, 'POST', path_parm='id', required=('id',)),
    _op(R.FAVORITES, A.DESTROY, 'POST', path_parm='id', required=('id',)),
    _op(R.NOTIFICATIONS, A.FOLLOW, 'POST', path_parm='id', required=('id',)),
    _op(R.NOTIFICATIONS, A.LEAVE, 'POST', path_parm='id', required=('id',)),
    _op(R.BLOCKS, A.CREATE, 'POST', path_parm='id', required=('id',)),
    _op(R.BLOCKS, A.DESTROY, 'POST', path_parm='id', required=('id',)),
]

END_POINTS = DotDot((op.name, op) for op in _OPERATIONS)


def get_spec(end_point):
    """:returns: the :class:`OperationSpec` of end_point
    :param end_point: an operation name i.e. 'statuses/update' or a list i.e. ['statuses', 'update']
    :raises: :class:`ErrorTwtUnknownEndPoint`
    """
    if isinstance(end_point, (list, tuple)):
        end_point = EndPointsRest.delimiter.join(str(i) for i in end_point)
    if not isinstance(end_point, str):
        raise ErrorTwtUnknownEndPoint(end_point)
    try:
        return END_POINTS[end_point.strip(EndPointsRest.delimiter)]
    except KeyError:
        raise ErrorTwtUnknownEndPoint(end_point)


def prepare(end_point, fmt=OutputFormat.JSON, parms=None, base=TWT_URL_BASE):
    """validates a call and builds its url and body,
    validation order: unknown parameters, required parameters, output format, value choices

    :param end_point: operation name or an :class:`OperationSpec`
    :param fmt: an :class:`OutputFormat` or its name
    :param dict parms: operation parameters
    :param str base: base url
    :returns: a :class:`PreparedRequest` body is an encoded str for POST (without source) None for GET
    :raises: :class:`ErrorTwtValidation` descendants
    """
    spec = end_point if isinstance(end_point, OperationSpec) else get_spec(end_point)
    parms = dict(parms or {})
    known = set(spec.query) | set(spec.body) | set(spec.required)
    if spec.path_parm:
        known.add(spec.path_parm)
    unknown = [k for k in parms if k not in known]
    if unknown:
        raise ErrorTwtUnknownParameters(unknown, spec.name)
    missing = [k for k in spec.required if is_empty(parms.get(k))]
    if missing:
        raise ErrorTwtMissingParameters(missing, spec.name)
    try:
        fmt_valid = OutputFormat.get(fmt)
    except ValueError:
        raise ErrorTwtFormatNotSupported(fmt, spec.name, spec.formats)
    if fmt_valid not in spec.formats:
        raise ErrorTwtFormatNotSupported(fmt_valid.value, spec.name, spec.formats)
    for k, allowed in spec.choices.items():
        if not is_empty(parms.get(k)):
            value = str(parms[k]).strip().lower()
            if value not in allowed:
                raise ErrorTwtInvalidParameter(k, parms[k], allowed)
            parms[k] = value
    url = urls.build_url(spec.resource, spec.action, fmt_valid,
                         path_suffix=parms.get(spec.path_parm) if spec.path_parm else None,
                         query=[(k, parms.get(k)) for k in spec.query],
                         base=base)
    body = urls.encode_body([(k, parms.get(k)) for k in spec.body]) if spec.method == 'POST' else None
    return PreparedRequest(spec, fmt_valid, spec.method, url, body)


class EndPointsRest(object):
    """end points registry, gives dot notation access and help on end points
    i.e: ``endpoints.statuses.user_timeline('bob', fmt='xml')`` is dispatched to parent's ``_adHocCmd_``
    """
    _end_points = END_POINTS
    _msg_wrong_ep = "no such end point, select one of the following:"
    delimiter = "/"

    def __init__(self, parent=None):
        self.parent = parent
        self._attrs = AdHocTree(parent=parent, name="root")

    def __getattr__(self, attr):
        """ delegate to attrs object
        """
        if attr.startswith("_"):
            raise AttributeError(attr)
        return self._attrs.__getattr__(attr)

    @classmethod
    def get_value(cls, path_or_list=None):
        """
        :param path_or_list: a path of the form: 'statuses/update' or just 'statuses'
            or a list: ['statuses', 'update']
        :returns: an :class:`OperationSpec` for a complete path,
            else a dict of the operations under that path (all of them if path is None)
        """
        if path_or_list is None:
            path_or_list = []
        if not isinstance(path_or_list, (list, tuple)):
            path_or_list = [i for i in path_or_list.split(cls.delimiter) if i]
        name = cls.delimiter.join(path_or_list)
        if name in cls._end_points:
            return cls._end_points[name]
        prefix = name + cls.delimiter if name else ''
        return DotDot((k, v) for k, v in cls._end_points.items() if k.startswith(prefix))

    @classmethod
    def get_value_validate(cls, uri_components_lst):
        """:returns: an :class:`OperationSpec` or False (after logging valid choices) if not an end point"""
        rt = cls.get_value(uri_components_lst)
        if isinstance(rt, OperationSpec):
            return rt
        LOG.warning("{} {}".format(cls._msg_wrong_ep, ", ".join(sorted(rt.keys()))))
        return False

    @classmethod
    def help(cls, path=None):
        """:returns: a human readable description of end point(s) under path"""
        rt = cls.get_value(path)
        specs = [rt] if isinstance(rt, OperationSpec) else [rt[k] for k in sorted(rt.keys())]
        lines = []
        for spec in specs:
            parms = ([spec.path_parm] if spec.path_parm else []) + list(spec.query) + list(spec.body)
            parms = ["{}{}".format(p, "*" if p in spec.required else "") for p in parms]
            lines.append("{:4s} {:40s} [{}] ({})".format(
                spec.method, spec.name, ",".join(sorted(f.value for f in spec.formats)), " ".join(parms)))
        lines.append("see at: {}".format(TWT_URL_HELP_REST))
        return "\n".join(lines)
