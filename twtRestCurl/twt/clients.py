"""
module clients
"""

import logging
import simplejson
from collections import namedtuple
from xml.etree import ElementTree
from twtRestCurl.py.requests import Client, ErrorRqHttp, ErrorRqCredentialsNotValid
from twtRestCurl.py.utilities import is_empty
from twtRestCurl.twt import urls
from twtRestCurl.twt.constants import (OutputFormat, TWT_URL_BASE, HDR_TWT_CLIENT, HDR_TWT_VERSION, HDR_TWT_URL)
from twtRestCurl.twt.endpoints import (EndPointsRest, ErrorTwtUnknownEndPoint, ErrorTwtUnknownParameters,
                                       prepare)


LOG = logging.getLogger(__name__)
LOG.debug("loading module: " + __name__)


class NoContent(object):
    """the type of :data:`NO_CONTENT`, the result of a GET on a missing resource (HTTP 404),
    it is falsy but it is neither an empty body nor an error, test it with ``is NO_CONTENT``
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(NoContent, cls).__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __reduce__(self):
        return (self.__class__, ())

    def __repr__(self):
        return '<NoContent>'

NO_CONTENT = NoContent()


ClientIdentity = namedtuple('ClientIdentity', ['name', 'version', 'url'])
ClientIdentity.__new__.__defaults__ = (None, None, None)

ClientConfig = namedtuple('ClientConfig', ['base_url', 'source', 'identity', 'strict_credentials'])
ClientConfig.__new__.__defaults__ = (TWT_URL_BASE, None, ClientIdentity(), False)


class ErrorRqHttpTwt(ErrorRqHttp):
    def __init__(self, response):
        """twitter puts a message in the body of most errors i.e:
        {"request": "/statuses/update.json", "error": "Could not authenticate you."}
        we keep it in msg (None if body is not json or has no error)
        """
        super(ErrorRqHttpTwt, self).__init__(response.status_http, response.data)
        self.msg = None
        try:
            payload = simplejson.loads(self.data)
        except ValueError:
            return
        if isinstance(payload, dict):
            self.msg = payload.get('error')

    def __str__(self):
        return "HTTP {!s} {}".format(self.status_http, self.msg if self.msg else self.data)


def parse_body(body, fmt):
    """decodes a response body, json to python objects, xml, rss and atom to an ElementTree.Element

    :param str body: a response body
    :param fmt: an :class:`OutputFormat` or its name
    :returns: decoded body, None if body is empty, blank or :data:`NO_CONTENT`
    """
    if body is NO_CONTENT or is_empty(body) or not body.strip():
        return None
    if OutputFormat.get(fmt).is_xml:
        return ElementTree.fromstring(body)
    return simplejson.loads(body)


class ClientTwtRest(Client):
    """client for twitter `REST <http://apiwiki.twitter.com/REST+API+Documentation>`_ API
    using basic authentication, credentials are supplied per call

    :param ClientConfig config: base url, attribution source, client identity
    :param dict kwargs: for acceptable kwargs see :class:`~.Client`

    a call returns the response body (str), :data:`NO_CONTENT` (GET on 404) or None
    (POST without credentials) or raises, see :func:`request_ep`

    config is read once at the start of each call, replacing it (see :func:`configure`)
    while other threads issue calls is the caller's responsibility

    :example:
        >>> client = ClientTwtRest(ClientConfig(source='myapp', identity=ClientIdentity('MyApp', '1.0')))
        >>> client.api.statuses.update(status='hello', credentials=Credentials('alice', 'secret'))
        '{"id": 1, "text": "hello", ...}'
        >>> client.api.statuses.user_timeline('nobody', fmt='xml')
        <NoContent>
    """

    def __init__(self, config=None, **kwargs):
        self._endpoints = EndPointsRest(parent=self)
        # composition with an endpoints object this allows to:
        # 1) call it using dot notation 2) validate endpoints
        super(ClientTwtRest, self).__init__(**kwargs)
        self.config = config if config is not None else ClientConfig()
        self.api = self._endpoints

    def configure(self, **changes):
        """replaces config with a copy where changes are applied i.e. ``client.configure(source='myapp')``

        :returns: the new config
        """
        self.config = self.config._replace(**changes)
        return self.config

    @staticmethod
    def client_headers(config):
        """:returns: a list of client identification headers, only for fields that are set"""
        identity = config.identity or ClientIdentity()
        rt = [(HDR_TWT_CLIENT, identity.name), (HDR_TWT_VERSION, identity.version), (HDR_TWT_URL, identity.url)]
        return ["{}: {}".format(k, v) for k, v in rt if not is_empty(v)]

    def on_request_error_http(self, response):
        """a 404 on a GET means there is nothing there, we let it through, anything else is an error"""
        if response.method == 'GET' and response.status_http == 404:
            LOG.debug("no content {:s}".format(response.url))
            return
        raise ErrorRqHttpTwt(response)

    def execute_get(self, url, credentials=None):
        """
        :param str url: a complete url (including query string)
        :param Credentials credentials: sent only if both user name and password are non empty
        :returns: response body or :data:`NO_CONTENT` if server answered 404
        :raises: :class:`ErrorRqHttpTwt` :class:`~.ErrorRqCurl`
        """
        response = self.request(url, 'GET', credentials=credentials)
        if response.status_http == 404:
            return NO_CONTENT
        return response.data

    def execute_post(self, url, credentials=None, data=None, config=None):
        """
        :param str url: a complete url (including query string)
        :param Credentials credentials: user name and password, both required
        :param str data: url-encoded body, config's source is appended to it
        :param ClientConfig config: defaults to instance's config
        :returns: response body or None if no valid credentials (nothing is sent)
        :raises: :class:`ErrorRqHttpTwt` :class:`~.ErrorRqCurl`,
            :class:`~.ErrorRqCredentialsNotValid` instead of returning None if config.strict_credentials
        """
        config = config if config is not None else self.config
        if credentials is None or not credentials.is_valid():
            if config.strict_credentials:
                raise ErrorRqCredentialsNotValid("POST {} requires user name and password".format(url))
            LOG.warning("POST {} not sent, user name and password required".format(url))
            return None
        data = urls.append_source(data, config.source)
        response = self.request(url, 'POST', data, headers=self.client_headers(config), credentials=credentials)
        return response.data

    def request_ep(self, end_point, fmt=OutputFormat.JSON, credentials=None, parse=False, **parms):
        """request end point

        :param str end_point: twitter REST end point i.e. 'statuses/update', 'direct_messages' see :func:`help`
        :param fmt: an :class:`OutputFormat` or its name (defaults to json)
        :param Credentials credentials: basic auth credentials
        :param bool parse: if True a non empty body is decoded see :func:`parse_body`
        :param dict parms: end point's parameters

        :return: response body, :data:`NO_CONTENT` or None see :func:`execute_get` :func:`execute_post`

        :raises: :class:`~.ErrorTwtValidation` before anything is sent,
            :class:`ErrorRqHttpTwt` :class:`~.ErrorRqCurl` on transport errors
        """
        config = self.config
        req = prepare(end_point, fmt, parms, base=config.base_url)
        if not req.spec.auth:
            credentials = None
        if req.method == 'POST':
            rt = self.execute_post(req.url, credentials, req.body, config)
        else:
            rt = self.execute_get(req.url, credentials)
        if parse and rt is not None and rt is not NO_CONTENT:
            return parse_body(rt, req.fmt)
        return rt

    invoke = request_ep

    def help(self, *args, **kwargs):
        """delegate help to be handled by endpoints object"""
        return self._endpoints.help(*args, **kwargs)

    def _adHocCmd_(self, element, *args, **kwargs):
        """this makes the trick of issuing requests against endpoints using dot notation syntax
        a single positional argument is taken as the end point's id (or screen name)
        i.e: ``client.api.users.show('bob', fmt='xml')``
        """
        dic_keys = str(element).split(self._endpoints.delimiter)[1:]  # Note get rid of root
        rt = self._endpoints.get_value_validate(dic_keys)
        if not rt:
            raise ErrorTwtUnknownEndPoint("/".join(dic_keys))
        if args:
            if rt.path_parm is None or len(args) > 1:
                raise ErrorTwtUnknownParameters(["positional{:d}".format(i) for i in range(len(args))], rt.name)
            kwargs[rt.path_parm] = args[0]
        return self.request_ep(rt.name, **kwargs)
