'''
:module: requests (pyCurl based Requests)

a lightweight small footprint interface to pyCurl provides the base for twtRestCurl

.. Warning:: although classes defined here can possibly be used for generic http(s)
   requests those have only been tested for requests to twitter style REST APIs
'''
import logging
import pycurl
import simplejson
from urllib.parse import urlencode
from twtRestCurl import __version__
from twtRestCurl.py.utilities import DotDot, is_empty, to_text
from os import path

LOG = logging.getLogger(__name__)
LOG.debug("loading module: " + __name__)

CONTENT_TYPE_FORM = 'application/x-www-form-urlencoded'


class ErrorRq(Exception):
    """Exceptions base"""


class ErrorRqMissingKeys(ErrorRq):
    pass


class ErrorRqCredentialsNotValid(ErrorRq):
    pass


class ErrorRqTransport(ErrorRq):
    """base of anything that went wrong on the wire

    :ivar int status_http: HTTP status if we got that far else None
    :ivar str data: raw response body if any
    """
    status_http = None
    data = None


class ErrorRqHttp(ErrorRqTransport):
    """HTTP error"""
    def __init__(self, http_code, data=''):
        self.status_http = http_code
        self.data = data
        super(ErrorRqHttp, self).__init__(http_code, data)


class ErrorRqCurl(ErrorRqTransport):
    """Exceptions raised by Curl"""
    def __init__(self, err_number, msg):
        self.err_number = err_number
        self.msg = msg
        super(ErrorRqCurl, self).__init__(err_number, msg)


class CredentialsProvider(object):
    """Generic basic authentication credentials provider class
    """
    user_keys = ['user_name', 'password']

    @classmethod
    def get_credentials(cls, *args, **kwargs):
        """must return a dictionary with all user_keys
        classes inherited from this base class must implement this method
        """
        raise NotImplementedError

    @classmethod
    def validate(cls, credentials_dict):
        """validates credentials dictionary against missing keys
        """
        rt = [i for i in cls.user_keys if i not in list(credentials_dict.keys())]
        if rt:
            raise ErrorRqMissingKeys("missing keys: {}".format(",".join(rt)))
        return credentials_dict


class CredentialsProviderFile(CredentialsProvider):
    """simple file based credentials provider reads credentials from the contents of a json file
    i.e.: {"user_name": "alice", "password": "secret"}
    """
    def __call__(self, *args, **kwargs):
        rt = self.get_credentials(*args, **kwargs)
        return self.validate(rt)

    @classmethod
    def get_credentials(cls, file_path=None):
        """
        :param str file_path: full path name to a file, defaults to credentials.json in user's home directory
        :returns: a validated credentials dictionary
        :raises: IOError on file error
        """
        if file_path is None:  # defaults to credentials.json in home directory
            file_path = "{}/credentials.json".format(path.expanduser("~"))
        with open(file_path, "r") as fin:
            crd_dict = simplejson.load(fin)
        return cls.validate(crd_dict)


class Credentials(object):
    """a user name / password pair used for HTTP basic authentication,
    instances are supplied per request and never stored by clients
    """
    def __init__(self, user_name=None, password=None):
        self.user_name = user_name
        self.password = password

    @classmethod
    def from_file(cls, file_path=None):
        """:returns: Credentials built from a json file see :class:`CredentialsProviderFile`"""
        crd = CredentialsProviderFile()(file_path)
        return cls(crd['user_name'], crd['password'])

    def is_valid(self):
        """
        :returns: Boolean: True only if both user name and password are non empty
        """
        return not is_empty(self.user_name) and not is_empty(self.password)

    def __eq__(self, other):
        return isinstance(other, Credentials) and (self.user_name, self.password) == (other.user_name, other.password)

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self):
        return '<{:s}:{!s}>'.format(self.__class__.__name__, self.user_name)

    def __str__(self):
        return self.__repr__()


class Response(object):
    '''a lightweight HTTP response class handles only basic things since we want it to be fast,
    a new one is created for every request so it is safe to keep a reference to it
    '''
    def __init__(self, url=None, method=None):
        self.url = url
        self.method = method
        self.headers_raw = []
        self.raw = b''
        self.status_http = None         # status(int) from curl we get it only after perform
        self.status_provisional = None  # status(int) we derive it early from first header line
        self._headers = None

    def write_headers(self, headers_data):
        headers_data = headers_data.decode('iso-8859-1')
        if headers_data.startswith('HTTP/'):    # a new status line (i.e. after a redirect or 100 Continue)
            self.headers_raw = []
            self._headers = None
            try:
                self.status_provisional = int(headers_data.split(" ")[1])
            except (ValueError, IndexError):
                pass
        self.headers_raw.append(headers_data.strip())

    def write_data(self, data):
        self.raw += data

    @property
    def headers(self):
        """sets (on demand and only once) and returns headers dictionary
        :returns: the headers dictionary
        """
        if self._headers is None:
            lh = self.headers_raw
            hl = [hdr.split(': ', 1) for hdr in lh if hdr and not hdr.startswith('HTTP/')]
            self._headers = DotDot((header[0].lower(), header[1]) for header in hl if len(header) == 2)
            if lh:
                self._headers.status_raw = lh[0]
        return self._headers

    @property
    def data(self):
        """:returns: response body decoded as UTF-8, undecodable bytes become U+FFFD"""
        return self.raw.decode('utf-8', 'replace')

    @property
    def is_success(self):
        return self.status_http is not None and 200 <= self.status_http < 300

    def __repr__(self):
        return '<{}: {} {} {!s}>'.format(self.__class__.__name__, self.method, self.url, self.status_http)


class Client(object):
    """this is a minimal class to execute HTTP Requests via curl/pycurl,
    every request gets its own pycurl handle which is closed when request completes (or fails)
    all arguments are optional

    :param str user_agent: a user agent string to use in request header (defaults to class name + 'v '+ __version)
    :param str name: name for this instance if missing a default based on instance's id is provided see: :func:`name`
    :param bool allow_redirects: if True allows automatic redirects (defaults to False)
    :param int verbose: set to 0 for silent mode 1 to turn curl verbose and progress on, 2 to turn curl debug mode on (defaults to 0)

    :example:
        >>> client = Client()
        >>> response = client.get("http://twitter.com/statuses/public_timeline.json")
        >>> response.status_http
        200
    """
    def __init__(
        self,
        user_agent=None,        # a user agent string to use in request
        name=None,              # a name to distinguish the instance (defaults to str(id(instance))[-4:]
        verbose=0,              # 0 for silent mode 1 to turn curl verbose on, 2 to turn curl debug mode on
        allow_redirects=False   # if True allows automatic redirects
            ):
            self.request_headers = []
            self.verbose = verbose
            self.set_user_agent(user_agent)
            self.name = name
            self._allow_redirects = allow_redirects

    @property
    def name(self):
        """
        :returns: instance's name
        """
        return self._name

    @name.setter
    def name(self, name=None):
        self._name = name if name is not None else str(id(self))[-4:]

    @property
    def request_headers(self):
        """
        :returns: standard request headers sent with every request
        """
        return self._request_headers

    @request_headers.setter
    def request_headers(self, request_headers):
        """sets request headers
        :param list request_headers: request headers i.e:['Accept: text/html', 'Max-Forwards: 2']
        """
        self._request_headers = request_headers

    def _handle_init(self, response):
        """initializes a pycurl handle bound to response, override for any special set up
        `for options details see <http://curl.haxx.se/libcurl/c/curl_easy_setopt.html>`_
        """
        handle = pycurl.Curl()
        handle.setopt(pycurl.FOLLOWLOCATION, 1 if self._allow_redirects is True else 0)
        handle.setopt(pycurl.USERAGENT, self.user_agent)
        handle.setopt(pycurl.ENCODING, 'deflate, gzip')
        handle.setopt(pycurl.HEADERFUNCTION, response.write_headers)
        handle.setopt(pycurl.WRITEFUNCTION, response.write_data)
        handle.setopt(pycurl.NOPROGRESS, 1)
        handle.setopt(pycurl.VERBOSE, 1 if self.verbose > 0 else 0)
        if self.verbose == 2:
            handle.setopt(pycurl.DEBUGFUNCTION, self.handle_on_debug)
        self._handle_init_end(handle)
        return handle

    def _handle_init_end(self, handle):
        """modify in descendants if additional initialization requirements"""

    def handle_set(self, handle, url, method, data=None, headers=None, credentials=None):
        """
        :param handle: pycurl handle as returned by :func:`_handle_init`
        :param str url: url to be used by request (including any query string)
        :param str method: method to be used by request
        :param data: POST body, an already url-encoded str or a dict/list of pairs to be encoded
        :param list headers: extra headers for this request only i.e:['X-Foo: bar']
        :param Credentials credentials: basic auth credentials, ignored unless :func:`Credentials.is_valid`
        :raises: KeyError: if method is not one of GET POST
        """
        headers = self.request_headers + (headers or [])
        headers.append('Expect:')   # no "Expect: 100-continue" hand shake, some servers choke on it
        if credentials is not None and credentials.is_valid():
            handle.setopt(pycurl.HTTPAUTH, pycurl.HTTPAUTH_BASIC)
            handle.setopt(pycurl.USERNAME, to_text(credentials.user_name).encode('utf-8'))
            handle.setopt(pycurl.PASSWORD, to_text(credentials.password).encode('utf-8'))
        handle.setopt(pycurl.URL, url)
        if method == 'GET':
            handle.setopt(pycurl.HTTPGET, 1)
        elif method == 'POST':
            if data is None:
                data = ''
            elif not isinstance(data, (str, bytes)):
                data = urlencode(data)
            if isinstance(data, str):
                data = data.encode('utf-8')
            headers.append('Content-Type: %s' % CONTENT_TYPE_FORM)
            handle.setopt(pycurl.POST, 1)
            handle.setopt(pycurl.POSTFIELDSIZE, len(data))
            handle.setopt(pycurl.POSTFIELDS, data)
        else:
            raise KeyError('method:[%s] is not supported' % method)
        handle.setopt(pycurl.HTTPHEADER, [i.encode('utf-8') for i in headers])

    def on_request_start(self, response):
        '''called when a request starts override in descendants as needed'''
        pass

    def on_request_end(self, response):
        '''called when a request ends successfully override in descendants as needed'''
        pass

    def on_request_error_curl(self, err, response):
        """default error handling, for curl (connection) Errors override method for any special handling
        `see libcurl error codes <http://curl.haxx.se/libcurl/c/libcurl-errors.html>`_
        """
        raise ErrorRqCurl(err.args[0], err.args[1] if len(err.args) > 1 else '')

    def on_request_error_http(self, response):
        """default error handling, for HTTP Errors override method for any special handling,
        raise an exception or return to let the response through
        """
        raise ErrorRqHttp(response.status_http, response.data)

    def request(self, url, method, data=None, headers=None, credentials=None):
        """
        :param str url: requests' url
        :param str method: request method GET|POST
        :param data: POST body see :func:`handle_set`
        :param list headers: extra headers for this request only
        :param Credentials credentials: basic auth credentials

        :return: an instance of :class:`~.Response`

        :Raises: :class:`ErrorRqHttp` or :class:`ErrorRqCurl`
        """
        response = Response(url, method)
        handle = self._handle_init(response)
        try:
            self.handle_set(handle, url, method, data, headers, credentials)
            self.on_request_start(response)
            LOG.debug("{:s} {:s} {:s}".format(self.name, method, url))
            try:
                handle.perform()
            except pycurl.error as err:
                self.on_request_error_curl(err, response)
            response.status_http = handle.getinfo(pycurl.HTTP_CODE)
        finally:
            handle.close()
        if not response.is_success:
            self.on_request_error_http(response)
        self.on_request_end(response)
        return response

    def get(self, url, credentials=None):
        """shortcut to a GET request"""
        return self.request(url, 'GET', credentials=credentials)

    def post(self, url, data=None, credentials=None):
        """shortcut to a POST request"""
        return self.request(url, 'POST', data, credentials=credentials)

    def set_user_agent(self, user_agent_str=None):
        """sets user agent header string
        :param str user_agent_str: user agent string defaults class name + version
        """
        if user_agent_str is None:
            user_agent_str = "%s v %s" % (self.__class__.__name__, __version__)
        self.user_agent = user_agent_str
        return user_agent_str

    def handle_on_debug(self, msg_type, msg_str):
        """pyCurl's handle on debug call back"""
        if msg_type == pycurl.INFOTYPE_HEADER_IN:
            LOG.debug("Header From Peer: %r" % msg_str)
        elif msg_type == pycurl.INFOTYPE_HEADER_OUT:
            LOG.debug("Header Sent to Peer: %r" % msg_str)
