'''
Created on Oct 17, 2026

constants and enumerations used to talk to the twitter REST API

@author: nickmilon
'''
from enum import Enum

TWT_URL_BASE = 'http://twitter.com'
TWT_URL_API = '{base}/{resource}/{action}.{format}'     # default shape
TWT_URL_API_FLAT = '{base}/{resource}.{format}'         # collections without an action i.e. favorites.json
TWT_URL_HELP_REST = 'http://apiwiki.twitter.com/REST+API+Documentation'

# client identification headers, names must be kept verbatim
HDR_TWT_CLIENT = 'X-Twitter-Client'
HDR_TWT_VERSION = 'X-Twitter-Version'
HDR_TWT_URL = 'X-Twitter-URL'

PARM_SOURCE = 'source'
DELIVERY_DEVICES = ('none', 'im', 'sms')


class OutputFormat(Enum):
    """wire encoding of the response body"""
    JSON = 'json'
    XML = 'xml'
    RSS = 'rss'
    ATOM = 'atom'

    @classmethod
    def get(cls, fmt):
        """:returns: an OutputFormat from a member or a case insensitive name i.e. 'JSON', 'atom'
        :raises: ValueError if no such format
        """
        if isinstance(fmt, cls):
            return fmt
        return cls(str(fmt).strip().lower())

    @property
    def is_xml(self):
        return self is not OutputFormat.JSON


FORMATS_ALL = frozenset(OutputFormat)
FORMATS_JSON_XML = frozenset([OutputFormat.JSON, OutputFormat.XML])


class ResourceCategory(Enum):
    STATUSES = 'statuses'
    ACCOUNT = 'account'
    USERS = 'users'
    DIRECT_MESSAGES = 'direct_messages'
    FRIENDSHIPS = 'friendships'
    FAVORITES = 'favorites'
    NOTIFICATIONS = 'notifications'
    BLOCKS = 'blocks'


class Action(Enum):
    PUBLIC_TIMELINE = 'public_timeline'
    USER_TIMELINE = 'user_timeline'
    FRIENDS_TIMELINE = 'friends_timeline'
    FRIENDS = 'friends'
    FOLLOWERS = 'followers'
    UPDATE = 'update'
    ACCOUNT_SETTINGS = 'account_settings'
    FEATURED = 'featured'
    SHOW = 'show'
    REPLIES = 'replies'
    DESTROY = 'destroy'
    SENT = 'sent'
    NEW = 'new'
    CREATE = 'create'
    EXISTS = 'exists'
    VERIFY_CREDENTIALS = 'verify_credentials'
    END_SESSION = 'end_session'
    UPDATE_DELIVERY_DEVICE = 'update_delivery_device'
    UPDATE_PROFILE_COLORS = 'update_profile_colors'
    RATE_LIMIT_STATUS = 'rate_limit_status'
    UPDATE_PROFILE = 'update_profile'
    FOLLOW = 'follow'
    LEAVE = 'leave'
