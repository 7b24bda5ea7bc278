# -*- coding: utf-8 -*-
import unittest
import pycurl
from xml.etree import ElementTree
from twtRestCurl import __version__
from twtRestCurl.py.requests import Credentials, ErrorRqTransport, ErrorRqCurl, ErrorRqCredentialsNotValid
from twtRestCurl.twt.clients import (ClientTwtRest, ClientConfig, ClientIdentity, ErrorRqHttpTwt,
                                     NO_CONTENT, NoContent, parse_body)
from twtRestCurl.twt.endpoints import (ErrorTwtFormatNotSupported, ErrorTwtMissingParameters,
                                       ErrorTwtUnknownEndPoint, ErrorTwtUnknownParameters)
from twtRestCurl.tests.fake_curl import FakeCurl


class Test(unittest.TestCase):

    def setUp(self):
        self.credentials = Credentials('alice', 'secret')
        self.client = ClientTwtRest()

    def serve(self, *script):
        patcher = FakeCurl.patch(*script)
        patcher.start()
        self.addCleanup(patcher.stop)

    @property
    def handle(self):
        self.assertEqual(len(FakeCurl.instances), 1)
        return FakeCurl.instances[0]

    # GET ###################################################################
    def test_get_404_is_no_content(self):
        self.serve((404, 'Not found'))
        rt = self.client.execute_get("http://twitter.com/statuses/user_timeline/nobody.json")
        self.assertIs(rt, NO_CONTENT)
        self.assertTrue(self.handle.closed)

    def test_get_timeline_of_unknown_user(self):
        self.serve((404, ''))
        rt = self.client.api.statuses.user_timeline('nosuchuser', fmt='xml', credentials=self.credentials)
        self.assertIs(rt, NO_CONTENT)
        self.assertEqual(self.handle.url, "http://twitter.com/statuses/user_timeline/nosuchuser.xml")
        self.assertEqual(self.handle.options[pycurl.HTTPGET], 1)

    def test_get_body_utf8(self):
        body = u'[{"text": "Ελλάδα OR Россия"}]'
        self.serve((200, body.encode('utf-8')))
        rt = self.client.execute_get("http://twitter.com/statuses/public_timeline.json")
        self.assertEqual(rt, body)

    def test_get_empty_body(self):
        self.serve((200, b''))
        rt = self.client.execute_get("http://twitter.com/statuses/public_timeline.json")
        self.assertEqual(rt, '')
        self.assertIsNot(rt, NO_CONTENT)

    def test_get_http_error(self):
        self.serve((500, 'Something is technically wrong'))
        with self.assertRaises(ErrorRqHttpTwt) as cm:
            self.client.execute_get("http://twitter.com/statuses/public_timeline.json")
        self.assertIsInstance(cm.exception, ErrorRqTransport)
        self.assertEqual(cm.exception.status_http, 500)
        self.assertEqual(cm.exception.data, 'Something is technically wrong')
        self.assertIsNone(cm.exception.msg)
        self.assertTrue(self.handle.closed)

    def test_get_http_error_message(self):
        self.serve((401, '{"request": "/account/verify_credentials.json", "error": "Could not authenticate you."}'))
        with self.assertRaises(ErrorRqHttpTwt) as cm:
            self.client.api.account.verify_credentials(credentials=self.credentials)
        self.assertEqual(cm.exception.status_http, 401)
        self.assertEqual(cm.exception.msg, "Could not authenticate you.")

    def test_curl_error(self):
        self.serve(pycurl.error(pycurl.E_COULDNT_CONNECT, "Couldn't connect to server"))
        with self.assertRaises(ErrorRqCurl) as cm:
            self.client.execute_get("http://twitter.com/statuses/public_timeline.json")
        self.assertIsInstance(cm.exception, ErrorRqTransport)
        self.assertEqual(cm.exception.err_number, pycurl.E_COULDNT_CONNECT)
        self.assertTrue(self.handle.closed)

    def test_get_credentials(self):
        self.serve((200, '[]'))
        self.client.execute_get("http://twitter.com/statuses/friends_timeline.json", self.credentials)
        self.assertEqual(self.handle.options[pycurl.HTTPAUTH], pycurl.HTTPAUTH_BASIC)
        self.assertEqual(self.handle.options[pycurl.USERNAME], b'alice')
        self.assertEqual(self.handle.options[pycurl.PASSWORD], b'secret')

    def test_get_without_credentials(self):
        for credentials in (None, Credentials('alice', ''), Credentials(None, 'secret')):
            self.serve((200, '[]'))
            self.client.execute_get("http://twitter.com/statuses/public_timeline.json", credentials)
            self.assertNotIn(pycurl.USERNAME, self.handle.options)
            self.assertNotIn(pycurl.HTTPAUTH, self.handle.options)

    def test_get_headers(self):
        self.client.configure(identity=ClientIdentity('MyApp', '1.0', 'http://myapp.example.com'))
        self.serve((200, '[]'))
        self.client.execute_get("http://twitter.com/statuses/public_timeline.json")
        self.assertIn('Expect:', self.handle.headers)
        self.assertFalse([h for h in self.handle.headers if h.startswith('X-Twitter')])
        self.assertEqual(self.handle.options[pycurl.USERAGENT], "ClientTwtRest v %s" % __version__)

    def test_public_timeline_never_authenticates(self):
        self.serve((200, '[]'))
        self.client.api.statuses.public_timeline(fmt='rss', credentials=self.credentials)
        self.assertEqual(self.handle.url, "http://twitter.com/statuses/public_timeline.rss")
        self.assertNotIn(pycurl.USERNAME, self.handle.options)

    def test_friendship_exists(self):
        self.serve((200, '<friends>true</friends>'))
        rt = self.client.request_ep('friendships/exists', 'xml', self.credentials, user_a='alice', user_b='bob')
        self.assertEqual(rt, '<friends>true</friends>')
        self.assertEqual(self.handle.url, "http://twitter.com/friendships/exists.xml?user_a=alice&user_b=bob")

    # POST ##################################################################
    def test_post_update_with_identity_and_source(self):
        self.client.configure(identity=ClientIdentity(name='MyApp'), source='myapp')
        self.serve((200, '{"id": 1, "text": "hello world"}'))
        rt = self.client.request_ep('statuses/update', credentials=self.credentials, status='hello world')
        self.assertEqual(rt, '{"id": 1, "text": "hello world"}')
        handle = self.handle
        self.assertEqual(handle.url, "http://twitter.com/statuses/update.json")
        self.assertEqual(handle.body, b'status=hello+world&source=myapp')
        self.assertEqual(handle.options[pycurl.POSTFIELDSIZE], len(handle.body))
        self.assertIn('X-Twitter-Client: MyApp', handle.headers)
        self.assertFalse([h for h in handle.headers if h.startswith('X-Twitter-Version')])
        self.assertFalse([h for h in handle.headers if h.startswith('X-Twitter-URL')])
        self.assertIn('Content-Type: application/x-www-form-urlencoded', handle.headers)
        self.assertIn('Expect:', handle.headers)
        self.assertEqual(handle.options[pycurl.USERNAME], b'alice')
        self.assertTrue(handle.closed)

    def test_post_all_identity_headers(self):
        self.client.configure(identity=ClientIdentity('MyApp', '1.0', 'http://myapp.example.com/app.xml'))
        self.serve((200, '{}'))
        self.client.api.favorites.create(42, credentials=self.credentials)
        self.assertEqual(self.handle.url, "http://twitter.com/favorites/create/42.json")
        for hdr in ['X-Twitter-Client: MyApp', 'X-Twitter-Version: 1.0',
                    'X-Twitter-URL: http://myapp.example.com/app.xml']:
            self.assertIn(hdr, self.handle.headers)

    def test_post_body_utf8(self):
        self.serve((200, '{}'))
        self.client.execute_post("http://twitter.com/statuses/update.json", self.credentials,
                                 u'status=%CE%B1', ClientConfig(source=u'άλφα'))
        body = self.handle.body
        self.assertIsInstance(body, bytes)
        self.assertEqual(body, u'status=%CE%B1&source=%CE%AC%CE%BB%CF%86%CE%B1'.encode('utf-8'))

    def test_post_source_only(self):
        self.client.configure(source='myapp')
        self.serve((200, '{}'))
        self.client.api.notifications.follow('bob', fmt='xml', credentials=self.credentials)
        self.assertEqual(self.handle.url, "http://twitter.com/notifications/follow/bob.xml")
        self.assertEqual(self.handle.body, b'source=myapp')

    def test_post_without_credentials_is_a_no_op(self):
        self.serve((200, '{}'))
        for credentials in (None, Credentials('alice', ''), Credentials('', 'secret')):
            rt = self.client.request_ep('statuses/update', credentials=credentials, status='hi')
            self.assertIsNone(rt)
        self.assertEqual(FakeCurl.instances, [])

    def test_post_without_credentials_strict(self):
        self.client.configure(strict_credentials=True)
        self.serve((200, '{}'))
        self.assertRaises(ErrorRqCredentialsNotValid, self.client.request_ep, 'statuses/update', status='hi')
        self.assertEqual(FakeCurl.instances, [])

    def test_post_404_is_an_error(self):
        self.serve((404, '{"error": "Not found"}'))
        with self.assertRaises(ErrorRqHttpTwt) as cm:
            self.client.api.statuses.destroy(1234, credentials=self.credentials)
        self.assertEqual(cm.exception.status_http, 404)

    def test_post_delivery_device(self):
        self.serve((200, '{}'))
        self.client.api.account.update_delivery_device(device='IM', credentials=self.credentials)
        self.assertEqual(self.handle.url, "http://twitter.com/account/update_delivery_device.json?device=im")
        self.assertEqual(self.handle.body, b'')

    def test_body_not_utf8(self):
        self.serve((200, b'<status>caf\xe9</status>'))
        rt = self.client.api.statuses.public_timeline(fmt='xml')
        self.assertEqual(rt, u'<status>caf\ufffd</status>')

    def test_error_body_not_utf8(self):
        self.serve((502, b'bad \xff gateway'))
        with self.assertRaises(ErrorRqHttpTwt) as cm:
            self.client.api.statuses.public_timeline()
        self.assertEqual(cm.exception.data, u'bad \ufffd gateway')

    def test_post_non_ascii_identity_and_credentials(self):
        self.client.configure(identity=ClientIdentity(u'Ελλάδα'))
        self.serve((200, '{}'))
        self.client.api.statuses.update(status='hi', credentials=Credentials('alice', u'pässwörd'))
        self.assertIn(u'X-Twitter-Client: Ελλάδα', self.handle.headers)
        self.assertEqual(self.handle.options[pycurl.PASSWORD], u'pässwörd'.encode('utf-8'))

    def test_post_blank_password_is_sent(self):
        self.serve((200, '{}'))
        rt = self.client.api.statuses.update(status='hi', credentials=Credentials('alice', '   '))
        self.assertEqual(rt, '{}')
        self.assertEqual(self.handle.options[pycurl.PASSWORD], b'   ')

    def test_blank_path_suffix_is_kept(self):
        self.serve((404, ''))
        self.client.api.users.show(' ')
        self.assertEqual(self.handle.url, "http://twitter.com/users/show/%20.json")

    # validation ############################################################
    def test_format_validation_before_network(self):
        self.serve((200, '{}'))
        self.assertRaises(ErrorTwtFormatNotSupported, self.client.request_ep,
                          'statuses/update', 'rss', self.credentials, status='hi')
        self.assertRaises(ErrorTwtMissingParameters, self.client.api.direct_messages.new,
                          user='bob', credentials=self.credentials)
        self.assertEqual(FakeCurl.instances, [])

    def test_dot_notation_errors(self):
        self.serve((200, '{}'))
        self.assertRaises(ErrorTwtUnknownEndPoint, self.client.api.statuses.retweet, 1)
        self.assertRaises(ErrorTwtUnknownParameters, self.client.api.friendships.exists, 'alice', 'bob')
        self.assertRaises(ErrorTwtUnknownParameters, self.client.api.account.verify_credentials, 'alice')
        self.assertEqual(FakeCurl.instances, [])

    def test_end_point_name_not_a_string(self):
        self.serve((200, '{}'))
        for end_point in (None, 42, ['statuses', None]):
            self.assertRaises(ErrorTwtUnknownEndPoint, self.client.request_ep, end_point)
        self.assertEqual(FakeCurl.instances, [])

    # parsing ###############################################################
    def test_parse_json(self):
        self.serve((200, '[{"id": 1, "text": "hi"}]'))
        rt = self.client.api.statuses.friends_timeline(credentials=self.credentials, parse=True)
        self.assertEqual(rt, [{'id': 1, 'text': 'hi'}])

    def test_parse_xml(self):
        self.serve((200, '<?xml version="1.0" encoding="UTF-8"?><statuses><status><id>1</id></status></statuses>'))
        rt = self.client.invoke('statuses/friends_timeline', 'atom', self.credentials, parse=True)
        self.assertEqual(rt.tag, 'statuses')
        self.assertEqual(rt.find('status/id').text, '1')

    def test_parse_no_content(self):
        self.serve((404, ''))
        rt = self.client.api.users.show('nobody', fmt='xml', parse=True)
        self.assertIs(rt, NO_CONTENT)

    def test_parse_body(self):
        self.assertIsNone(parse_body('', 'json'))
        self.assertIsNone(parse_body(None, 'xml'))
        self.assertIsNone(parse_body(' \n', 'json'))
        self.assertIsNone(parse_body(NO_CONTENT, 'xml'))
        self.assertIsInstance(parse_body('<hash><x>1</x></hash>', 'xml'), ElementTree.Element)
        self.assertEqual(parse_body('{"a": 1}', 'JSON'), {'a': 1})

    # config ################################################################
    def test_configure_replaces_config(self):
        before = self.client.config
        after = self.client.configure(source='myapp')
        self.assertIsNone(before.source)
        self.assertEqual(after.source, 'myapp')
        self.assertIs(self.client.config, after)
        self.assertEqual(after.identity, ClientIdentity())

    def test_base_url(self):
        client = ClientTwtRest(ClientConfig(base_url='http://localhost:8080'))
        self.serve((200, '{}'))
        client.api.account.rate_limit_status(credentials=self.credentials)
        self.assertEqual(self.handle.url, "http://localhost:8080/account/rate_limit_status.json")

    def test_no_content_sentinel(self):
        self.assertIs(NoContent(), NO_CONTENT)
        self.assertFalse(NO_CONTENT)
        self.assertNotEqual(NO_CONTENT, '')
        self.assertEqual(repr(NO_CONTENT), '<NoContent>')

    def test_help(self):
        self.assertIn('blocks/create', self.client.help('blocks'))


if __name__ == "__main__":
    unittest.main()
