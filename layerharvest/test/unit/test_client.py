# This file is part of the LayerHarvest project.
# Copyright (C) 2026 LayerHarvest contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging

import pytest

from layerharvest.client.http import HTTPClient, HTTPClientError
from layerharvest.test.helper import assert_re
from layerharvest.test.http import mock_httpd


TESTSERVER_ADDRESS = ('127.0.0.1', 56413)
TESTSERVER_URL = 'http://%s:%s' % TESTSERVER_ADDRESS


class TestHTTPClient(object):
    def setup_method(self):
        self.client = HTTPClient(timeout=5)

    def test_read(self):
        with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/service?request=GetCapabilities'},
                                              {'status': '200', 'body': b'<caps/>',
                                               'headers': {'Content-Type': 'text/xml'}})]):
            body, status, content_type = self.client.read(
                TESTSERVER_URL + '/service?request=GetCapabilities')
        assert body == b'<caps/>'
        assert status == 200
        assert content_type == 'text/xml'

    def test_headers(self):
        client = HTTPClient(timeout=5, headers={'X-Harvest': 'yes'})
        with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/', 'headers': {'X-Harvest': 'yes'}},
                                              {'status': '200', 'body': b'ok'})]):
            assert client.read(TESTSERVER_URL + '/')[0] == b'ok'

    def test_internal_error_response(self):
        with pytest.raises(HTTPClientError) as exc_info:
            with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/'}, {'status': '500'})]):
                self.client.open(TESTSERVER_URL + '/')
        assert_re(exc_info.value.args[0], r'HTTP Error ".*": 500')
        assert exc_info.value.response_code == 500

    def test_no_content(self):
        with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/'}, {'status': '204'})]):
            with pytest.raises(HTTPClientError) as exc_info:
                self.client.open(TESTSERVER_URL + '/')
        assert exc_info.value.response_code == 204

    def test_timeout(self):
        client = HTTPClient(timeout=0.1)
        with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/'},
                                              {'body': b'slow', 'duration': 0.5})]):
            with pytest.raises(HTTPClientError) as exc_info:
                client.read(TESTSERVER_URL + '/')
        assert_re(exc_info.value.args[0], r'Timeout from URL ".*": timed out after 0.1s')

    @pytest.mark.parametrize('url,message', [
        ('htp://example.org', r'No response from URL "htp://example.org": unknown url type'),
        ('this is not a url', r'URL not correct "this is not a url": unknown url type'),
        ('http://localhost:53871', r'No response from URL "http://localhost:53871": Connection refused'),
    ])
    def test_unreachable(self, url, message):
        with pytest.raises(HTTPClientError) as exc_info:
            self.client.open(url)
        assert_re(exc_info.value.args[0], message)
        assert exc_info.value.response_code is None

    def test_hide_error_details(self):
        client = HTTPClient(hide_error_details=True)
        with pytest.raises(HTTPClientError) as exc_info:
            with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/'}, {'status': '500'})]):
                client.open(TESTSERVER_URL + '/')
        assert exc_info.value.args[0] == 'HTTP Error (see logs for URL and reason).'
        assert_re(exc_info.value.full_msg, r'HTTP Error ".*": 500')

    def test_request_log(self, caplog):
        with caplog.at_level(logging.INFO, logger='layerharvest.source.request'):
            with mock_httpd(TESTSERVER_ADDRESS, [({'path': '/log'}, {'body': b'12345'})]):
                self.client.read(TESTSERVER_URL + '/log')
        assert_re(caplog.text, r'GET http://127.0.0.1:56413/log 200')
