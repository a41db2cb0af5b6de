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

"""
Threaded mock HTTP server for tests that need real network requests.

    with mock_httpd(('127.0.0.1', 56413), [
        ({'path': '/wms?service=WMS&request=GetCapabilities'}, {'body': b'...'}),
    ]):
        ...

Requests are expected in the given order. The optional request ``headers``
are compared with the received headers; the response supports ``status``,
``headers``, ``body`` and a ``duration`` in seconds before it is sent.
"""

import errno
import sys
import threading
import time
from contextlib import contextmanager
from http.server import HTTPServer, BaseHTTPRequestHandler
from urllib.parse import parse_qsl


class RequestsMismatchError(AssertionError):
    def __init__(self, failures):
        AssertionError.__init__(self, 'requests mismatch:\n' +
            '\n'.join(' - ' + failure for failure in failures))
        self.failures = failures


class MockHTTPServer(HTTPServer):
    allow_reuse_address = True
    timeout = 1.0

    def __init__(self, address, requests_responses):
        HTTPServer.__init__(self, address, MockHTTPHandler)
        self.expected = list(requests_responses)
        self.received = []
        self.failures = []
        self.stopped = False

    def serve_expected(self):
        try:
            while self.expected and not self.stopped:
                self.handle_request()
        finally:
            self.server_close()

    def handle_error(self, request, client_address):
        exc = sys.exc_info()[1]
        if isinstance(exc, OSError) and exc.errno in (errno.EPIPE, errno.ECONNRESET):
            # client gave up in timeout tests
            return
        HTTPServer.handle_error(self, request, client_address)


class MockHTTPHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        server = self.server
        server.received.append(self.path)
        req, resp = server.expected.pop(0)

        for key, value in req.get('headers', {}).items():
            if self.headers.get(key) != value:
                server.failures.append('header %s: expected %r, got %r' % (
                    key, value, self.headers.get(key)))
        if not query_eq(req['path'], self.path):
            server.failures.append('expected %s, got %s' % (req['path'], self.path))
            server.stopped = True

        if 'duration' in resp:
            time.sleep(float(resp['duration']))
        self.send_response(int(resp.get('status', 200)))
        for key, value in resp.get('headers', {}).items():
            self.send_header(key, value)
        self.end_headers()
        self.wfile.write(resp.get('body', b''))

    def log_message(self, format, *args):
        pass


def split_request(request):
    """
    Split a request path into path and a query dict with lower-cased keys.
    Strings without a path are treated as plain query strings.

    >>> split_request('/wms?SERVICE=WMS&request=GetCapabilities')
    ('/wms', {'service': 'WMS', 'request': 'GetCapabilities'})
    >>> split_request('/tiles/1/2/3.png')
    ('/tiles/1/2/3.png', {})
    >>> split_request('service=WMS')
    ('', {'service': 'WMS'})
    """
    if '?' in request:
        path, query = request.split('?', 1)
    elif '=' in request:
        path, query = '', request
    else:
        path, query = request, ''
    return path, dict((key.lower(), value) for key, value in parse_qsl(query))


def query_eq(expected, actual):
    """
    Compare two requests, ignoring the order and case of the
    parameter names.

    >>> query_eq('/wms?Layers=a&format=png', '/wms?FORMAT=png&layers=a')
    True
    >>> query_eq('/wms?layers=a', 'layers=a')
    False
    """
    return split_request(expected) == split_request(actual)


def assert_query_eq(expected, actual):
    expected_path, expected_query = split_request(expected)
    actual_path, actual_query = split_request(actual)
    assert expected_path == actual_path, '%s != %s' % (expected_path, actual_path)
    assert expected_query == actual_query, '%s != %s' % (expected_query, actual_query)


@contextmanager
def mock_httpd(address, requests_responses):
    """
    Serve `requests_responses` in a background thread. Yields the list of
    received request paths. Raises `RequestsMismatchError` for unexpected
    or missing requests.
    """
    httpd = MockHTTPServer(address, requests_responses)
    t = threading.Thread(target=httpd.serve_expected, daemon=True)
    t.start()
    try:
        yield httpd.received
    finally:
        httpd.stopped = True
        t.join(30)

    failures = list(httpd.failures)
    if httpd.expected:
        failures.append('missing requests: ' +
            ', '.join(req['path'] for req, _resp in httpd.expected))
    if failures:
        raise RequestsMismatchError(failures)
