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
HTTP retrieval of capability documents.
"""
import socket
import ssl
import sys
import time

from urllib import request as urllib2
from urllib.error import URLError, HTTPError

from layerharvest.version import version
from layerharvest.client.log import log_request


class HTTPClientError(Exception):
    def __init__(self, arg, response_code=None, full_msg=None):
        Exception.__init__(self, arg)
        self.response_code = response_code
        self.full_msg = full_msg


def build_https_handler(ssl_ca_certs, insecure):
    if insecure:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    elif ssl_ca_certs:
        ctx = ssl.create_default_context(cafile=ssl_ca_certs)
    else:
        ctx = ssl.create_default_context()
    return urllib2.HTTPSHandler(context=ctx)


def create_url_opener(ssl_ca_certs=None, insecure=False, url=None,
                      username=None, password=None):
    """
    Return an URL opener with HTTPS and basic/digest auth support.
    """
    passman = urllib2.HTTPPasswordMgrWithDefaultRealm()
    if url is not None and username is not None:
        passman.add_password(None, url, username, password or '')
    opener = urllib2.build_opener(
        build_https_handler(ssl_ca_certs, insecure),
        urllib2.HTTPBasicAuthHandler(passman),
        urllib2.HTTPDigestAuthHandler(passman),
    )
    opener.addheaders = [('User-agent', 'LayerHarvest-%s' % (version,))]
    return opener


class HTTPClient(object):
    """
    Blocking HTTP client with a per-request `timeout` (in seconds).

    All transport errors are raised as `HTTPClientError`.
    """
    def __init__(self, url=None, username=None, password=None, insecure=False,
                 ssl_ca_certs=None, timeout=None, headers=None, hide_error_details=False):
        self._timeout = timeout
        if insecure:
            ssl_ca_certs = None
        self.opener = create_url_opener(ssl_ca_certs, insecure, url, username, password)
        self.header_list = list(headers.items()) if headers else []
        self.hide_error_details = hide_error_details

    def open(self, url):
        try:
            req = urllib2.Request(url)
        except ValueError as e:
            err = self.handle_url_exception(url, 'URL not correct', e.args[0])
            raise err.with_traceback(sys.exc_info()[2])
        for key, value in self.header_list:
            req.add_header(key, value)

        code = None
        result = None
        start_time = time.time()
        try:
            if self._timeout is not None:
                result = self.opener.open(req, timeout=self._timeout)
            else:
                result = self.opener.open(req)
        except HTTPError as e:
            code = e.code
            err = self.handle_url_exception(url, 'HTTP Error', str(code), response_code=code)
            raise err.with_traceback(sys.exc_info()[2])
        except URLError as e:
            err = self.url_error(url, e.reason)
            raise err.with_traceback(sys.exc_info()[2])
        except socket.timeout:
            err = self.handle_url_exception(url, 'Timeout from URL', 'timed out after %ss' % self._timeout)
            raise err.with_traceback(sys.exc_info()[2])
        except ValueError as e:
            err = self.handle_url_exception(url, 'URL not correct', e.args[0])
            raise err.with_traceback(sys.exc_info()[2])
        finally:
            log_request(url, code or getattr(result, 'code', None), result,
                duration=time.time()-start_time, method=req.get_method())

        if getattr(result, 'code', 200) == 204:
            result.close()
            raise HTTPClientError('HTTP Error "204 No Content"', response_code=204)
        return result

    def url_error(self, url, reason):
        if isinstance(reason, ssl.SSLError):
            return self.handle_url_exception(url, 'Could not verify connection to URL', reason.reason)
        if isinstance(reason, socket.timeout):
            return self.handle_url_exception(url, 'Timeout from URL', 'timed out after %ss' % self._timeout)
        if isinstance(reason, OSError) and reason.strerror:
            reason = reason.strerror
        return self.handle_url_exception(url, 'No response from URL', reason)

    def read(self, url):
        """
        Return ``(body, status, content_type)`` of `url`.
        Timeouts while reading the body are raised as `HTTPClientError`.
        """
        resp = self.open(url)
        try:
            body = resp.read()
        except (socket.timeout, OSError) as e:
            err = self.handle_url_exception(url, 'Incomplete response from URL', repr(e))
            raise err.with_traceback(sys.exc_info()[2])
        finally:
            resp.close()
        return body, getattr(resp, 'code', 200), resp.headers.get('content-type')

    def handle_url_exception(self, url, message, reason, response_code=None):
        full_msg = '%s "%s": %s' % (message, url, reason)
        if self.hide_error_details:
            return HTTPClientError(
                '{} (see logs for URL and reason).'.format(message),
                response_code=response_code,
                full_msg=full_msg,
            )
        return HTTPClientError(full_msg, response_code=response_code)


def auth_data_from_url(url):
    """
    Split user and password from `url`. Returns the URL without
    credentials and a ``(username, password)`` tuple.

    >>> auth_data_from_url('http://localhost/wms')
    ('http://localhost/wms', (None, None))
    >>> auth_data_from_url('https://harvest@example.org/wms?map=a')
    ('https://example.org/wms?map=a', ('harvest', None))
    >>> auth_data_from_url('https://harvest:s3:cret@example.org')
    ('https://example.org', ('harvest', 's3:cret'))
    >>> auth_data_from_url('not a url')
    ('not a url', (None, None))
    """
    scheme, sep, rest = (url or '').partition('://')
    netloc, slash, path = rest.partition('/')
    if not sep or '@' not in netloc:
        return url, (None, None)
    auth_data, _, host = netloc.rpartition('@')
    username, colon, password = auth_data.partition(':')
    return scheme + sep + host + slash + path, (username, password if colon else None)
