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
Retrieval of capability documents with the `CapabilityCache` in front.
"""

from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode, unquote
from xml.etree.ElementTree import ParseError as XMLParseError

from layerharvest.client.http import HTTPClient, HTTPClientError, auth_data_from_url
from layerharvest.config import defaults
from layerharvest.exception import FetchError, ParseError, EmptyDocumentError

import logging
log = logging.getLogger(__name__)


def capabilities_url(url, service, version=None):
    """
    Return the GetCapabilities request URL for `url`.

    ``file://`` URLs are used as they are. Parameters of URLs with a query
    string are kept, only missing SERVICE/REQUEST/VERSION parameters are
    added. Bare URLs get all three.

    >>> capabilities_url('file:///tmp/caps.xml', 'WMS', '1.3.0')
    'file:///tmp/caps.xml'
    >>> capabilities_url('http://example.org/wms', 'WMS', '1.1.1')
    'http://example.org/wms?SERVICE=WMS&REQUEST=GetCapabilities&VERSION=1.1.1'
    >>> capabilities_url('http://example.org/wms?map=foo&request=GetCapabilities', 'WMS', '1.3.0')
    'http://example.org/wms?map=foo&request=GetCapabilities&SERVICE=WMS&VERSION=1.3.0'
    """
    if url.startswith('file://'):
        return url

    params = [
        ('SERVICE', service),
        ('REQUEST', 'GetCapabilities'),
        ('VERSION', version),
    ]

    scheme, netloc, path, query, fragment = urlsplit(url)
    if not query:
        query = urlencode([(k, v) for k, v in params if v])
        if url.endswith('?'):
            return url + query
        return urlunsplit((scheme, netloc, path, query, fragment))

    existing = [k.upper() for k, _ in parse_qsl(query, keep_blank_values=True)]
    missing = [(k, v) for k, v in params if v and k not in existing]
    if missing:
        query = query.rstrip('&') + '&' + urlencode(missing)
    return urlunsplit((scheme, netloc, path, query, fragment))


def file_path_from_url(url):
    """
    >>> file_path_from_url('file:///tmp/caps%20wms.xml')
    '/tmp/caps wms.xml'
    """
    return unquote(urlsplit(url).path)


class CapabilityFetcher(object):
    """
    Fetches and parses the capabilities of data sources.

    Each request URL is downloaded at most once. Later requests are
    answered from the cache, including failed downloads (negative entries)
    until they are invalidated in the cache.
    """
    def __init__(self, cache, capability_set, http_client=None, timeout=None,
                 http_conf=None):
        self.cache = cache
        self.capability_set = capability_set
        self.http_client = http_client
        self.http_conf = http_conf or {}
        if timeout is None:
            timeout = self.http_conf.get('client_timeout')
        if timeout is None:
            timeout = defaults.http['client_timeout']
        self.timeout = timeout

    def request_url(self, datasource):
        """
        Capabilities request URL for `datasource` without any credentials.
        """
        return self._source_url(datasource)[0]

    def _source_url(self, datasource):
        if not datasource.service_url:
            raise FetchError('data source %s has no service URL' % datasource.datasource_id)
        url, auth = auth_data_from_url(datasource.service_url.strip())
        version = datasource.version or self.capability_set.default_version
        return capabilities_url(url, self.capability_set.service, version), auth

    def fetch(self, datasource):
        """
        Return the `ParsedCapabilities` for `datasource`.

        :raises FetchError: document could not be retrieved
        :raises ParseError: document could not be parsed
        :raises EmptyDocumentError: document has no layers
        """
        url, auth = self._source_url(datasource)
        with self.cache.lock(url):
            entry = self.cache.get(url)
            if entry is None:
                return self._download(url, auth)

            log.debug('using cached capabilities for %s', url)
            if not entry.valid:
                raise self._cached_error(entry)
            data = self.cache.read_payload(entry)
            if data is None:
                log.warning('cached capabilities for %s are missing, fetching again', url)
                self.cache.invalidate(url)
                return self._download(url, auth)
            return self._check_root(url, self._parse(url, data, entry.content_type))

    def _cached_error(self, entry):
        if entry.error_type == 'ParseError':
            return ParseError(entry.error, url=entry.url)
        return FetchError(entry.error, url=entry.url, status=entry.status)

    def _download(self, url, auth):
        log.info('fetching capabilities from %s', url)
        try:
            data, status, content_type = self._retrieve(url, auth)
        except FetchError as ex:
            self.cache.put(url, status=ex.status, error=ex.msg, error_type='FetchError')
            raise

        try:
            capabilities = self._parse(url, data, content_type)
        except ParseError as ex:
            self.cache.put(url, payload=data, status=status, error=ex.msg,
                error_type='ParseError', content_type=content_type)
            raise

        self.cache.put(url, payload=data, status=status, content_type=content_type)
        return self._check_root(url, capabilities)

    def _retrieve(self, url, auth):
        if url.startswith('file://'):
            return self._retrieve_file(url)
        return self._retrieve_http(url, auth)

    def _retrieve_file(self, url):
        path = file_path_from_url(url)
        try:
            with open(path, 'rb') as f:
                return f.read(), None, None
        except (IOError, OSError) as ex:
            raise FetchError('could not read capabilities from %s: %s' % (
                path, ex.strerror or ex), url=url)

    def _retrieve_http(self, url, auth):
        client = self.http_client
        if client is None:
            username, password = auth
            client = HTTPClient(url, username, password,
                insecure=self.http_conf.get('ssl_no_cert_checks', False),
                ssl_ca_certs=self.http_conf.get('ssl_ca_certs'),
                timeout=self.timeout,
                headers=self.http_conf.get('headers'))
        try:
            return client.read(url)
        except HTTPClientError as ex:
            raise FetchError(ex.args[0], url=url, status=ex.response_code)

    def _parse(self, url, data, content_type):
        try:
            return self.capability_set.parse(data, content_type)
        except (XMLParseError, ValueError) as ex:
            raise ParseError('could not parse capabilities from %s: %s' % (url, ex), url=url)

    def _check_root(self, url, capabilities):
        if capabilities.root is None:
            raise EmptyDocumentError('capabilities of %s contain no layers' % url, url=url)
        return capabilities

