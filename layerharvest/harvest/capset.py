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
Capability sets: what differs between the supported service families.

A capability set knows how to request the capabilities of a service, how
to parse them into a `CapabilityTreeNode` tree and which operations of the
document provide the map, feature info and legend endpoints.
"""

from io import BytesIO

from layerharvest.layer import CapabilityTreeNode
from layerharvest.util.ext.owsparse import parse_capabilities

import logging
log = logging.getLogger(__name__)


class ParsedCapabilities(object):
    """
    Parsed capabilities of one service.

    :ivar root: root `CapabilityTreeNode` or `None` for empty documents
    :ivar map_url: GET endpoint for map images/tiles or `None`
    :ivar feature_info_url: GET endpoint for feature info or `None`
    :ivar legend_url: GET endpoint for legend graphics or `None`
    :ivar extra_service_urls: additional service URLs or `None`
    :ivar web_cache_url: URL of a tile cache in front of the service or `None`
    """
    def __init__(self, root, version=None, service_title=None, map_url=None,
                 feature_info_url=None, legend_url=None, extra_service_urls=None,
                 web_cache_url=None):
        self.root = root
        self.version = version
        self.service_title = service_title
        self.map_url = map_url
        self.feature_info_url = feature_info_url
        self.legend_url = legend_url
        self.extra_service_urls = extra_service_urls
        self.web_cache_url = web_cache_url

    def __repr__(self):
        return 'ParsedCapabilities(version=%r, service_title=%r)' % (
            self.version, self.service_title)


class CapabilitySet(object):
    service = None
    default_version = None
    # endpoint -> operation name in the capabilities document
    operations = {}

    def load(self, fetcher, datasource):
        """
        Return the `ParsedCapabilities` for `datasource`.
        """
        return fetcher.fetch(datasource)

    def parse(self, data, content_type=None):
        """
        Parse the raw capabilities document.

        :raises ValueError: for documents of other services
        :raises xml.etree.ElementTree.ParseError: for malformed XML
        """
        doc = parse_capabilities(BytesIO(data))
        if doc.service != self.service:
            raise ValueError('expected %s capabilities, got %s (content type: %s)' % (
                self.service, doc.service, content_type))
        endpoints = self.endpoints(doc)
        return ParsedCapabilities(
            doc.root_layer(),
            version=doc.version,
            service_title=doc.metadata().get('title'),
            map_url=endpoints.get('map'),
            feature_info_url=endpoints.get('feature_info'),
            legend_url=endpoints.get('legend'),
        )

    def endpoints(self, doc):
        requests = doc.requests()
        endpoints = {}
        for endpoint, operation in self.operations.items():
            if requests.get(operation):
                endpoints[endpoint] = requests[operation]
        return endpoints


class WMSCapabilitySet(CapabilitySet):
    service = 'WMS'
    default_version = '1.3.0'
    operations = {
        'map': 'GetMap',
        'feature_info': 'GetFeatureInfo',
        'legend': 'GetLegendGraphic',
    }


class WMTSCapabilitySet(CapabilitySet):
    service = 'WMTS'
    default_version = '1.0.0'
    operations = {
        'map': 'GetTile',
        'feature_info': 'GetFeatureInfo',
    }


WORLD_MERCATOR_LLBBOX = (-180.0, -85.0511287798, 180.0, 85.0511287798)

class BingCapabilitySet(CapabilitySet):
    """
    Key based service without capabilities document. The layers are fixed,
    nothing is fetched.
    """
    service = 'BING'
    layers = [
        ('Road', 'Bing Road'),
        ('Aerial', 'Bing Aerial'),
        ('AerialWithLabels', 'Bing Hybrid'),
    ]

    def load(self, fetcher, datasource):
        if not datasource.api_key:
            log.warning('no API key for Bing data source %s', datasource.datasource_id)
        children = [
            CapabilityTreeNode(name=name, title=title, bbox=WORLD_MERCATOR_LLBBOX)
            for name, title in self.layers
        ]
        return ParsedCapabilities(
            CapabilityTreeNode(title='Bing Maps', children=children),
            service_title='Bing Maps',
        )

    def parse(self, data, content_type=None):
        raise NotImplementedError('Bing has no capabilities document')


capability_sets = {
    'WMS': WMSCapabilitySet,
    'WMTS': WMTSCapabilitySet,
    'BING': BingCapabilitySet,
}

def capability_set_for(datasource):
    try:
        return capability_sets[datasource.datasource_type.upper()]()
    except KeyError:
        raise ValueError('unsupported data source type %r for %s' % (
            datasource.datasource_type, datasource.datasource_id))
