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
Parser for WMS 1.1.1/1.3.0 and WMTS 1.0.0 capabilities documents.

The layer hierarchy is returned as a tree of `CapabilityTreeNode`.
"""

from xml.etree import ElementTree as etree

from layerharvest.layer import CapabilityStyle, CapabilityTreeNode
from .util import resolve_ns


def llbbox_from_values(values, elem_name):
    """
    Return a `(minx, miny, maxx, maxy)` tuple of floats.

    >>> llbbox_from_values(['-180', '-90', '180', '90'], 'LatLonBoundingBox')
    (-180.0, -90.0, 180.0, 90.0)

    :raises ValueError: for missing or non-numeric values
    """
    if len(values) != 4 or any(v is None or not v.strip() for v in values):
        raise ValueError('incomplete %s: %r' % (elem_name, values))
    try:
        return tuple(float(v) for v in values)
    except ValueError:
        raise ValueError('invalid %s: %r' % (elem_name, values))


class OWSCapabilities(object):
    _default_namespace = None
    _namespaces = {
        'xlink': 'http://www.w3.org/1999/xlink',
    }

    service = None
    version = None

    def __init__(self, tree):
        self.tree = tree
        self._root_layer = None
        self._root_layer_parsed = False

    def resolve_ns(self, xpath):
        return resolve_ns(xpath, self._namespaces, self._default_namespace)

    def findtext(self, tree, xpath):
        text = tree.findtext(self.resolve_ns(xpath))
        if text is not None:
            text = text.strip()
        return text

    def find(self, tree, xpath):
        return tree.find(self.resolve_ns(xpath))

    def findall(self, tree, xpath):
        return tree.findall(self.resolve_ns(xpath))

    def href(self, tree, xpath):
        elem = self.find(tree, xpath)
        if elem is None:
            return None
        return elem.attrib.get(self.resolve_ns('xlink:href'))

    def root_layer(self):
        """
        Return the root `CapabilityTreeNode` or `None` if the document
        has no layers.
        """
        if not self._root_layer_parsed:
            self._root_layer = self.parse_root_layer()
            self._root_layer_parsed = True
        return self._root_layer


class WMSCapabilities(OWSCapabilities):
    service = 'WMS'
    _namespaces = {
        'xlink': 'http://www.w3.org/1999/xlink',
        'sld': 'http://www.opengis.net/sld',
    }

    def metadata(self):
        md = dict(
            name=self.findtext(self.tree, 'Service/Name'),
            title=self.findtext(self.tree, 'Service/Title'),
            abstract=self.findtext(self.tree, 'Service/Abstract'),
            fees=self.findtext(self.tree, 'Service/Fees'),
            access_constraints=self.findtext(self.tree, 'Service/AccessConstraints'),
        )
        online_resource = self.href(self.tree, 'Service/OnlineResource')
        if online_resource:
            md['online_resource'] = online_resource
        return md

    def requests(self):
        """
        Return the GET URLs of all supported operations.
        """
        requests_elem = self.find(self.tree, 'Capability/Request')
        resources = {}
        if requests_elem is None:
            return resources

        for op in ('GetMap', 'GetFeatureInfo', 'GetLegendGraphic'):
            href = self.href(requests_elem, op + '/DCPType/HTTP/Get/OnlineResource')
            if href is None and op == 'GetLegendGraphic':
                # advertised as SLD extension in WMS 1.3.0
                href = self.href(requests_elem, 'sld:GetLegendGraphic/DCPType/HTTP/Get/OnlineResource')
            if href:
                resources[op] = href
        return resources

    def parse_root_layer(self):
        root_elem = self.find(self.tree, 'Capability/Layer')
        if root_elem is None:
            return None
        return self.parse_layer(root_elem, None)

    def parse_layer(self, layer_elem, parent_bbox):
        bbox = self.layer_llbbox(layer_elem, parent_bbox)
        children = [
            self.parse_layer(child_elem, bbox)
            for child_elem in self.findall(layer_elem, 'Layer')
        ]
        return CapabilityTreeNode(
            name=self.findtext(layer_elem, 'Name'),
            title=self.findtext(layer_elem, 'Title'),
            abstract=self.findtext(layer_elem, 'Abstract'),
            queryable=layer_elem.attrib.get('queryable', '').lower() in ('1', 'true'),
            bbox=bbox,
            styles=self.layer_styles(layer_elem),
            children=children,
        )

    def layer_styles(self, elem):
        styles = []
        for style_elem in self.findall(elem, 'Style'):
            styles.append(CapabilityStyle(
                name=self.findtext(style_elem, 'Name'),
                title=self.findtext(style_elem, 'Title'),
                abstract=self.findtext(style_elem, 'Abstract'),
            ))
        return styles


class WMS111Capabilities(WMSCapabilities):
    version = '1.1.1'

    def layer_llbbox(self, elem, parent_bbox):
        llbbox_elem = self.find(elem, 'LatLonBoundingBox')
        if llbbox_elem is None:
            return parent_bbox
        return llbbox_from_values(
            [llbbox_elem.attrib.get(k) for k in ('minx', 'miny', 'maxx', 'maxy')],
            'LatLonBoundingBox')


class WMS130Capabilities(WMSCapabilities):
    version = '1.3.0'
    _default_namespace = 'http://www.opengis.net/wms'

    def layer_llbbox(self, elem, parent_bbox):
        llbbox_elem = self.find(elem, 'EX_GeographicBoundingBox')
        if llbbox_elem is None:
            return parent_bbox
        return llbbox_from_values([
            self.findtext(llbbox_elem, 'westBoundLongitude'),
            self.findtext(llbbox_elem, 'southBoundLatitude'),
            self.findtext(llbbox_elem, 'eastBoundLongitude'),
            self.findtext(llbbox_elem, 'northBoundLatitude'),
        ], 'EX_GeographicBoundingBox')


class WMTS100Capabilities(OWSCapabilities):
    service = 'WMTS'
    _default_namespace = 'http://www.opengis.net/wmts/1.0'
    _namespaces = {
        'xlink': 'http://www.w3.org/1999/xlink',
        'ows': 'http://www.opengis.net/ows/1.1',
    }

    def __init__(self, tree):
        OWSCapabilities.__init__(self, tree)
        self.version = tree.getroot().attrib.get('version', '1.0.0')

    def metadata(self):
        return dict(
            name=self.findtext(self.tree, 'ows:ServiceIdentification/ows:ServiceType'),
            title=self.findtext(self.tree, 'ows:ServiceIdentification/ows:Title'),
            abstract=self.findtext(self.tree, 'ows:ServiceIdentification/ows:Abstract'),
            fees=self.findtext(self.tree, 'ows:ServiceIdentification/ows:Fees'),
            access_constraints=self.findtext(self.tree, 'ows:ServiceIdentification/ows:AccessConstraints'),
        )

    def requests(self):
        resources = {}
        for op_elem in self.findall(self.tree, 'ows:OperationsMetadata/ows:Operation'):
            href = self.href(op_elem, 'ows:DCP/ows:HTTP/ows:Get')
            if href:
                resources[op_elem.attrib.get('name')] = href
        return resources

    def parse_root_layer(self):
        contents = self.find(self.tree, 'Contents')
        if contents is None:
            return None
        layers = [self.parse_layer(elem) for elem in self.findall(contents, 'Layer')]
        if not layers:
            return None
        # WMTS has no layer hierarchy, the service itself is the root
        return CapabilityTreeNode(
            title=self.metadata()['title'],
            children=layers,
        )

    def parse_layer(self, layer_elem):
        queryable = bool(self.findall(layer_elem, 'InfoFormat'))
        for resource in self.findall(layer_elem, 'ResourceURL'):
            if resource.attrib.get('resourceType') == 'FeatureInfo':
                queryable = True

        return CapabilityTreeNode(
            name=self.findtext(layer_elem, 'ows:Identifier'),
            title=self.findtext(layer_elem, 'ows:Title'),
            abstract=self.findtext(layer_elem, 'ows:Abstract'),
            queryable=queryable,
            bbox=self.layer_llbbox(layer_elem),
            styles=self.layer_styles(layer_elem),
        )

    def layer_llbbox(self, elem):
        bbox_elem = self.find(elem, 'ows:WGS84BoundingBox')
        if bbox_elem is None:
            return None
        lower = self.findtext(bbox_elem, 'ows:LowerCorner')
        upper = self.findtext(bbox_elem, 'ows:UpperCorner')
        if not lower or not upper:
            return None
        return llbbox_from_values(lower.split() + upper.split(), 'WGS84BoundingBox')

    def layer_styles(self, elem):
        styles = []
        for style_elem in self.findall(elem, 'Style'):
            styles.append(CapabilityStyle(
                name=self.findtext(style_elem, 'ows:Identifier'),
                title=self.findtext(style_elem, 'ows:Title'),
                abstract=self.findtext(style_elem, 'ows:Abstract'),
            ))
        return styles


_exception_tags = (
    'ServiceExceptionReport',
    '{http://www.opengis.net/ogc}ServiceExceptionReport',
    '{http://www.opengis.net/ows/1.1}ExceptionReport',
)

def _exception_message(tree):
    texts = [t.strip() for t in tree.getroot().itertext() if t.strip()]
    return ' '.join(texts) or 'no details'


def parse_capabilities(fileobj):
    """
    Parse capabilities from a file object or file name.

    :raises ValueError: for unknown documents and service exception reports
    :raises xml.etree.ElementTree.ParseError: for malformed XML
    """
    if isinstance(fileobj, str):
        with open(fileobj, 'rb') as f:
            tree = etree.parse(f)
    else:
        tree = etree.parse(fileobj)
    root_tag = tree.getroot().tag
    if root_tag == 'WMT_MS_Capabilities':
        return WMS111Capabilities(tree)
    elif root_tag == '{http://www.opengis.net/wms}WMS_Capabilities':
        return WMS130Capabilities(tree)
    elif root_tag == '{http://www.opengis.net/wmts/1.0}Capabilities':
        return WMTS100Capabilities(tree)
    elif root_tag in _exception_tags:
        raise ValueError('service exception: ' + _exception_message(tree))
    else:
        raise ValueError('unknown start tag in capabilities: ' + root_tag)
