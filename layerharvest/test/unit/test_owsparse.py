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

from io import BytesIO
from xml.etree.ElementTree import ParseError

import pytest

from layerharvest.test.helper import fixture_path
from layerharvest.util.ext.owsparse import (
    parse_capabilities,
    WMS111Capabilities,
    WMS130Capabilities,
    WMTS100Capabilities,
)


class TestWMS111(object):
    def setup_method(self):
        self.caps = parse_capabilities(fixture_path('wms-example-111.xml'))

    def test_type(self):
        assert isinstance(self.caps, WMS111Capabilities)
        assert self.caps.service == 'WMS'
        assert self.caps.version == '1.1.1'

    def test_metadata(self):
        md = self.caps.metadata()
        assert md['title'] == 'Example WMS'
        assert md['abstract'] == 'Example service for harvesting tests'
        assert md['online_resource'] == 'http://example.org/'

    def test_requests(self):
        assert self.caps.requests() == {
            'GetMap': 'http://maps.example.org/service?',
            'GetFeatureInfo': 'http://info.example.org/service?',
            'GetLegendGraphic': 'http://legend.example.org/service?',
        }

    def test_layer_tree(self):
        root = self.caps.root_layer()
        assert root.name is None
        assert root.title == 'Example WMS'
        assert root.bbox == (-180.0, -90.0, 180.0, 90.0)
        assert [c.name for c in root.children] == ['roads', 'base', 'hydro', 'roads']

        roads = root.children[0]
        assert roads.is_leaf
        assert roads.queryable
        assert roads.abstract == 'Major roads'
        assert [s.name for s in roads.styles] == ['night', 'day', None]
        assert roads.styles[1].abstract == 'Bright colors'

        base = root.children[1]
        assert not base.is_leaf
        assert base.children[1].title == ''
        assert base.children[1].children[0].name == 'hillshade'

    def test_root_layer_memoised(self):
        assert self.caps.root_layer() is self.caps.root_layer()


class TestWMS130(object):
    def test_parse(self):
        caps = parse_capabilities(fixture_path('wms-example-130.xml'))
        assert isinstance(caps, WMS130Capabilities)
        assert caps.metadata()['title'] == 'Transport WMS'
        assert caps.requests() == {
            'GetMap': 'http://example.org/wms?',
            'GetLegendGraphic': 'http://example.org/legend?',
        }
        root = caps.root_layer()
        assert root.name == 'transport'
        assert root.bbox == (-10.0, 35.0, 30.0, 70.0)
        group = root.children[0]
        assert group.name is None
        assert [l.name for l in group.children] == ['rail', 'tram']
        assert group.children[0].styles[0].title == 'Default'


class TestWMTS100(object):
    def test_parse(self):
        caps = parse_capabilities(fixture_path('wmts-example-100.xml'))
        assert isinstance(caps, WMTS100Capabilities)
        assert caps.version == '1.0.0'
        assert caps.metadata()['title'] == 'Example WMTS'
        assert caps.requests()['GetTile'] == 'http://tiles.example.org/wmts/tile?'
        root = caps.root_layer()
        assert root.title == 'Example WMTS'
        ortho, parcels = root.children
        assert ortho.name == 'ortho'
        assert not ortho.queryable
        assert ortho.styles[0].name == 'default'
        assert parcels.queryable
        assert parcels.bbox is None

    def test_no_contents(self):
        caps = parse_capabilities(BytesIO(b'<Capabilities xmlns="http://www.opengis.net/wmts/1.0"/>'))
        assert caps.root_layer() is None


class TestParseErrors(object):
    def test_unknown_document(self):
        with pytest.raises(ValueError) as exc_info:
            parse_capabilities(BytesIO(b'<html/>'))
        assert 'unknown start tag' in str(exc_info.value)

    def test_exception_report(self):
        with pytest.raises(ValueError) as exc_info:
            parse_capabilities(BytesIO(
                b'<ServiceExceptionReport><ServiceException>invalid request'
                b'</ServiceException></ServiceExceptionReport>'))
        assert str(exc_info.value) == 'service exception: invalid request'

    def test_malformed(self):
        with pytest.raises(ParseError):
            parse_capabilities(BytesIO(b'<WMT_MS_Capabilities>'))
