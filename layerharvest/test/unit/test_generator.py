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

import pytest

from layerharvest.config.datasource import DataSourceConfig
from layerharvest.exception import FetchError, UnnamedLayerWarning, IdentifierCollisionWarning
from layerharvest.harvest import generator as gen
from layerharvest.harvest.capset import (
    BingCapabilitySet,
    WMSCapabilitySet,
    WMTSCapabilitySet,
    capability_set_for,
)
from layerharvest.harvest.generator import LayerGenerator
from layerharvest.test.helper import RecordingHTTPClient, fixture_content, fixture_url
from layerharvest.test.unit.test_fetcher import EMPTY_WMS


class TestLayerGenerator(object):
    def test_generate_wms111(self, capability_cache, wms_datasource):
        generator = LayerGenerator(wms_datasource, capability_cache)
        assert generator.state == gen.CONSTRUCTED
        layers = generator.generate_layer_configs()
        assert generator.state == gen.BOUND

        assert [(l.layer_id, l.path) for l in layers] == [
            ('roads', None),
            ('basemap', 'Base maps'),
            ('hillshade', 'Base maps'),
            ('rivers', 'hydro'),
            ('roads_2', None),
        ]
        roads, basemap, hillshade, rivers, roads_2 = layers
        assert roads.title == 'Roads'
        assert roads.description == 'Major roads'
        assert roads.queryable
        assert roads.bbox == (5.5, 47.2, 15.1, 55.1)
        assert [(s.name, s.default) for s in roads.styles] == [('night', True), ('day', None)]
        assert basemap.is_base_layer
        assert not roads.is_base_layer
        assert basemap.bbox == (-180.0, -90.0, 180.0, 90.0)
        assert hillshade.description is None
        assert rivers.queryable
        assert roads_2.title == 'Roads (detailed)'
        for layer in layers:
            assert layer.datasource is wms_datasource
            assert layer.datasource_id == 'example'

    def test_warnings(self, capability_cache, wms_datasource):
        generator = LayerGenerator(wms_datasource, capability_cache)
        generator.generate_layer_configs()
        unnamed, collision = generator.warnings
        assert isinstance(unnamed, UnnamedLayerWarning)
        assert unnamed.path == 'hydro'
        assert 'Lakes' in unnamed.message
        assert isinstance(collision, IdentifierCollisionWarning)
        assert collision.layer_id == 'roads'
        assert collision.renamed_to == 'roads_2'
        assert collision.kind == 'identifier_collision'

    def test_idempotent(self, capability_cache, wms_datasource):
        generator = LayerGenerator(wms_datasource, capability_cache)
        first = generator.generate_layer_configs()
        second = generator.generate_layer_configs()
        assert [l.to_dict() for l in first] == [l.to_dict() for l in second]
        assert first is not second
        assert all(a is not b for a, b in zip(first, second))

    def test_capabilities_fetched_once(self, capability_cache):
        client = RecordingHTTPClient(fixture_content('wms-example-130.xml'))
        ds = DataSourceConfig('ds', service_url='http://example.org/wms')
        generator = LayerGenerator(ds, capability_cache, http_client=client)
        generator.generate_layer_configs()
        generator.apply_overrides()
        generator.generate_layer_configs()
        assert generator.service_title == 'Transport WMS'
        assert len(client.requested) == 1

    def test_bind_to_other_datasource(self, capability_cache, wms_datasource):
        generator = LayerGenerator(wms_datasource, capability_cache)
        clone = generator.apply_overrides()
        layers = generator.generate_layer_configs(clone)
        assert all(l.datasource is clone for l in layers)
        assert clone.service_url == 'http://maps.example.org/service?'
        assert clone.version == '1.1.1'
        assert wms_datasource.service_url == fixture_url('wms-example-111.xml')
        assert wms_datasource.version is None

    def test_generate_wms130(self, capability_cache):
        ds = DataSourceConfig('transport', service_url=fixture_url('wms-example-130.xml'))
        generator = LayerGenerator(ds, capability_cache)
        layers = generator.generate_layer_configs()
        assert [(l.layer_id, l.path) for l in layers] == [
            ('rail', 'Public transport'),
            ('tram', 'Public transport'),
        ]
        assert layers[0].bbox == (5.0, 47.0, 15.0, 55.0)
        assert layers[1].bbox == (-10.0, 35.0, 30.0, 70.0)
        clone = generator.apply_overrides()
        assert clone.legend_url == 'http://example.org/legend?'
        assert clone.feature_info_url is None
        assert generator.version == '1.3.0'

    def test_generate_wmts(self, capability_cache):
        ds = DataSourceConfig('tiles', 'WMTS', service_url=fixture_url('wmts-example-100.xml'))
        generator = LayerGenerator(ds, capability_cache)
        layers = generator.generate_layer_configs()
        assert [(l.layer_id, l.path, l.queryable) for l in layers] == [
            ('ortho', None, False),
            ('parcels', None, True),
        ]
        assert layers[0].description == 'Aerial images'
        assert layers[0].bbox == (-180.0, -85.051129, 180.0, 85.051129)
        assert generator.apply_overrides().service_url == 'http://tiles.example.org/wmts/tile?'

    def test_fetch_failed(self, capability_cache, tmpdir):
        ds = DataSourceConfig('ds', service_url='file://' + tmpdir.join('missing.xml').strpath)
        generator = LayerGenerator(ds, capability_cache)
        with pytest.raises(FetchError):
            generator.generate_layer_configs()
        assert generator.state == gen.FETCH_FAILED
        with pytest.raises(FetchError):
            generator.apply_overrides()

    def test_empty_capabilities(self, capability_cache):
        client = RecordingHTTPClient(EMPTY_WMS)
        ds = DataSourceConfig('ds', service_url='http://example.org/wms')
        generator = LayerGenerator(ds, capability_cache, http_client=client)
        assert generator.generate_layer_configs() == []
        assert generator.state == gen.EMPTY_CAPABILITIES
        assert generator.generate_layer_configs() == []
        assert generator.apply_overrides() == ds
        assert len(client.requested) == 1

    def test_bing(self, capability_cache):
        ds = DataSourceConfig('bing', 'BING', api_key='secret', base_layers=['Aerial'])
        generator = LayerGenerator(ds, capability_cache)
        layers = generator.generate_layer_configs()
        assert [l.layer_id for l in layers] == ['Road', 'Aerial', 'AerialWithLabels']
        assert [l.is_base_layer for l in layers] == [False, True, False]
        assert all(l.path is None for l in layers)
        assert capability_cache.entries() == []

    def test_bing_without_key(self, capability_cache, caplog):
        generator = LayerGenerator(DataSourceConfig('bing', 'BING'), capability_cache)
        assert len(generator.generate_layer_configs()) == 3
        assert 'no API key' in caplog.text


@pytest.mark.parametrize('datasource_type,expected', [
    ('WMS', WMSCapabilitySet),
    ('wmts', WMTSCapabilitySet),
    ('BING', BingCapabilitySet),
])
def test_capability_set_for(datasource_type, expected):
    assert isinstance(capability_set_for(DataSourceConfig('ds', datasource_type)), expected)

def test_capability_set_for_unknown():
    with pytest.raises(ValueError):
        capability_set_for(DataSourceConfig('ds', 'WFS'))
