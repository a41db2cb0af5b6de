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
Configuration of a single remote service (data source).
"""

import copy

from layerharvest.layer import is_blank

DATASOURCE_TYPES = ('WMS', 'WMTS', 'BING')

# YAML/JSON key -> attribute
_FIELDS = [
    ('id', 'datasource_id'),
    ('type', 'datasource_type'),
    ('title', 'title'),
    ('service_url', 'service_url'),
    ('version', 'version'),
    ('base_layers', 'base_layers'),
    ('feature_info_url', 'feature_info_url'),
    ('legend_url', 'legend_url'),
    ('extra_service_urls', 'extra_service_urls'),
    ('web_cache_url', 'web_cache_url'),
    ('api_key', 'api_key'),
]


class DataSourceConfig(object):
    """
    One configured remote service.

    Harvested values are never merged into an instance directly, use
    `clone` and merge into the copy.
    """
    def __init__(self, datasource_id, datasource_type='WMS', title=None,
                 service_url=None, version=None, base_layers=None,
                 feature_info_url=None, legend_url=None,
                 extra_service_urls=None, web_cache_url=None, api_key=None):
        self.datasource_id = datasource_id
        self.datasource_type = (datasource_type or 'WMS').upper()
        self.title = title
        self.service_url = service_url
        self.version = version
        self.base_layers = list(base_layers or [])
        self.feature_info_url = feature_info_url
        self.legend_url = legend_url
        self.extra_service_urls = extra_service_urls
        self.web_cache_url = web_cache_url
        self.api_key = api_key

    def is_base_layer(self, layer_id):
        if is_blank(layer_id):
            return False
        return layer_id.strip() in [l.strip() for l in self.base_layers]

    def clone(self):
        return copy.deepcopy(self)

    @classmethod
    def from_dict(cls, conf):
        kw = {}
        for key, attr in _FIELDS:
            if key in conf:
                kw[attr] = conf[key]
        if 'version' in kw and kw['version'] is not None:
            kw['version'] = str(kw['version'])
        return cls(**kw)

    def to_dict(self):
        d = {}
        for key, attr in _FIELDS:
            value = getattr(self, attr)
            if value is None or value == []:
                continue
            d[key] = value
        return d

    def __eq__(self, other):
        if not isinstance(other, DataSourceConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __ne__(self, other):
        equal = self.__eq__(other)
        if equal is NotImplemented:
            return equal
        return not equal

    __hash__ = None

    def __repr__(self):
        return 'DataSourceConfig(%r, %r, service_url=%r)' % (
            self.datasource_id, self.datasource_type, self.service_url)
