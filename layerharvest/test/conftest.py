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

from layerharvest.cache.capabilities import CapabilityCache
from layerharvest.config.datasource import DataSourceConfig
from layerharvest.test.helper import fixture_url


@pytest.fixture
def capability_cache(tmpdir):
    return CapabilityCache(tmpdir.join('cache').strpath, lock_timeout=5)


@pytest.fixture
def wms_datasource():
    return DataSourceConfig('example', datasource_type='WMS',
        service_url=fixture_url('wms-example-111.xml'),
        base_layers=['basemap'])
