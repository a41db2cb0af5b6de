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
Harvesting of many data sources in parallel.
"""

from layerharvest.exception import HarvestError
from layerharvest.harvest.generator import LayerGenerator
from layerharvest.util.async_ import ThreadPool

import logging
log = logging.getLogger(__name__)


class HarvestResult(object):
    """
    Outcome of the harvest of one data source.

    :ivar datasource: the data source with the harvested endpoints applied
        (the configured data source if the harvest failed)
    :ivar error: the `HarvestError` that stopped the harvest or `None`
    """
    def __init__(self, datasource, layers=None, warnings=None, error=None):
        self.datasource = datasource
        self.layers = layers or []
        self.warnings = warnings or []
        self.error = error

    @property
    def datasource_id(self):
        return self.datasource.datasource_id

    @property
    def ok(self):
        return self.error is None

    def __repr__(self):
        if self.ok:
            return 'HarvestResult(%r, layers=%d)' % (self.datasource_id, len(self.layers))
        return 'HarvestResult(%r, error=%r)' % (self.datasource_id, str(self.error))


def harvest_datasource(datasource, cache, timeout=None, http_conf=None, refresh=False):
    """
    Harvest the layers of a single data source. Harvest errors are
    returned in the `HarvestResult`, not raised.
    """
    generator = LayerGenerator(datasource, cache, timeout=timeout, http_conf=http_conf)
    try:
        if refresh and datasource.service_url:
            cache.invalidate(generator.fetcher.request_url(datasource))
        overridden = generator.apply_overrides()
        layers = generator.generate_layer_configs(overridden)
    except HarvestError as ex:
        log.warning('harvest of %s failed: %s', datasource.datasource_id, ex)
        return HarvestResult(datasource, error=ex)

    log.info('harvested %d layers from %s', len(layers), datasource.datasource_id)
    return HarvestResult(overridden, layers=layers, warnings=generator.warnings)


def harvest_datasources(datasources, cache, concurrency=4, timeout=None,
                        http_conf=None, refresh=False):
    """
    Harvest all `datasources` with up to `concurrency` parallel harvests.
    Returns one `HarvestResult` per data source, in the same order.
    """
    datasources = list(datasources)
    if not datasources:
        return []

    pool = ThreadPool(min(concurrency, len(datasources)))
    n = len(datasources)
    async_results = pool.imap(harvest_datasource, datasources, [cache] * n,
        [timeout] * n, [http_conf] * n, [refresh] * n, use_result_objects=True)

    results = []
    for datasource, async_result in zip(datasources, async_results):
        if async_result.exception is not None:
            _exc_class, exc, _tb = async_result.exception
            log.error('unexpected error while harvesting %s: %r',
                datasource.datasource_id, exc, exc_info=async_result.exception)
            results.append(HarvestResult(datasource,
                error=HarvestError('unexpected error: %r' % exc)))
        else:
            results.append(async_result.result)

    cache.flush()
    return results
