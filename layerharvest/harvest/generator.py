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
Layer generator for a single data source.
"""

from layerharvest.exception import (
    HarvestError,
    EmptyDocumentError,
    UnnamedLayerWarning,
    IdentifierCollisionWarning,
)
from layerharvest.harvest.builder import build_layer_config
from layerharvest.harvest.capset import capability_set_for
from layerharvest.harvest.fetcher import CapabilityFetcher
from layerharvest.harvest.ids import ensure_unique_id
from layerharvest.harvest.overrides import apply_overrides
from layerharvest.harvest.tree import flatten_layer_tree

import logging
log = logging.getLogger(__name__)


CONSTRUCTED = 'constructed'
CAPABILITIES_FETCHED = 'capabilities_fetched'
FLATTENED = 'flattened'
BOUND = 'bound'
FETCH_FAILED = 'fetch_failed'
EMPTY_CAPABILITIES = 'empty_capabilities'


class LayerGenerator(object):
    """
    Generates the `LayerConfig` records of one data source.

    The capabilities are fetched on first use and kept for the lifetime of
    the generator. A failed fetch is final: all later calls raise the
    same error. A document without layers results in no layers.
    """
    def __init__(self, datasource, cache, capability_set=None, http_client=None,
                 timeout=None, http_conf=None, fetcher=None):
        self.datasource = datasource
        if capability_set is None:
            capability_set = capability_set_for(datasource)
        self.capability_set = capability_set
        if fetcher is None:
            fetcher = CapabilityFetcher(cache, capability_set, http_client=http_client,
                timeout=timeout, http_conf=http_conf)
        self.fetcher = fetcher
        self.state = CONSTRUCTED
        self.error = None
        self.warnings = []
        self._capabilities = None

    @property
    def capabilities(self):
        """
        The `ParsedCapabilities` or `None` for empty documents.
        """
        if self.state == CONSTRUCTED:
            try:
                self._capabilities = self.capability_set.load(self.fetcher, self.datasource)
            except EmptyDocumentError as ex:
                log.info('%s: %s', self.datasource.datasource_id, ex)
                self.state = EMPTY_CAPABILITIES
                return None
            except HarvestError as ex:
                self.state = FETCH_FAILED
                self.error = ex
                raise
            self.state = CAPABILITIES_FETCHED
        elif self.state == FETCH_FAILED:
            raise self.error
        return self._capabilities

    @property
    def service_title(self):
        capabilities = self.capabilities
        return capabilities.service_title if capabilities else None

    @property
    def version(self):
        capabilities = self.capabilities
        return capabilities.version if capabilities else None

    def apply_overrides(self, datasource=None):
        """
        Return a clone of the data source completed with the harvested
        endpoints and version.
        """
        if datasource is None:
            datasource = self.datasource
        return apply_overrides(datasource, self.capabilities)

    def generate_layer_configs(self, datasource=None):
        """
        Return a new list of `LayerConfig` for all named leaf layers, bound
        to `datasource` (defaults to the data source of this generator).
        """
        if datasource is None:
            datasource = self.datasource
        capabilities = self.capabilities
        if capabilities is None:
            self.warnings = []
            return []

        warnings = []
        def unnamed(node, path):
            warnings.append(UnnamedLayerWarning(
                'layer %r in %r has no name' % (node.title, path), path=path))

        leaves = flatten_layer_tree(capabilities.root, on_unnamed=unnamed)
        if self.state == CAPABILITIES_FETCHED:
            self.state = FLATTENED

        layers = []
        layer_ids = set()
        for node, path in leaves:
            layer = build_layer_config(node, path, datasource)
            layer_id = ensure_unique_id(layer.layer_id, layer_ids)
            if layer_id != layer.layer_id:
                warnings.append(IdentifierCollisionWarning(
                    'layer id %s is not unique, renamed to %s' % (layer.layer_id, layer_id),
                    layer_id=layer.layer_id, path=path, renamed_to=layer_id))
                layer.layer_id = layer_id
            layer_ids.add(layer_id)
            layers.append(layer.bind(datasource))

        self.warnings = warnings
        self.state = BOUND
        log.debug('%s: generated %d layers', datasource.datasource_id, len(layers))
        return layers
