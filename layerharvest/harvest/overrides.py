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
Merge harvested endpoint URLs and versions into data source configurations.
"""

from layerharvest.layer import is_blank


def _fill_blank(config, attr, value):
    if not is_blank(value) and is_blank(getattr(config, attr)):
        setattr(config, attr, value)


def apply_overrides(datasource, capabilities):
    """
    Return a clone of `datasource` with the values found in `capabilities`.

    The map URL advertised by the service always replaces the configured
    `service_url` (which often is only the GetCapabilities URL).
    All other values only fill fields that are blank in the configuration.
    The `datasource` itself is not modified.
    """
    clone = datasource.clone()
    if capabilities is None:
        return clone

    if not is_blank(capabilities.map_url):
        clone.service_url = capabilities.map_url

    _fill_blank(clone, 'feature_info_url', capabilities.feature_info_url)
    _fill_blank(clone, 'legend_url', capabilities.legend_url)
    _fill_blank(clone, 'version', capabilities.version)
    _fill_blank(clone, 'extra_service_urls', capabilities.extra_service_urls)
    _fill_blank(clone, 'web_cache_url', capabilities.web_cache_url)

    return clone
