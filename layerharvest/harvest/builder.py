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

from layerharvest.layer import LayerConfig, LayerStyleConfig, is_blank

import logging
log = logging.getLogger(__name__)


def build_style_config(style):
    """
    Convert a `CapabilityStyle` into a `LayerStyleConfig`.
    Returns `None` for styles without name.
    """
    style_config = LayerStyleConfig(name=style.name)
    if style.title is not None:
        style_config.title = style.title
    if style.abstract is not None:
        style_config.description = style.abstract
    if is_blank(style_config.name):
        return None
    return style_config


def build_layer_config(node, path, datasource=None):
    """
    Convert a leaf `node` into a new `LayerConfig`.

    Returns `None` for nodes without name. The record is not bound to
    `datasource`, it is only used to look up base layers.
    """
    if is_blank(node.name):
        return None

    layer = LayerConfig(node.name)

    if not is_blank(node.title):
        layer.title = node.title
    if not is_blank(node.abstract):
        layer.description = node.abstract
    layer.queryable = bool(node.queryable)

    if not is_blank(path):
        layer.path = path

    if datasource is not None and datasource.is_base_layer(node.name):
        layer.is_base_layer = True

    styles = []
    for style in node.styles:
        style_config = build_style_config(style)
        if style_config is None:
            log.debug('ignoring style without name for layer %s', node.name)
            continue
        styles.append(style_config)
    if styles:
        # the first advertised style is the default style
        styles[0].default = True
    layer.styles = styles

    if node.bbox is not None:
        layer.bbox = tuple(float(v) for v in node.bbox)

    return layer
