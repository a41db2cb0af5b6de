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
Capability tree nodes and the harvested layer records.
"""

from collections import namedtuple
from functools import total_ordering


CapabilityStyle = namedtuple('CapabilityStyle', ['name', 'title', 'abstract'])
CapabilityStyle.__new__.__defaults__ = (None, None)


def is_blank(value):
    """
    >>> is_blank(None), is_blank(''), is_blank('  '), is_blank('a')
    (True, True, True, False)
    """
    return value is None or not value.strip()


class CapabilityTreeNode(object):
    """
    One layer element of a parsed capability document.

    A node with children is a pure container (a folder), a node without
    children is a real layer.
    """
    def __init__(self, name=None, title=None, abstract=None, queryable=False,
                 bbox=None, styles=None, children=None):
        self.name = name
        self.title = title
        self.abstract = abstract
        self.queryable = queryable
        self.bbox = tuple(bbox) if bbox is not None else None
        self.styles = list(styles or [])
        self.children = list(children or [])

    @property
    def is_leaf(self):
        return not self.children

    def __repr__(self):
        return 'CapabilityTreeNode(name=%r, title=%r, children=%d)' % (
            self.name, self.title, len(self.children))


@total_ordering
class LayerStyleConfig(object):
    """
    Style of a harvested layer.

    Styles are ordered by title, then by name. Missing values are
    sorted last.

    >>> styles = [LayerStyleConfig('b', title='B'), LayerStyleConfig('a', title='A'),
    ...           LayerStyleConfig('z')]
    >>> [s.name for s in sorted(styles)]
    ['a', 'b', 'z']
    """
    def __init__(self, name=None, title=None, description=None, default=None):
        self.name = name
        self.title = title
        self.description = description
        self.default = default

    def set_key(self, key):
        """
        Use `key` (e.g. the key of a JSON object) as name, if the style
        has no name.
        """
        if is_blank(self.name):
            self.name = key

    def _sort_key(self):
        return (
            self.title is None, self.title or '',
            self.name is None, self.name or '',
        )

    def __eq__(self, other):
        if not isinstance(other, LayerStyleConfig):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other):
        if not isinstance(other, LayerStyleConfig):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self):
        return hash(self._sort_key())

    def to_dict(self):
        d = {'name': self.name}
        if self.title is not None:
            d['title'] = self.title
        if self.description is not None:
            d['description'] = self.description
        if self.default is not None:
            d['default'] = self.default
        return d

    @classmethod
    def from_dict(cls, key, conf):
        style = cls(
            name=conf.get('name'),
            title=conf.get('title'),
            description=conf.get('description'),
            default=conf.get('default'),
        )
        style.set_key(key)
        return style

    def __repr__(self):
        return 'LayerStyleConfig(name=%r, title=%r)' % (self.name, self.title)


class LayerConfig(object):
    """
    Flat, application-internal record of one harvested layer.

    :ivar path: slash separated folder path of the layer (e.g. ``Base/Roads``)
    :ivar bbox: lon/lat bounding box as ``(minx, miny, maxx, maxy)`` or `None`
    :ivar datasource: the `DataSourceConfig` this layer is bound to
    """
    def __init__(self, layer_id, title=None, description=None, path=None,
                 queryable=False, bbox=None, styles=None, is_base_layer=False):
        self.layer_id = layer_id
        self.title = title
        self.description = description
        self.path = path
        self.queryable = queryable
        self.bbox = bbox
        self.styles = list(styles or [])
        self.is_base_layer = is_base_layer
        self.datasource = None

    @property
    def datasource_id(self):
        if self.datasource is None:
            return None
        return self.datasource.datasource_id

    def bind(self, datasource):
        self.datasource = datasource
        return self

    def copy(self):
        layer = LayerConfig(self.layer_id, title=self.title,
            description=self.description, path=self.path,
            queryable=self.queryable, bbox=self.bbox,
            styles=self.styles, is_base_layer=self.is_base_layer)
        layer.datasource = self.datasource
        return layer

    def to_dict(self):
        d = {
            'layerId': self.layer_id,
            'dataSourceId': self.datasource_id,
            'queryable': self.queryable,
        }
        if self.title is not None:
            d['title'] = self.title
        if self.description is not None:
            d['description'] = self.description
        if self.path:
            d['path'] = self.path
        if self.bbox is not None:
            d['layerBoundingBox'] = list(self.bbox)
        if self.styles:
            d['styles'] = [s.to_dict() for s in self.styles]
        if self.is_base_layer:
            d['isBaseLayer'] = True
        return d

    def __repr__(self):
        return 'LayerConfig(%r, path=%r)' % (self.layer_id, self.path)
