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
Flattening of capability layer trees.

Only leaf nodes are real layers. Every container on the way from the root
to a leaf adds its label (title, or name if the title is blank) as one
path segment. The root layer describes the service itself and never adds
a segment.
"""

from layerharvest.layer import is_blank

import logging
log = logging.getLogger(__name__)


def container_label(node):
    """
    >>> from layerharvest.layer import CapabilityTreeNode
    >>> container_label(CapabilityTreeNode(name='roads', title='Roads'))
    'Roads'
    >>> container_label(CapabilityTreeNode(name='roads', title=' '))
    'roads'
    >>> container_label(CapabilityTreeNode()) is None
    True
    """
    label = node.title
    if is_blank(label):
        label = node.name
    if is_blank(label):
        return None
    return label


def walk_layer_tree(node, labels=(), is_root=True):
    """
    Return all leaves below `node` as ``(leaf, labels)`` tuples in
    document order. ``labels`` is the tuple of container labels.
    """
    if node is None:
        return []

    if node.is_leaf:
        return [(node, labels)]

    child_labels = labels
    if not is_root:
        label = container_label(node)
        if label is not None:
            child_labels = labels + (label, )

    leaves = []
    for child in node.children:
        leaves.extend(walk_layer_tree(child, child_labels, is_root=False))
    return leaves


def layer_path(labels):
    """
    >>> layer_path(('Base', 'Roads'))
    'Base/Roads'
    >>> layer_path(())
    ''
    """
    return '/'.join(label.strip() for label in labels if not is_blank(label))


def flatten_layer_tree(root, on_unnamed=None):
    """
    Flatten the tree below `root` into a list of ``(leaf, path)`` tuples.

    Leaves without a name can't be requested from the service. They are
    skipped and reported with a warning (and passed to `on_unnamed`, if set).
    """
    result = []
    for leaf, labels in walk_layer_tree(root):
        path = layer_path(labels)
        if is_blank(leaf.name):
            log.warning('skipping layer without name (title: %r, path: %r)',
                leaf.title, path)
            if on_unnamed is not None:
                on_unnamed(leaf, path)
            continue
        result.append((leaf, path))
    return result
