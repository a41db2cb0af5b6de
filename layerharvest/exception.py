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
Harvesting errors and non-fatal harvest warnings.
"""


class HarvestError(Exception):
    """
    Base class for all errors that abort the harvest of a single data source.
    """
    def __init__(self, message, url=None):
        Exception.__init__(self, message)
        self.msg = message
        self.url = url

    def __str__(self):
        return self.msg


class FetchError(HarvestError):
    """
    Capability document could not be retrieved (unreachable host, non-2xx
    response, timeout).

    :ivar status: HTTP status code of the failed response, if any
    """
    def __init__(self, message, url=None, status=None):
        HarvestError.__init__(self, message, url=url)
        self.status = status


class ParseError(HarvestError):
    """
    Capability document is malformed or of an unknown type.
    """
    pass


class EmptyDocumentError(HarvestError):
    """
    Capability document has no service block or no root layer.
    """
    pass


class HarvestWarning(object):
    """
    Non-fatal data-quality issue found while harvesting.
    """
    kind = 'warning'

    def __init__(self, message, layer_id=None, path=None):
        self.message = message
        self.layer_id = layer_id
        self.path = path

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.message)

    def __str__(self):
        return self.message


class UnnamedLayerWarning(HarvestWarning):
    kind = 'unnamed_layer'


class IdentifierCollisionWarning(HarvestWarning):
    """
    :ivar renamed_to: the identifier the colliding layer got instead
    """
    kind = 'identifier_collision'

    def __init__(self, message, layer_id=None, path=None, renamed_to=None):
        HarvestWarning.__init__(self, message, layer_id=layer_id, path=path)
        self.renamed_to = renamed_to
