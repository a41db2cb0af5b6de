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

import logging
log = logging.getLogger(__name__)


def ensure_unique_id(candidate_id, existing_ids):
    """
    Return `candidate_id` if it is not in `existing_ids`, otherwise the first
    free ``<candidate_id>_<n>`` with n starting at 2.

    >>> ensure_unique_id('roads', set())
    'roads'
    >>> ensure_unique_id('roads', {'roads', 'roads_2'})
    'roads_3'
    """
    if candidate_id not in existing_ids:
        return candidate_id

    n = 2
    while True:
        new_id = '%s_%d' % (candidate_id, n)
        if new_id not in existing_ids:
            log.warning('layer id %s is not unique, renamed to %s', candidate_id, new_id)
            return new_id
        n += 1
