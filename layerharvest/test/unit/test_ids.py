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

from layerharvest.harvest.ids import ensure_unique_id


class TestEnsureUniqueId(object):
    def test_free_id(self):
        assert ensure_unique_id('roads', set(['rivers'])) == 'roads'

    def test_collision(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert ensure_unique_id('roads', set(['roads'])) == 'roads_2'
        assert 'roads_2' in caplog.text

    def test_first_free_suffix(self):
        assert ensure_unique_id('roads', set(['roads', 'roads_2', 'roads_3'])) == 'roads_4'
        assert ensure_unique_id('roads', set(['roads', 'roads_3'])) == 'roads_2'

    def test_deterministic_sequence(self):
        def assign(candidates):
            existing = set()
            result = []
            for candidate in candidates:
                layer_id = ensure_unique_id(candidate, existing)
                existing.add(layer_id)
                result.append(layer_id)
            return result

        candidates = ['a', 'a', 'b', 'a', 'a_2']
        assert assign(candidates) == ['a', 'a_2', 'b', 'a_3', 'a_2_2']
        assert assign(candidates) == assign(candidates)

    def test_does_not_modify_existing(self):
        existing = set(['roads'])
        ensure_unique_id('roads', existing)
        assert existing == set(['roads'])
