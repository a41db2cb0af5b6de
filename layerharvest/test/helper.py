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

import os
import re
import time

from layerharvest.client.http import HTTPClientError


FIXTURE_DIR = os.path.join(os.path.dirname(__file__), 'fixture')

def fixture_path(name):
    return os.path.join(FIXTURE_DIR, name)

def fixture_content(name):
    with open(fixture_path(name), 'rb') as f:
        return f.read()

def fixture_url(name):
    return 'file://' + fixture_path(name)


def assert_re(value, regex):
    """
    >>> assert_re('hello', 'l+')
    >>> assert_re('hello', 'l{3}')
    Traceback (most recent call last):
        ...
    AssertionError: hello ~= l{3}
    """
    match = re.search(regex, value)
    assert match is not None, '%s ~= %s' % (value, regex)


class RecordingHTTPClient(object):
    """
    Stands in for `HTTPClient`. Returns `body` (or raises `error`) and
    records all requested URLs.
    """
    def __init__(self, body=None, status=200, error=None, content_type='text/xml',
                 duration=None):
        self.body = body
        self.status = status
        self.error = error
        self.content_type = content_type
        self.duration = duration
        self.requested = []

    def read(self, url):
        self.requested.append(url)
        if self.duration:
            time.sleep(self.duration)
        if self.error is not None:
            raise HTTPClientError(self.error, response_code=self.status)
        return self.body, self.status, self.content_type
