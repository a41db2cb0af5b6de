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
File system related utility functions.
"""
import os
import re
import tempfile


def ensure_directory(file_name):
    """
    Create the parent directory of `file_name` if it does not exist.
    """
    dir_name = os.path.dirname(file_name)
    if dir_name:
        os.makedirs(dir_name, exist_ok=True)


def write_atomic(filename, data):
    """
    Write `data` to a temporary file next to `filename` and replace
    `filename` with it. Readers never see partially written files.
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    fd, path_tmp = tempfile.mkstemp(dir=os.path.dirname(filename) or '.',
        prefix=os.path.basename(filename) + '.tmp-')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(path_tmp, filename)
    except OSError:
        try:
            os.unlink(path_tmp)
        except OSError:
            pass
        raise


_whitespace_re = re.compile(r'\s')
_unsafe_re = re.compile(r'[^a-z0-9\-_]')

def safe_filename(raw_filename):
    """
    Convert `raw_filename` into a name that is safe to use on any file system.

    >>> safe_filename('My Data Source')
    'my_data_source'
    >>> safe_filename('http://Example.org/wms?SERVICE=WMS')
    'httpexampleorgwmsservicewms'
    >>> safe_filename(None)
    """
    if raw_filename is None:
        return None
    filename = _whitespace_re.sub('_', raw_filename.lower())
    return _unsafe_re.sub('', filename)
