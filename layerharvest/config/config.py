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
System-wide configuration.
"""
import copy
import os


class Options(dict):
    """
    Dictionary with attribute style access. `update` merges nested
    `Options` instead of replacing them.

    >>> o = Options(http=Options(client_timeout=60, headers={}))
    >>> o.update(http=Options(client_timeout=5))
    >>> o.http
    Options({'client_timeout': 5, 'headers': {}})
    """
    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, dict.__repr__(self))

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    __setattr__ = dict.__setitem__

    def update(self, other=(), **kw):
        for key, value in dict(other, **kw).items():
            current = self.get(key)
            if isinstance(current, Options) and isinstance(value, dict):
                current.update(value)
            else:
                self[key] = value


def _to_options_map(mapping):
    if isinstance(mapping, dict):
        return Options((key, _to_options_map(value)) for key, value in mapping.items())
    if isinstance(mapping, list):
        return [_to_options_map(m) for m in mapping]
    return mapping


def default_config():
    """
    Return the defaults of ``layerharvest.config.defaults`` as new `Options`.
    """
    from layerharvest.config import defaults
    return _to_options_map(dict(
        (name, copy.deepcopy(value))
        for name, value in vars(defaults).items()
        if not name.startswith('_')
    ))


def finish_base_config(bc, conf_base_dir=None):
    """
    Resolve relative paths against `conf_base_dir`.
    """
    bc.conf_base_dir = conf_base_dir or os.getcwd()
    if 'cache' in bc and 'base_dir' in bc.cache:
        bc.cache.base_dir = os.path.normpath(os.path.join(bc.conf_base_dir, bc.cache.base_dir))
    if bc.get('http', {}).get('ssl_ca_certs'):
        bc.http.ssl_ca_certs = os.path.join(bc.conf_base_dir, bc.http.ssl_ca_certs)
    return bc


def base_config(globals_dict=None, conf_base_dir=None):
    """
    Return a new configuration with the defaults, updated with the
    (optional) `globals_dict` of a configuration file.
    """
    conf = default_config()
    if globals_dict:
        conf.update(_to_options_map(globals_dict))
    return finish_base_config(conf, conf_base_dir)
