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
Load harvest configurations (global options and data sources) from YAML.
"""

import os

from layerharvest.config.config import base_config
from layerharvest.config.datasource import DataSourceConfig
from layerharvest.config.validator import validate
from layerharvest.util.yaml import load_yaml_file, YAMLError

import logging
log = logging.getLogger('layerharvest.config')


class ConfigurationError(Exception):
    pass


class HarvestConfiguration(object):
    """
    :ivar globals: `Options` with cache, http and harvest settings
    :ivar datasources: list of `DataSourceConfig`
    """
    def __init__(self, conf_dict, conf_base_dir=None):
        self.conf = conf_dict
        self.globals = base_config(conf_dict.get('globals'), conf_base_dir=conf_base_dir)
        self.datasources = [
            DataSourceConfig.from_dict(ds) for ds in conf_dict.get('datasources') or []
        ]

    def datasource(self, datasource_id):
        for ds in self.datasources:
            if ds.datasource_id == datasource_id:
                return ds
        raise KeyError(datasource_id)


def load_configuration(conf_file, ignore_warnings=False):
    """
    Load and validate `conf_file`.

    :raises ConfigurationError: if the file can't be read or is invalid
    """
    conf_base_dir = os.path.abspath(os.path.dirname(conf_file))
    try:
        conf_dict = load_yaml_file(conf_file)
    except (IOError, OSError) as ex:
        raise ConfigurationError('unable to read configuration %s: %s' % (conf_file, ex))
    except YAMLError as ex:
        raise ConfigurationError('unable to parse configuration %s: %s' % (conf_file, ex))

    return load_configuration_dict(conf_dict, conf_base_dir, ignore_warnings=ignore_warnings)


def load_configuration_dict(conf_dict, conf_base_dir=None, ignore_warnings=False):
    if not isinstance(conf_dict, dict):
        raise ConfigurationError('configuration must be a mapping, got %s' % type(conf_dict).__name__)
    errors = validate(conf_dict)
    for error in errors:
        log.warning(error)
    if errors and not ignore_warnings:
        raise ConfigurationError('invalid configuration: %s' % '; '.join(errors))

    return HarvestConfiguration(conf_dict, conf_base_dir=conf_base_dir)
