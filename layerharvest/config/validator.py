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
import json
import os.path

from jsonschema.exceptions import ValidationError
from jsonschema.validators import Draft202012Validator

import logging
log = logging.getLogger('layerharvest.config')


with open(os.path.join(os.path.dirname(__file__), 'config-schema.json')) as schema_file:
    schema = json.load(schema_file)


def get_error_messages(errors):
    msgs = []
    for error in errors:
        path = error.json_path.replace('$', 'root')
        msg = f'{error.message} in {path}'
        msgs.append(msg)
        if error.context is not None:
            msgs += get_error_messages(error.context)
    return msgs


def validate(conf_dict: dict) -> list[str]:
    """
    Validate `conf_dict` against the configuration schema and check
    for duplicate data source ids.
    Returns a list of error messages, the list is empty for valid configs.
    """
    validator = Draft202012Validator(schema=schema)
    errors = get_error_messages(validator.iter_errors(conf_dict))

    datasources = conf_dict.get('datasources')
    if isinstance(datasources, list):
        errors += _validate_unique_ids(datasources)
    return errors


def _validate_unique_ids(datasources: list) -> list[str]:
    errors = []
    seen = set()
    for ds in datasources:
        if not isinstance(ds, dict) or 'id' not in ds:
            continue
        if ds['id'] in seen:
            errors.append(f"Duplicate data source id '{ds['id']}'")
        seen.add(ds['id'])
    return errors
