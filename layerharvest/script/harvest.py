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
import optparse
import os
import sys
import logging

from layerharvest.cache.capabilities import CapabilityCache
from layerharvest.config.loader import load_configuration, ConfigurationError
from layerharvest.harvest.batch import harvest_datasources
from layerharvest.util.fs import ensure_directory, write_atomic, safe_filename


def catalog_filename(datasource_id):
    """
    >>> catalog_filename('My Data Source')
    'my_data_source.json'
    """
    return '%s.json' % safe_filename(datasource_id)


def catalog(result):
    return {
        'dataSource': result.datasource.to_dict(),
        'layers': [layer.to_dict() for layer in result.layers],
        'warnings': [
            {'type': w.kind, 'message': w.message} for w in result.warnings
        ],
    }


def write_catalog(output_dir, result):
    filename = os.path.join(output_dir, catalog_filename(result.datasource_id))
    ensure_directory(filename)
    data = json.dumps(catalog(result), indent=2, sort_keys=True)
    write_atomic(filename, data.encode('utf-8'))
    return filename


def harvest_command(args=None):
    parser = optparse.OptionParser("%prog harvest [options] -f harvest.yaml",
        description="Harvest the layers of all configured data sources and"
        " write one JSON catalog per data source.")
    parser.add_option("-f", "--config", dest="config_file",
        help="harvest configuration")
    parser.add_option("-o", "--output-dir", dest="output_dir", default='.',
        help="directory for the JSON catalogs [.]")
    parser.add_option("--datasource", dest="datasources", action="append", default=[],
        help="only harvest this data source (can be repeated)")
    parser.add_option("--refresh", dest="refresh", action="store_true", default=False,
        help="ignore cached capabilities and fetch them again")
    parser.add_option("-q", "--quiet", dest="quiet", action="store_true", default=False,
        help="only print errors")
    parser.add_option("--debug", dest="debug", action="store_true", default=False,
        help="enable debug logging")

    from layerharvest.script.util import setup_logging

    if args:
        args = args[1:] # remove script name
    options, args = parser.parse_args(args)

    if not options.config_file:
        if len(args) != 1:
            parser.print_help()
            print("\nERROR: harvest configuration required.", file=sys.stderr)
            sys.exit(2)
        options.config_file = args[0]

    if options.debug:
        setup_logging(level=logging.DEBUG)
    elif not options.quiet:
        setup_logging(level=logging.WARNING)

    try:
        conf = load_configuration(options.config_file)
    except ConfigurationError as ex:
        print('ERROR: %s' % ex, file=sys.stderr)
        sys.exit(2)

    datasources = conf.datasources
    if options.datasources:
        unknown = set(options.datasources) - set(ds.datasource_id for ds in datasources)
        if unknown:
            print('ERROR: unknown data source(s): %s' % ', '.join(sorted(unknown)), file=sys.stderr)
            sys.exit(2)
        datasources = [ds for ds in datasources if ds.datasource_id in options.datasources]

    g = conf.globals
    cache = CapabilityCache(g.cache.base_dir, lock_timeout=g.cache.lock_timeout)
    results = harvest_datasources(datasources, cache,
        concurrency=g.harvest.concurrent_harvests,
        http_conf=g.http, refresh=options.refresh)

    failed = False
    for result in results:
        if not result.ok:
            failed = True
            print('%s: FAILED %s' % (result.datasource_id, result.error), file=sys.stderr)
            continue
        filename = write_catalog(options.output_dir, result)
        if not options.quiet:
            print('%s: %d layers, %d warnings -> %s' % (result.datasource_id,
                len(result.layers), len(result.warnings), filename))

    if failed:
        sys.exit(1)
    return 0
