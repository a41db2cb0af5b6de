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

import optparse
import sys
import time

from layerharvest.cache.capabilities import CapabilityCache
from layerharvest.config.loader import load_configuration, ConfigurationError


def format_entry(entry):
    timestamp = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(entry.timestamp))
    if entry.valid:
        status = 'OK'
    else:
        status = '%s: %s' % (entry.error_type or 'Error', entry.error)
    return '%s  %s  %s' % (timestamp, entry.url, status)


def cache_command(args=None):
    parser = optparse.OptionParser("%prog cache [options] -f harvest.yaml",
        description="List, invalidate or clear the cached capabilities.")
    parser.add_option("-f", "--config", dest="config_file",
        help="harvest configuration")
    parser.add_option("-l", "--list", dest="list_entries", action="store_true",
        default=False, help="list all cached capabilities")
    parser.add_option("--invalidate", dest="invalidate", action="append", default=[],
        metavar="URL", help="remove the cached capabilities of this request URL")
    parser.add_option("--clear", dest="clear", action="store_true", default=False,
        help="remove all cached capabilities")

    if args:
        args = args[1:] # remove script name
    options, args = parser.parse_args(args)

    if not options.config_file:
        parser.print_help()
        print("\nERROR: harvest configuration required.", file=sys.stderr)
        sys.exit(2)

    if not (options.list_entries or options.invalidate or options.clear):
        options.list_entries = True

    try:
        conf = load_configuration(options.config_file)
    except ConfigurationError as ex:
        print('ERROR: %s' % ex, file=sys.stderr)
        sys.exit(2)

    cache = CapabilityCache(conf.globals.cache.base_dir,
        lock_timeout=conf.globals.cache.lock_timeout)

    if options.clear:
        cache.clear()
        print('cleared capabilities cache in %s' % (cache.cache_dir, ))

    missing = False
    for url in options.invalidate:
        if cache.invalidate(url):
            print('invalidated %s' % (url, ))
        else:
            print('not cached: %s' % (url, ), file=sys.stderr)
            missing = True

    if options.list_entries:
        for entry in cache.entries():
            print(format_entry(entry))

    if missing:
        sys.exit(1)
    return 0
