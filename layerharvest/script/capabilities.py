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
import shutil
import sys
import tempfile

from layerharvest.cache.capabilities import CapabilityCache
from layerharvest.config.datasource import DataSourceConfig
from layerharvest.exception import HarvestError
from layerharvest.harvest.generator import LayerGenerator


class PrettyPrinter(object):
    def __init__(self, indent=4):
        self.indent = indent
        self.print_order = ['layer_id', 'title', 'path', 'queryable', 'bbox']
        self.marker = '- '

    def print_line(self, indent, key, value=None, mark_first=False):
        marker = ''
        if value is None:
            value = ''
        if mark_first:
            indent = indent - len(self.marker)
            marker = self.marker
        print(("%s%s%s: %s" % (' '*indent, marker, key, value)))

    def print_layer(self, layer, indent=None):
        indent = indent or self.indent
        for i, key in enumerate(self.print_order):
            self.print_line(indent, key, getattr(layer, key), mark_first=(i == 0))
        if layer.is_base_layer:
            self.print_line(indent, 'base_layer', 'true')
        if layer.styles:
            self.print_line(indent, 'styles')
            for style in layer.styles:
                value = style.name
                if style.default:
                    value += ' (default)'
                self.print_line(indent + self.indent, style.title or style.name, value,
                    mark_first=True)

    def print_layers(self, generator, layers):
        print('Capabilities Document Version %s' % (generator.version or 'unknown', ))
        print('Service: %s' % (generator.service_title or '', ))
        print('Layers:')
        for layer in layers:
            self.print_layer(layer)
        for warning in generator.warnings:
            print('WARNING: %s' % (warning, ))


def capabilities_command(args=None):
    parser = optparse.OptionParser("%prog capabilities [options] URL",
        description="Read and parse WMS or WMTS capabilities and print out"
        " the flattened layers.")
    parser.add_option("--type", dest="datasource_type", default='WMS',
        choices=['WMS', 'WMTS'], help="service type (WMS or WMTS) [WMS]")
    parser.add_option("--version", dest="version", default=None,
        help="request capabilities in this version")
    parser.add_option("--timeout", dest="timeout", type="float", default=60,
        help="HTTP timeout in seconds [60]")

    if args:
        args = args[1:] # remove script name
    options, args = parser.parse_args(args)

    if len(args) != 1:
        parser.print_help()
        print("\nERROR: capabilities URL required.", file=sys.stderr)
        sys.exit(2)

    datasource = DataSourceConfig('capabilities', datasource_type=options.datasource_type,
        service_url=args[0], version=options.version)

    cache_dir = tempfile.mkdtemp(prefix='layerharvest-')
    try:
        cache = CapabilityCache(cache_dir)
        generator = LayerGenerator(datasource, cache, timeout=options.timeout)
        try:
            layers = generator.generate_layer_configs()
        except HarvestError as ex:
            print('ERROR: %s' % (ex, ), file=sys.stderr)
            sys.exit(1)
    finally:
        shutil.rmtree(cache_dir, ignore_errors=True)

    PrettyPrinter().print_layers(generator, layers)
    return 0
