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

import sys
import logging

from layerharvest.script.cache import cache_command
from layerharvest.script.capabilities import capabilities_command
from layerharvest.script.harvest import harvest_command
from layerharvest.version import version


def setup_logging(level=logging.INFO, format=None):
    harvest_log = logging.getLogger('layerharvest')
    harvest_log.setLevel(level)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    if not format:
        format = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format)
    ch.setFormatter(formatter)
    harvest_log.addHandler(ch)


commands = {
    'harvest': {
        'func': harvest_command,
        'help': 'Harvest layers of all configured data sources.'
    },
    'capabilities': {
        'func': capabilities_command,
        'help': 'Display the flattened layers of a capabilities document.',
    },
    'cache': {
        'func': cache_command,
        'help': 'List or invalidate cached capabilities.'
    },
}


def print_items(data, title='Commands'):
    name_len = max(len(name) for name in data)

    if title:
        print('%s:' % (title, ))
    for name, item in sorted(data.items()):
        help = item.get('help', '')
        if help:
            help = '  ' + help
        print('  %s%s' % (name.ljust(name_len), help))


def print_usage():
    print('usage: layerharvest-util COMMAND [options]')
    print()
    print_items(commands)


def main(argv=None):
    if argv is None:
        argv = sys.argv

    command = argv[1] if len(argv) > 1 else None
    if command in (None, '--help', '-h'):
        print_usage()
        sys.exit(1)

    if command == '--version':
        print('LayerHarvest ' + version)
        sys.exit(1)

    if command not in commands:
        print_usage()
        print('\nERROR: unknown command %s' % (command,))
        sys.exit(1)

    # sub-commands parse their own options, argv[0] stays the program name
    return commands[command]['func'](argv[0:1] + argv[2:])

if __name__ == '__main__':
    main()
