"""

Command line utility to infer ECL record definitions from sample XML documents.

"""


import argparse
import json
import logging
import os
import sys
from xml2ecl import _version

ARG_TYPES = {'str': str, 'int': int}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_arguments(parser, command):
    """Add the arguments of a command to the parser."""
    for arg in command['args']:
        kwargs = {
            'help': arg['help'],
        }
        if 'nargs' in arg:
            kwargs['nargs'] = arg['nargs']
        if 'choices' in arg:
            kwargs['choices'] = arg['choices']
        if 'default' in arg:
            kwargs['default'] = arg['default']
        if arg['type'] == 'bool':
            kwargs['action'] = 'store_true'
        else:
            kwargs['type'] = ARG_TYPES[arg['type']]
        carg = parser.add_argument(arg['name'], **kwargs)
        if arg['name'].startswith('-'):
            carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def main(argv=None):
    """Main function for the command line utility."""
    command = load_commands()[0]
    parser = argparse.ArgumentParser(prog='xml2ecl', description=command['description'] + '.')
    parser.add_argument('--version', action='store_true', help='Print the version of xml2ecl.')
    parser.add_argument('--verbose', action='store_true', help='Log progress to standard error.')
    create_arguments(parser, command)

    args = parser.parse_args(argv)

    if args.version:
        print(f'xml2ecl {_version.version}')
        return

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    if not args.input:
        args.input = ['-']

    try:
        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = {}
        for arg, val in command['function']['args'].items():
            if val.startswith('args.'):
                if hasattr(args, val[5:]):
                    func_args[arg] = getattr(args, val[5:])
            else:
                func_args[arg] = val
        ecl = func(**func_args)
        if not args.out:
            sys.stdout.write(ecl)
    except Exception as e:
        print("Error: ", str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
