"""

Command line utility to validate JSON documents against JSON Schema.

"""


import argparse
import json
import logging
import os
import sys
from jsonschemaeval import _version
from jsonschemaeval.errors import JsonSchemaError

ARG_TYPES = {'str': str, 'int': int, 'float': float}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)

def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
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
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            if arg['name'].startswith('-'):
                carg.required = arg.get('required', True)

def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)

def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Validate JSON documents against JSON Schema.')
    parser.add_argument('--version', action='store_true', help='Print the version of jsonschemaeval.')
    parser.add_argument('--verbose', action='store_true', help='Log the validation traversal.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if 'version' in args and args.version:
        print(f'jsonschemaeval {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
    if not command:
        print(f"Error: Command {args.command} not found.")
        sys.exit(1)

    module_name, func_name = command['function']['name'].rsplit('.', 1)
    func = dynamic_import(module_name, func_name)
    func_args = {}
    for arg, val in command['function']['args'].items():
        if val.startswith('args.'):
            if hasattr(args, val[5:]):
                func_args[arg] = getattr(args, val[5:])
        else:
            func_args[arg] = val

    try:
        func(**func_args)
    except (OSError, ValueError, JsonSchemaError) as e:
        print("Error: ", str(e))
        sys.exit(1)

if __name__ == "__main__":
    main()
