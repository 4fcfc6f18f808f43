"""
CLI module for the Deltacloud client.
Handles all command-line interface operations.
"""

import sys
import argparse
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Optional

from deltacloud_client.core.config import Config, ConfigError
from deltacloud_client.core.logger import Logger, get_logger
from deltacloud_client.handlers.client import DeltaCloudClient
from deltacloud_client.handlers.errors import (
    DeltaCloudAuthError,
    DeltaCloudClientError,
)
from deltacloud_client.models import Action


# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_AUTH_ERROR = 2
EXIT_API_ERROR = 3
EXIT_NETWORK_ERROR = 4


def _summarize(record) -> str:
    """One-line rendering of a nested record such as an action or property."""
    parts = []
    for f in fields(record):
        value = getattr(record, f.name)
        if value is None or value == []:
            continue
        if isinstance(value, list):
            value = '|'.join(str(item) for item in value)
        parts.append(f"{f.name}={value}")
    return ', '.join(parts)


def format_record(record, indent: int = 0) -> str:
    """Render a domain object as indented 'field: value' lines."""
    pad = ' ' * indent
    lines = []
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, list):
            if not value:
                continue
            lines.append(f"{pad}{f.name}:")
            for item in value:
                if is_dataclass(item):
                    lines.append(f"{pad}  - {_summarize(item)}")
                else:
                    lines.append(f"{pad}  - {item}")
        elif isinstance(value, dict):
            if not value:
                continue
            lines.append(f"{pad}{f.name}:")
            for key, item in value.items():
                lines.append(f"{pad}  {key}: {item}")
        elif value is not None:
            lines.append(f"{pad}{f.name}: {value}")
    return '\n'.join(lines)


def print_result(result) -> None:
    if isinstance(result, list):
        if not result:
            print("(none)")
        for index, record in enumerate(result):
            if index:
                print()
            print(format_record(record))
    else:
        print(format_record(result))


class DeltaCloudCLI:
    """Main application controller."""

    def __init__(self, config_path: Optional[str] = None, url: Optional[str] = None,
                 username: Optional[str] = None, password: Optional[str] = None):
        """
        Initialize the application.

        Args:
            config_path: Optional path to config file
            url: Base URL overriding the configured one
            username: User name overriding the configured one
            password: Password overriding the configured one
        """
        try:
            self.config = Config(config_path, overrides={
                'cloud.url': url,
                'cloud.username': username,
                'cloud.password': password,
            })
        except ConfigError as e:
            print(f"Configuration Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CONFIG_ERROR)

        try:
            Logger.initialize(
                self.config.log_file,
                self.config.log_level,
                self.config.log_max_size_mb,
                self.config.log_backup_count
            )
            self.logger = get_logger()
            self.logger.debug(f"Cloud URL: {self.config.cloud_url}")
        except OSError as e:
            print(f"Logger Initialization Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CONFIG_ERROR)

        try:
            self.client = DeltaCloudClient.from_config(self.config)
        except DeltaCloudClientError as e:
            self.logger.error(f"Client initialization failed: {e}")
            sys.exit(EXIT_CONFIG_ERROR)

    def run(self, operation, *args, **kwargs) -> int:
        """
        Run a client operation and print its result.

        Returns:
            Exit code
        """
        try:
            result = operation(*args, **kwargs)
        except DeltaCloudAuthError as e:
            self.logger.error(str(e))
            return EXIT_AUTH_ERROR
        except DeltaCloudClientError as e:
            error_msg = str(e)
            self.logger.error(error_msg)
            if e.status_code is None and ("Connection" in error_msg or "timed out" in error_msg):
                return EXIT_NETWORK_ERROR
            return EXIT_API_ERROR

        if isinstance(result, bytes):
            print(result.decode('utf-8', errors='replace'))
        elif result is not None:
            print_result(result)
        return EXIT_SUCCESS


def cmd_type(args, cli: DeltaCloudCLI) -> int:
    """Handle the 'type' command."""
    print(cli.client.get_server_type().value)
    return EXIT_SUCCESS


def cmd_api(args, cli: DeltaCloudCLI) -> int:
    return cli.run(cli.client.get_api)


def _list_or_get(list_operation, get_operation):
    def handler(args, cli: DeltaCloudCLI) -> int:
        if args.id:
            return cli.run(get_operation(cli.client), args.id)
        return cli.run(list_operation(cli.client))
    return handler


cmd_instances = _list_or_get(lambda c: c.list_instances, lambda c: c.get_instance)
cmd_images = _list_or_get(lambda c: c.list_images, lambda c: c.get_image)
cmd_realms = _list_or_get(lambda c: c.list_realms, lambda c: c.get_realm)
cmd_profiles = _list_or_get(lambda c: c.list_profiles, lambda c: c.get_profile)
cmd_keys = _list_or_get(lambda c: c.list_keys, lambda c: c.get_key)


def cmd_create_instance(args, cli: DeltaCloudCLI) -> int:
    """Handle the 'create-instance' command."""
    return cli.run(
        cli.client.create_instance,
        args.image,
        name=args.name,
        profile_id=args.profile,
        realm_id=args.realm,
        key_id=args.key,
        memory=args.memory,
        storage=args.storage
    )


def cmd_create_key(args, cli: DeltaCloudCLI) -> int:
    return cli.run(cli.client.create_key, args.name)


def cmd_action(args, cli: DeltaCloudCLI) -> int:
    """Handle the 'action' command."""
    action = Action(name=args.href, url=args.href, method=args.method.upper())
    return cli.run(cli.client.perform_action, action)


COMMANDS = {
    'type': cmd_type,
    'api': cmd_api,
    'instances': cmd_instances,
    'images': cmd_images,
    'realms': cmd_realms,
    'profiles': cmd_profiles,
    'keys': cmd_keys,
    'create-instance': cmd_create_instance,
    'create-key': cmd_create_key,
    'action': cmd_action,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='deltacloud-client',
        description='Deltacloud API Client - manage instances, images, keys, realms and hardware profiles',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Show which driver the server runs
  %(prog)s --url http://localhost:3001/api type

  # List instances, or show a single one
  %(prog)s instances
  %(prog)s instances --id inst1

  # Launch an instance
  %(prog)s create-instance --image img1 --profile m1-small --key my-key

  # Follow an action link
  %(prog)s action --href http://localhost:3001/api/instances/inst1/reboot --method post
        '''
    )

    parser.add_argument(
        '--config',
        help='Path to configuration file (default: config/config.yaml)',
        default=None
    )
    parser.add_argument('--url', help='Base URL of the Deltacloud API', default=None)
    parser.add_argument('--username', help='User name for the cloud', default=None)
    parser.add_argument('--password', help='Password for the cloud', default=None)

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    subparsers.add_parser('type', help='Show the driver the server runs')
    subparsers.add_parser('api', help='Show driver, version and entry points')

    for name, resource in (('instances', 'instance'), ('images', 'image'),
                           ('realms', 'realm'), ('profiles', 'hardware profile'),
                           ('keys', 'key')):
        resource_parser = subparsers.add_parser(name, help=f'List {name} or show one {resource}')
        resource_parser.add_argument('--id', help=f'Id of the {resource} to show')

    create_instance_parser = subparsers.add_parser('create-instance', help='Launch a new instance')
    create_instance_parser.add_argument('--image', required=True, help='Image to launch')
    create_instance_parser.add_argument('--name', help='Name of the instance')
    create_instance_parser.add_argument('--profile', help='Hardware profile id')
    create_instance_parser.add_argument('--realm', help='Realm id')
    create_instance_parser.add_argument('--key', help='Key name for authentication')
    create_instance_parser.add_argument('--memory', help='Memory, for profiles with a memory range')
    create_instance_parser.add_argument('--storage', help='Storage, for profiles with a storage range')

    create_key_parser = subparsers.add_parser('create-key', help='Create a new key')
    create_key_parser.add_argument('--name', required=True, help='Name of the key')

    action_parser = subparsers.add_parser('action', help='Perform an action link')
    action_parser.add_argument('--href', required=True, help='URL of the action')
    action_parser.add_argument('--method', default='post', help='HTTP method (default: post)')

    return parser


def main(argv=None):
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_CONFIG_ERROR

    try:
        cli = DeltaCloudCLI(args.config, args.url, args.username, args.password)
    except SystemExit as e:
        return e.code

    return COMMANDS[args.command](args, cli)


if __name__ == '__main__':
    sys.exit(main())
