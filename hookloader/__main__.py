# hookloader/__main__.py
import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from hookloader import __version__
from hookloader.bootstrap.exceptions import BootstrapError
from hookloader.bootstrap.loader import LoadedInstance, load

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def _parse_hook(value: str) -> tuple:
    identity, sep, path = value.partition('=')
    if not sep or not identity or not path:
        raise argparse.ArgumentTypeError(f"expected id=dotted.path, got '{value}'")
    return identity, path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='hookloader', description='Load hooks and report the result.')
    parser.add_argument('--version', action='version', version=f'hookloader {__version__}')
    sub = parser.add_subparsers(dest='command')

    load_cmd = sub.add_parser('load', help='run a load and print a summary')
    load_cmd.add_argument('--config', action='append', default=[], metavar='FILE', help='YAML config file (repeatable)')
    load_cmd.add_argument('--env', help='environment name')
    load_cmd.add_argument('--hook', action='append', default=[], type=_parse_hook, metavar='ID=PATH',
                          help='add or replace a hook by import path (repeatable)')
    load_cmd.add_argument('--only', help='comma-separated allow-list of hook identities')
    load_cmd.add_argument('--timeout-ms', type=float, help='readiness watchdog in milliseconds')
    load_cmd.add_argument('--log-level', default='INFO')
    return parser


def build_override(args: argparse.Namespace) -> Dict[str, Any]:
    override: Dict[str, Any] = {}
    if args.config:
        override['config_paths'] = list(args.config)
    if args.env:
        override['env'] = args.env
    if args.hook:
        override['hooks'] = dict(args.hook)
    if args.only is not None:
        override['load_hooks'] = [name.strip() for name in args.only.split(',') if name.strip()]
    if args.timeout_ms is not None:
        override['readiness'] = {'timeout_ms': args.timeout_ms}
    return override


def print_summary(instance: LoadedInstance) -> None:
    print(f'\n=== Load Summary (Run ID: {instance.run_id}) ===')
    print(f'Environment: {instance.settings.env}')
    print(f'Active hooks: {len(instance.hooks)}')
    for identity in instance.hooks:
        print(f'  ✓ {identity}')
    for identity in instance.module_set.disabled():
        print(f'  - {identity} (disabled: {instance.module_set[identity].reason})')
    print(f'Routes: {len(instance.routes)}')
    for route, bound in instance.routes.items():
        print(f'  {route} -> {bound.target}')
    for result in instance.phase_results:
        print(f'  phase {result.phase_name}: {result.duration_seconds:.3f}s')


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != 'load':
        parser.print_help()
        return EXIT_FAILED

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        instance = asyncio.run(load(build_override(args)))
    except KeyboardInterrupt:
        print('\n✗ Load interrupted')
        return EXIT_INTERRUPTED
    except BootstrapError as e:
        print(f'✗ Load failed: {e}')
        return EXIT_FAILED

    print_summary(instance)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
