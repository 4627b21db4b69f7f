"""
layerconf: render and merge layered config files from the command line.

Usage:
    layerconf default.json override.yaml [OPTIONS]

Files are merged left to right; the merged configuration is printed to
stdout.
"""

import argparse
import json
import sys
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .__version__ import __version__
from .errors import ConfigLoaderError
from .loader import ConfigLoader
from .utils.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layerconf",
        description="Render and deep-merge layered JSON/YAML config files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Templates may call env(name, default) and, with --vault,\n"
            "secret_lookup(path, key, default)."
        ),
    )
    parser.add_argument('files', nargs='+', help="Config files, lowest precedence first")
    parser.add_argument(
        '-o', '--output',
        choices=['json', 'yaml'],
        default='yaml',
        help="Output format for the merged config (default: yaml)"
    )
    parser.add_argument(
        '--delimiters',
        nargs=2,
        metavar=('LEFT', 'RIGHT'),
        help="Template expression delimiters (default: {{ }})"
    )
    parser.add_argument(
        '--vault',
        action='store_true',
        help="Enable secret_lookup using VAULT_ADDR / VAULT_TOKEN"
    )

    log_group = parser.add_argument_group("Logging")
    log_group.add_argument(
        '--log-level',
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help="Console log level (default: WARNING)"
    )
    log_group.add_argument('--log-file', help="Also write logs to this file")

    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def dump_config(config: dict, output: str) -> str:
    """Serialize the merged config for printing."""
    if output == 'json':
        return json.dumps(config, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(config, sort_keys=False, allow_unicode=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logger(log_level=args.log_level, log_file=args.log_file)

    secrets_client = None
    if args.vault:
        from .secrets import VaultSecretsClient
        secrets_client = VaultSecretsClient.from_env()

    try:
        loader = ConfigLoader(
            secrets_client=secrets_client,
            delimiters=tuple(args.delimiters) if args.delimiters else None,
        )
    except ValidationError as e:
        parser.error(f"invalid options: {e.errors()[0]['msg']}")

    try:
        loader.load_files(*args.files)
    except ConfigLoaderError as e:
        logger.debug(f"Load failed: {e.to_dict()}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(dump_config(loader.settings, args.output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
