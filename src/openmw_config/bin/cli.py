#!/usr/bin/env python3
"""Command line interface to inspect an openmw.cfg chain."""

import argparse
import sys
from typing import List, Optional

import yaml

from openmw_config import load_config
from openmw_config.errors import ConfigError
from openmw_config.utils.logger import logger


def get_version():
    """Get the package version without loading a configuration."""
    from openmw_config.version import __version__

    return __version__


def effective_dict(config) -> dict:
    """Effective configuration as plain Python types.

    Parameters
    ----------
    config : Configuration
        Resolved configuration

    Returns
    -------
    dict
        Effective value of every category, paths as strings
    """

    def _path(setting):
        return str(setting.parsed) if setting is not None else None

    encoding = config.encoding()
    return {
        "root_config": str(config.root_config),
        "user_config": str(config.user_config_file()),
        "config_chain": [str(p) for p in config.config_chain()],
        "resources": _path(config.resources()),
        "user-data": _path(config.userdata()),
        "data-local": _path(config.data_local()),
        "encoding": encoding.encoding.value if encoding is not None else None,
        "data": [str(d.parsed) for d in config.data_directories()],
        "fallback-archive": [a.value for a in config.fallback_archives()],
        "content": [c.value for c in config.content_files()],
        "groundcover": [g.value for g in config.groundcover()],
        "fallback": {g.key: g.value_text() for g in config.game_settings()},
        "generic": [
            {"key": g.key, "value": g.value} for g in config.generic_settings()
        ],
    }


def main(
    command: str,
    config: Optional[str] = None,
    userdata: Optional[str] = None,
    userconfig: Optional[str] = None,
    key: Optional[str] = None,
    file: Optional[str] = None,
    as_yaml: bool = False,
) -> int:
    """Run one subcommand against a loaded chain.

    Parameters
    ----------
    command : str
        One of `chain`, `show`, `get`, `dump` or `check`
    config : str, optional
        Path to the root openmw.cfg or its directory
    userdata : str, optional
        Substitute for the `?userdata?` token
    userconfig : str, optional
        Substitute for the `?userconfig?` token
    key : str, optional
        Game setting key, for `get`
    file : str, optional
        Chain file to render, for `dump`
    as_yaml : bool, default False
        Render `show` as YAML

    Returns
    -------
    int
        Process exit code
    """
    cfg = load_config(config, userdata_dir=userdata, userconfig_dir=userconfig)

    if command == "chain":
        for path in cfg.config_chain():
            print(path)

    elif command == "show":
        if as_yaml:
            print(yaml.safe_dump(effective_dict(cfg), sort_keys=False), end="")
        else:
            print(cfg, end="")

    elif command == "get":
        setting = cfg.get_game_setting(key)
        if setting is None:
            logger.error("No fallback setting named %s", key)
            return 1
        print(setting.value_text())

    elif command == "dump":
        print(cfg.serialize(file), end="")

    elif command == "check":
        target = cfg.user_config_file()
        if not cfg.is_user_config_writable():
            logger.error("User configuration %s is not writable", target)
            return 1
        print(f"User configuration {target} is writable")

    return 0


def cli(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="openmw-config",
        description="Inspect a chain of openmw.cfg files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  openmw-config --version                     Show version information
  openmw-config -c ~/.config/openmw chain     List the files of the chain
  openmw-config show --yaml                   Effective configuration as YAML
  openmw-config get Water_Map_Alpha           Effective value of a fallback
  openmw-config dump /etc/openmw/openmw.cfg   Rewritten text of one chain file
""",
    )

    # Add a version command
    parser.add_argument(
        "--version", "-v", action="version", version=f"openmw-config {get_version()}"
    )

    # Add root config argument, defaults to the platform location
    parser.add_argument(
        "-c", "--config", help="Path to the root openmw.cfg or to its directory"
    )

    # Token substitutes
    parser.add_argument("--userdata", help="Directory substituted for ?userdata?")
    parser.add_argument("--userconfig", help="Directory substituted for ?userconfig?")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("chain", help="List the openmw.cfg files in load order")

    show = subparsers.add_parser("show", help="Show the effective configuration")
    show.add_argument("--yaml", action="store_true", help="Render as YAML")

    get = subparsers.add_parser("get", help="Show the effective value of a fallback")
    get.add_argument("key", help="Game setting key")

    dump = subparsers.add_parser("dump", help="Show the serialized text of a file")
    dump.add_argument("file", help="Path to an openmw.cfg of the chain")

    subparsers.add_parser("check", help="Check that the user config is writable")

    # Parse the arguments
    args = parser.parse_args(argv)

    try:
        code = main(
            args.command,
            config=args.config,
            userdata=args.userdata,
            userconfig=args.userconfig,
            key=getattr(args, "key", None),
            file=getattr(args, "file", None),
            as_yaml=getattr(args, "yaml", False),
        )
    except ConfigError as exc:
        logger.error("%s", exc)
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    cli()
