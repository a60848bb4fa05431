#!/usr/bin/env python3
"""
CLI for inspecting the dynmodeler tool catalog.

Usage:
    python -m dynmodeler list
    python -m dynmodeler describe NAME [--json]

Examples:
    # List available tools
    python -m dynmodeler list

    # Show ports and parameters of one tool
    python -m dynmodeler describe "Transform maker"
"""

import argparse
import json
import sys

from dynmodeler.catalog import default_catalog
from dynmodeler.config import configure_logging, load_config
from dynmodeler.errors import UnknownToolError


def cmd_list(args, catalog):
    """List registered tools."""
    names = catalog.tool_names()
    if not names:
        print("No tools registered.")
        return 0
    print(f"Available tools ({len(names)}):")
    for name in names:
        print(f"  {name}")
    return 0


def cmd_describe(args, catalog):
    """Print the descriptors of one tool."""
    try:
        info = catalog.describe(args.name)
    except UnknownToolError:
        print(f"Error: unknown tool: {args.name}", file=sys.stderr)
        print(f"Available: {', '.join(catalog.tool_names())}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(info, indent=2))
        return 0

    print(f"Tool: {info['name']}")
    for title, key in (("Inputs", "inputs"), ("Outputs", "outputs")):
        print(f"\n{title}:")
        if not info[key]:
            print("  (none)")
        for port in info[key]:
            flags = [port["cardinality"]]
            if port["required"]:
                flags.append("required")
            types = "/".join(port["node_types"])
            print(f"  {port['role']} [{types}] ({', '.join(flags)})")
            print(f"      {port['name']}: {port['help']}")
    print("\nParameters:")
    if not info["parameters"]:
        print("  (none)")
    for param in info["parameters"]:
        line = f"  {param['key']}: {param['kind']} = {param['default']!r}"
        if param["choices"]:
            line += f"  one of: {', '.join(param['choices'])}"
        print(line)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="python -m dynmodeler",
        description="Inspect the dynamic modeler tool catalog",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--log-level", help="Logging level (overrides the config file)")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("list", help="List available tools")

    describe_parser = subparsers.add_parser("describe", help="Show ports and parameters of a tool")
    describe_parser.add_argument("name", help="Tool name")
    describe_parser.add_argument("--json", action="store_true", help="Print as JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    level = args.log_level
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        level = level or config.log_level
    try:
        configure_logging(level or "WARNING")
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    catalog = default_catalog()
    if args.command == "list":
        return cmd_list(args, catalog)
    return cmd_describe(args, catalog)


if __name__ == "__main__":
    sys.exit(main())
