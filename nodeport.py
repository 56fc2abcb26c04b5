#!/usr/bin/env python3
"""
Derive the port (and private address) of a blockchain node from its name.

Example: nodeport rpc-asset-hub-polkadot-01.yaml  ->  31131
"""

import argparse
import json
import logging
import re
import sys
from typing import List, Optional

import yaml

from node_parser.node_parser import InvalidFormatError, NodeNameError
from port_engine.port_converter import PortConverter, format_name

logger = logging.getLogger("nodeport")

PORT_PATTERN = re.compile(r"[0-9]+")


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s][%(name)s] - %(message)s",
        stream=sys.stderr,
    )
    # basicConfig leaves the root level alone once handlers exist
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='nodeport',
        description='Generate ports for blockchain network nodes',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s rpc-polkadot-01                 # Relay chain node -> 31031
  %(prog)s rpc-asset-hub-polkadot-01.yaml  # System chain node -> 31131
  %(prog)s nodes/rpc-kilt-polkadot-01.yaml # Custom chain node -> 35431
  %(prog)s rpc-polkadot-01 --ip            # Address and port
  %(prog)s --decode 31131                  # Name for a port
        """
    )

    parser.add_argument(
        'name',
        help='Node name (e.g., rpc-polkadot-01 or rpc-asset-hub-polkadot-01), or a port with --decode'
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        '--ip',
        action='store_true',
        help='Print ip:port instead of just the port'
    )
    output.add_argument(
        '-j', '--json',
        action='store_true',
        help='Print the full node record as JSON'
    )
    output.add_argument(
        '-y', '--yaml',
        action='store_true',
        help='Print the full node record as YAML'
    )

    parser.add_argument(
        '-d', '--decode',
        action='store_true',
        help='Treat NAME as a port and print the node name it belongs to'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored error output'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output - log every resolution step'
    )

    return parser


def run(args: argparse.Namespace) -> str:
    """Compute the text to print for parsed arguments; raises NodeNameError"""
    converter = PortConverter()

    if args.decode:
        if not PORT_PATTERN.fullmatch(args.name):
            raise InvalidFormatError(f"Port '{args.name}' is not a number", args.name)
        config = converter.decode_port(int(args.name))
        address = converter.convert_config(config)
    else:
        address = converter.convert_file(args.name)

    if args.json:
        return json.dumps(address.to_dict(), indent=2)
    if args.yaml:
        return yaml.safe_dump(address.to_dict(), sort_keys=False).rstrip()
    if args.ip:
        return address.endpoint
    if args.decode:
        return format_name(address.config)
    return str(address.port)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        output = run(args)
    except NodeNameError as e:
        logger.debug("Rejected %r: %s", args.name, e.kind.value)
        print(e.format(color=not args.no_color), file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
