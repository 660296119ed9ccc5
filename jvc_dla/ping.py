#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Command-line tool that connects to a JVC D-ILA projector once and prints its status.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .internal_types import *
from .exceptions import JvcDlaError
from .constants import DEFAULT_PORT, DEFAULT_TIMEOUT
from .protocol import Power
from .client import JvcDlaClient, JvcDlaClientConfig

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jvc-dla-ping",
        description="Print the status of a JVC D-ILA projector.")

    parser.add_argument("-P", "--port", default=None, type=int,
        help=f"Projector port number to connect to. Default: env var JVC_DLA_PORT, or {DEFAULT_PORT}")
    parser.add_argument("-p", "--password", default=None,
        help="Password to use when connecting to newer projectors (e.g., DLA-NZ8). Default: env var JVC_DLA_PASSWORD, or no password.")
    parser.add_argument("-t", "--timeout", default=None, type=float,
        help=f"Timeout for network reads (seconds). Default: {DEFAULT_TIMEOUT}")
    parser.add_argument("-l", "--loglevel", default="ERROR",
        help="Logging level. Default: ERROR.",
        choices=["ERROR", "WARNING", "INFO", "DEBUG"])
    parser.add_argument("-d", "--debug", action="store_true", default=False,
        help="Print a trace of every exchange with the projector.")
    parser.add_argument("host", nargs='?', default=None,
        help="Projector hostname or IP address, optionally with ':<port>'. Default: env var JVC_DLA_HOST")
    return parser

async def ping(client: JvcDlaClient) -> int:
    """Prints projector status. Returns a process exit code."""
    try:
        await client.connect()
        power = await client.get_power()
        if power is None:
            print("Unable to read power state", file=sys.stderr)
            return 1
        print(f"Power {power}")
        print(f"Model {await client.get_model_code()}")
        print(f"Mac {await client.get_mac_address()}")
        if power is Power.ON:
            print(f"Lens {await client.get_lens_memory()}")
            print(f"Ver {await client.get_software_version()}")
    finally:
        client.disconnect()
    return 0

async def amain(argv: Optional[List[str]]=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.getLevelName(args.loglevel),
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d] %(message)s",
        datefmt="%F %H:%M:%S")

    config = JvcDlaClientConfig(
        default_host=args.host,
        password=args.password,
        default_port=args.port,
        timeout_secs=args.timeout,
      )
    if config.default_host is None:
        print("No projector host specified. Provide a host or set env var JVC_DLA_HOST", file=sys.stderr)
        return 1
    trace: Optional[Callable[[str], None]] = print if args.debug else None
    client = JvcDlaClient(config=config, trace=trace)
    try:
        return await ping(client)
    except JvcDlaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

def main(argv: Optional[List[str]]=None) -> int:
    return asyncio.run(amain(argv))

if __name__ == "__main__":
    sys.exit(main())
