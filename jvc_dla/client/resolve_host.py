# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector host IP/Port resolver.

Provides a method that can resolve various host strings, environment variables,
SDDP discovery, etc. into a projector IP address and port.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import JvcDlaError
from ..constants import DEFAULT_PORT
from ..pkg_logging import logger

from sddp_discovery_protocol import SddpClient, SddpResponseInfo

def parse_tcp_host(host: str, default_port: int) -> Tuple[str, int]:
    """Splits "host", "host:port", "tcp://host" or "tcp://host:port" into (host, port)."""
    if host.startswith('tcp://'):
        host = host[6:]
    elif '://' in host:
        raise JvcDlaError(f"Invalid host protocol specifier for TCP transport: '{host}'")
    if ':' in host:
        host, port_str = host.rsplit(':', 1)
        try:
            port = int(port_str)
        except ValueError as e:
            raise JvcDlaError(f"Invalid port number in host specifier: '{port_str}'") from e
    else:
        port = default_port
    if host == '':
        raise JvcDlaError("Empty projector host name")
    return (host, port)

async def resolve_dla_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int, Optional[SddpResponseInfo]]:
    """Resolves a projector host string into a hostname and port.

        Args:
            host: The hostname or IPV4 address of the projector.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    May be "sddp://" or "sddp://<sddp-hostname>" to use
                    SDDP to discover the projector.
                    If None, the host will be taken from the
                    JVC_DLA_HOST environment variable.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from JVC_DLA_PORT. If that
                    environment variable is not found, the default
                    projector port (20554) will be used.

        Returns:
            A tuple of (hostname: str, port: int, sddp_response_info: Optional[SddpResponseInfo]) where:
                hostname: The resolved IP address.
                port:     The resolved port number.
                sddp_response_info:
                          The SDDP response info, if SDDP was used to
                          discover the projector. None otherwise.
    """
    if host is None or host == '':
        host = os.environ.get('JVC_DLA_HOST')
        if host is None or host == '':
            host = "sddp://" # Use SDDP discovery

    if default_port is None or default_port <= 0:
        default_port_str = os.environ.get('JVC_DLA_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            default_port = int(default_port_str)


    if host.startswith('sddp://'):
        return await discover_dla(host[7:] or None, default_port)

    result_host, port = parse_tcp_host(host, default_port)
    return (result_host, port, None)

SDDP_FILTER_HEADERS: Dict[str, str] = {
    "Manufacturer": "JVCKENWOOD",
    "Primary-Proxy": "projector",
  }
"""SDDP NOTIFY/response headers identifying a JVC projector."""

async def discover_dla(
        sddp_host: Optional[str]=None,
        default_port: int=DEFAULT_PORT,
      ) -> Tuple[str, int, SddpResponseInfo]:
    """Finds a projector on the local network with SDDP.

    If sddp_host is given, only a device advertising that SDDP host name is
    accepted; otherwise the first JVC projector to answer is used. The port comes
    from the device's "Port" header, or default_port if it has none.
    """
    logger.debug(f"Searching for projector with SDDP (host={sddp_host})")
    found: Optional[SddpResponseInfo] = None
    async with SddpClient(include_loopback=True) as sddp_client:
        async with sddp_client.search(filter_headers=SDDP_FILTER_HEADERS) as search_request:
            async for response in search_request:
                if sddp_host is None or response.datagram.hdr_host == sddp_host:
                    found = response
                    break
    if found is None:
        raise JvcDlaError(f"SDDP discovery failed to find a projector (host={sddp_host})")

    port_header = found.datagram.headers.get('Port')
    if port_header is None:
        port = default_port
    else:
        try:
            port = int(port_header)
        except ValueError as e:
            raise JvcDlaError(f"Invalid Port header in SDDP response: {port_header!r}") from e
    logger.debug(f"SDDP found projector at {found.src_addr[0]}:{port}")
    return (found.src_addr[0], port, found)
