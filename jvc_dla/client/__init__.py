# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector client.

Provides connection management, command execution and typed property access
for a JVC D-ILA projector on TCP/IP.
"""

from .resolve_host import resolve_dla_tcp_host, parse_tcp_host, discover_dla
from .client_config import JvcDlaClientConfig
from .transport import (
    TcpJvcDlaTransport,
    ConnectionState,
    Tracer,
    null_tracer,
  )
from .connection import JvcDlaConnection
from .client_impl import JvcDlaClient
from .monitor import (
    JvcDlaMonitor,
    LensPositionState,
    MIN_LENS_POSITION,
    MAX_LENS_POSITION,
  )
