# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package jvc_dla provides a command-line tool and API for controlling
JVC D-ILA projectors via their proprietary TCP/IP protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    JvcDlaError,
    HandshakeError,
    ProtocolError,
    AckMismatchError,
    ResponseFramingError,
    DecodeError,
    TransportError,
    ReadTimeoutError,
    ConnectionClosedError,
    NotConnectedError,
    InvalidArgumentError,
    DidNotConnectError,
  )

from .constants import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    SLOW_COMMAND_TIMEOUT,
    CONNECT_ATTEMPTS,
    CONNECT_BACKOFF,
  )

from .protocol import (
    Power,
    Command,
    Direction,
    Operation,
    Reference,
    lens_memory_command,
    model_names,
    parse_model_code,
    parse_software_version,
    get_all_commands,
    name_to_command,
  )

from .client import (
    JvcDlaClient,
    JvcDlaClientConfig,
    JvcDlaConnection,
    JvcDlaMonitor,
    TcpJvcDlaTransport,
    ConnectionState,
    LensPositionState,
    resolve_dla_tcp_host,
  )
