# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector client configuration.

Provides the config object shared by the client, the connection manager, the
monitor and the REST server.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import JvcDlaError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    SLOW_COMMAND_TIMEOUT,
    CONNECT_ATTEMPTS,
    CONNECT_BACKOFF,
    CONNECT_WARN_AFTER,
    POLL_INTERVAL,
    IDLE_POLL_INTERVAL,
  )

class JvcDlaClientConfig:
    """JVC D-ILA projector client configuration."""
    default_host: Optional[str]
    default_port: int
    password: Optional[str]
    timeout_secs: float
    command_timeout_secs: float
    connect_attempts: int
    connect_backoff_secs: float
    connect_warn_after: int
    poll_interval_secs: float
    idle_poll_interval_secs: float

    def __init__(
            self,
            default_host: Optional[str]=None,
            password: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            timeout_secs: Optional[float]=None,
            command_timeout_secs: Optional[float]=None,
            connect_attempts: Optional[int]=None,
            connect_backoff_secs: Optional[float]=None,
            connect_warn_after: Optional[int]=None,
            poll_interval_secs: Optional[float]=None,
            idle_poll_interval_secs: Optional[float]=None,
            base_config: Optional[JvcDlaClientConfig]=None
          ) -> None:
        """Creates a configuration for a JVC D-ILA projector client.

           Args:
             default_host: The default hostname or IPV4 address of the projector.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   May be "sddp://" or "sddp://<host>" to use
                   SDDP to discover the projector.
                   If None, the default host will be taken from the
                     JVC_DLA_HOST environment variable.
             password:
                   The projector password. If None, the password
                   will be taken from the JVC_DLA_PASSWORD
                   environment variable. If an empty string or the
                   environment variable is not found, no password
                   will be used.
             default_port: The default TCP/IP port number to use.
                    If None, the default port will be taken from JVC_DLA_PORT.
                    If that environment variable is not found, the default
                    projector port (20554) will be used.
             timeout_secs:
                   The per-read timeout every new connection starts with, in seconds.
                   If None, the timeout will be taken from the
                   JVC_DLA_TIMEOUT environment variable, or DEFAULT_TIMEOUT.
             command_timeout_secs:
                   The timeout consumers raise the connection to before sending
                   an operation the projector acknowledges only on completion.
             connect_attempts:
                   Number of handshake attempts before connecting fails.
             connect_backoff_secs:
                   Linear backoff unit between connection attempts.
             connect_warn_after:
                   Attempt number after which failed attempts are logged as warnings.
             poll_interval_secs:
                   Monitor polling interval while the projector is not off.
             idle_poll_interval_secs:
                   Monitor polling interval while the projector is off.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if password is not None:
            self.password = password

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if command_timeout_secs is not None:
            self.command_timeout_secs = command_timeout_secs

        if connect_attempts is not None:
            if connect_attempts < 1:
                raise JvcDlaError(f"connect_attempts must be at least 1: {connect_attempts}")
            self.connect_attempts = connect_attempts

        if connect_backoff_secs is not None:
            self.connect_backoff_secs = connect_backoff_secs

        if connect_warn_after is not None:
            self.connect_warn_after = connect_warn_after

        if poll_interval_secs is not None:
            self.poll_interval_secs = poll_interval_secs

        if idle_poll_interval_secs is not None:
            self.idle_poll_interval_secs = idle_poll_interval_secs

    def init_from_defaults(self) -> None:
        """Initializes the configuration from defaults."""
        default_host: Optional[str] = os.environ.get('JVC_DLA_HOST')
        if default_host == '':
            default_host = None
        self.default_host = default_host
        default_port_str = os.environ.get('JVC_DLA_PORT')
        if default_port_str is None or default_port_str == '':
            self.default_port = DEFAULT_PORT
        else:
            self.default_port = int(default_port_str)
        password = os.environ.get('JVC_DLA_PASSWORD')
        if password == '':
            password = None
        self.password = password
        timeout_str = os.environ.get('JVC_DLA_TIMEOUT')
        if timeout_str is None or timeout_str == '':
            self.timeout_secs = DEFAULT_TIMEOUT
        else:
            self.timeout_secs = float(timeout_str)
        self.command_timeout_secs = SLOW_COMMAND_TIMEOUT
        self.connect_attempts = CONNECT_ATTEMPTS
        self.connect_backoff_secs = CONNECT_BACKOFF
        self.connect_warn_after = CONNECT_WARN_AFTER
        self.poll_interval_secs = POLL_INTERVAL
        self.idle_poll_interval_secs = IDLE_POLL_INTERVAL

    def init_from_base_config(self, base_config: JvcDlaClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.password = base_config.password
        self.timeout_secs = base_config.timeout_secs
        self.command_timeout_secs = base_config.command_timeout_secs
        self.connect_attempts = base_config.connect_attempts
        self.connect_backoff_secs = base_config.connect_backoff_secs
        self.connect_warn_after = base_config.connect_warn_after
        self.poll_interval_secs = base_config.poll_interval_secs
        self.idle_poll_interval_secs = base_config.idle_poll_interval_secs

    @classmethod
    def from_jsonable(
            cls,
            jsonable: JsonableDict,
            base_config: Optional[JvcDlaClientConfig]=None
          ) -> Self:
        """Creates a configuration from a JSON-compatible dict, e.g. a parsed config file.

        Keys are the keyword argument names of the constructor; "host" and "port" are
        accepted as aliases for "default_host" and "default_port".
        """
        def _get(*names: str) -> Any:
            for name in names:
                if name in jsonable and jsonable[name] is not None:
                    return jsonable[name]
            return None

        def _float(*names: str) -> Optional[float]:
            value = _get(*names)
            return None if value is None else float(cast(Any, value))

        def _int(*names: str) -> Optional[int]:
            value = _get(*names)
            return None if value is None else int(cast(Any, value))

        host = _get('default_host', 'host')
        password = _get('password')
        return cls(
            default_host=None if host is None else str(host),
            password=None if password is None else str(password),
            default_port=_int('default_port', 'port'),
            timeout_secs=_float('timeout_secs'),
            command_timeout_secs=_float('command_timeout_secs'),
            connect_attempts=_int('connect_attempts'),
            connect_backoff_secs=_float('connect_backoff_secs'),
            connect_warn_after=_int('connect_warn_after'),
            poll_interval_secs=_float('poll_interval_secs'),
            idle_poll_interval_secs=_float('idle_poll_interval_secs'),
            base_config=base_config,
          )

    def __str__(self) -> str:
        return (
            f"JvcDlaClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"timeout_secs={self.timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
