#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class JvcDlaError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class HandshakeError(JvcDlaError):
  """The PJ_OK/PJREQ/PJACK handshake, or the null command that follows it, failed."""
  pass

class ProtocolError(JvcDlaError):
  """The projector sent bytes that do not satisfy the framing contract."""
  pass

class AckMismatchError(ProtocolError):
  """The acknowledgement frame did not match the expected bytes."""
  pass

class ResponseFramingError(ProtocolError):
  """The response prefix or terminator did not match."""
  pass

class DecodeError(ProtocolError):
  """A well-framed response payload could not be decoded into a value."""
  pass

class TransportError(JvcDlaError):
  """A socket-level failure. The connection is unusable afterwards."""
  pass

class ReadTimeoutError(TransportError, TimeoutError):
  """A read did not complete within the connection's timeout."""
  pass

class ConnectionClosedError(TransportError):
  """The projector closed the connection, possibly in the middle of a frame."""
  pass

class NotConnectedError(TransportError):
  """A command was executed without a ready connection."""
  pass

class InvalidArgumentError(JvcDlaError, ValueError):
  """An argument was rejected locally, before any bytes were sent."""
  pass

class DidNotConnectError(JvcDlaError):
  """All connection attempts failed; the projector is busy or unreachable."""
  pass
