"""Exceptions raised by junos-rpc."""

import builtins


class JunosRpcError(Exception):
    """Base class of all junos-rpc errors."""


class ConnectionError(JunosRpcError, builtins.ConnectionError):
    """NETCONF session could not be opened (unreachable, auth, handshake).

    Subclass of the builtin ConnectionError, not a base of it: catching
    this class does not catch a raw ConnectionRefusedError.
    """


class TransportError(JunosRpcError):
    """The execute call failed after the session was opened."""


class NotConnectedError(JunosRpcError):
    """Operation attempted on a closed session."""


class DecodeError(JunosRpcError):
    """Reply payload could not be decoded."""


class DeviceError(JunosRpcError):
    """Device answered the RPC with <rpc-error>.

    Only the first error message becomes the exception message. The
    complete list of error descriptors stays available as ``errors``.
    """

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    @classmethod
    def from_reply(cls, reply):
        if not reply.errors:
            return cls("RPC failed without error message", [])
        return cls(reply.errors[0].get("message") or "", reply.errors)
