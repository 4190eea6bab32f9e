"""Session: one NETCONF connection and the RPCs run over it."""

from logging import getLogger

from junos_rpc import extract
from junos_rpc import rpc
from junos_rpc import transport
from junos_rpc.exception import DeviceError, NotConnectedError

logger = getLogger(__name__)


def connect(host, user, password, port=830, ssh_private_key_file=None):
    """Open a NETCONF session to a Junos device.

    :raises ConnectionError: unreachable host, bad credentials, handshake failure
    """
    conn = transport.dial(
        host, user, password, port=port, ssh_private_key_file=ssh_private_key_file
    )
    return Session(conn)


class Session:
    """Connection to a Junos device.

    ``conn`` is any object with ``execute(rpc_xml) -> Reply`` and
    ``close()``. Calls must not overlap: the connection is one ordered
    request/response channel.
    """

    def __init__(self, conn, templates=rpc.RPC_TEMPLATES):
        self.conn = conn
        self.templates = templates

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()

    @property
    def connected(self) -> bool:
        return self.conn is not None

    def _exec(self, name, *args) -> str:
        """Run RPC ``name`` and return the payload of a successful reply.

        :raises NotConnectedError: session already closed
        :raises DeviceError: device replied with <rpc-error>
        :raises TransportError: execute call failed
        """
        if self.conn is None:
            raise NotConnectedError(f"{name}: session is closed")
        command = rpc.build(name, *args, templates=self.templates)
        logger.debug(f"exec: {command}")
        reply = self.conn.execute(command)
        if not reply.ok:
            err = DeviceError.from_reply(reply)
            if len(err.errors) > 1:
                logger.debug(f"{name}: {len(err.errors) - 1} more error(s) not reported")
            raise err
        return reply.data

    def lock(self):
        """Lock the candidate configuration."""
        self._exec("lock")

    def unlock(self):
        """Unlock the candidate configuration."""
        self._exec("unlock")

    def get_rollback_config(self, number: int) -> str:
        """Return the configuration of rollback ``number``."""
        data = self._exec("get-rollback-information", number)
        return extract.rollback_output(data)

    def rollback_diff(self, compare: int) -> str:
        """Compare the active configuration with rollback ``compare``."""
        data = self._exec("get-rollback-information-compare", compare)
        return extract.rollback_output(data)

    def get_rescue_config(self) -> str:
        data = self._exec("get-rescue-information")
        return extract.rescue_output(data)

    def command(self, cmd: str, format: str = "text") -> str:
        """Run an operational mode command such as "show" or "request".

        ``format`` is "xml" or "text"; anything but "xml" is text.
        """
        data = self._exec(rpc.command_name(format), cmd)
        return extract.command_output(data)

    def close(self):
        """Close the connection. Closing twice is a no-op."""
        if self.conn is None:
            return
        conn, self.conn = self.conn, None
        conn.close()
