"""NETCONF transport: PyEZ Device wrapper returning reply envelopes."""

from typing import NamedTuple
from jnpr.junos import Device
from jnpr.junos.exception import (
    ConnectAuthError,
    ConnectClosedError,
    ConnectError,
    ConnectRefusedError,
    ConnectTimeoutError,
    ConnectUnknownHostError,
    RpcError,
    RpcTimeoutError,
)
from lxml import etree
from ncclient.operations.errors import TimeoutExpiredError
import os
from logging import getLogger

from junos_rpc.exception import ConnectionError, TransportError

logger = getLogger(__name__)


class Reply(NamedTuple):
    """Result of one RPC: success flag, error descriptors, payload."""

    ok: bool
    errors: list
    data: str


def rpc_errors(e) -> list[dict]:
    """Convert a PyEZ RpcError into a list of error descriptors.

    Each descriptor is a dict with at least a "message" key, in the
    order the device reported them.
    """
    errs = getattr(e, "errs", None)
    if isinstance(errs, list) and errs:
        result = []
        for err in errs:
            if isinstance(err, dict):
                desc = dict(err)
                desc["message"] = (desc.get("message") or "").strip()
            else:
                desc = {"message": str(err).strip()}
            result.append(desc)
        return result
    rpc_error = getattr(e, "rpc_error", None) or {}
    message = rpc_error.get("message") or getattr(e, "message", None) or str(e)
    return [
        {
            "message": message.strip(),
            "severity": rpc_error.get("severity"),
        }
    ]


def reply_data(rsp) -> str:
    """Serialize what Device.execute() returned into a payload string."""
    if isinstance(rsp, etree._Element):
        return etree.tostring(rsp, encoding="unicode")
    # <ok/> replies come back as True
    return ""


class DeviceTransport:
    """Transport over an open PyEZ Device."""

    def __init__(self, dev):
        self.dev = dev

    def execute(self, rpc_xml: str) -> Reply:
        """Send ``rpc_xml`` and return the reply envelope.

        Device-side <rpc-error> replies are returned as ``Reply(ok=False)``.

        :raises TransportError: connection closed, timeout, or unparsable request
        """
        try:
            rsp = self.dev.execute(rpc_xml)
        except RpcTimeoutError as e:
            raise TransportError(f"RPC timeout: {e}") from e
        except TimeoutExpiredError as e:
            raise TransportError(f"RPC timeout: {e}") from e
        except ConnectClosedError as e:
            raise TransportError(f"connection closed: {e}") from e
        except RpcError as e:
            errors = rpc_errors(e)
            logger.debug(f"execute: rpc-error {errors}")
            return Reply(ok=False, errors=errors, data="")
        except etree.XMLSyntaxError as e:
            raise TransportError(f"malformed RPC request: {e}") from e
        return Reply(ok=True, errors=[], data=reply_data(rsp))

    def close(self):
        self.dev.close()


def dial(host, user, password, port=830, ssh_private_key_file=None):
    """Open a NETCONF/SSH connection and return a DeviceTransport.

    :raises ConnectionError: bad port, or the device could not be reached or logged in
    """
    try:
        dev = Device(
            host=host,
            port=int(port),
            user=user,
            passwd=password,
            ssh_private_key_file=(
                os.path.expanduser(ssh_private_key_file) if ssh_private_key_file else None
            ),
        )
        dev.open()
    except ConnectAuthError as e:
        msg = "Authentication credentials fail to login: {0}".format(e)
        logger.error(msg)
        raise ConnectionError(msg) from e
    except ConnectRefusedError as e:
        msg = "NETCONF Connection refused: {0}".format(e)
        logger.error(msg)
        raise ConnectionError(msg) from e
    except ConnectTimeoutError as e:
        msg = "Connection timeout: {0}".format(e)
        logger.error(msg)
        raise ConnectionError(msg) from e
    except ConnectUnknownHostError as e:
        msg = "Unknown Host: {0}".format(e)
        logger.error(msg)
        raise ConnectionError(msg) from e
    except ConnectError as e:
        msg = "Cannot connect to device: {0}".format(e)
        logger.error(msg)
        raise ConnectionError(msg) from e
    except Exception as e:
        logger.error(e)
        raise ConnectionError(str(e)) from e
    logger.debug(f"dial: {host} connected")
    return DeviceTransport(dev)
