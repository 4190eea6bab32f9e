"""junos-rpc: NETCONF RPC client for Junos devices.

Opens a NETCONF/SSH session to a Juniper Networks device and runs a
small set of RPCs against it: candidate configuration lock/unlock,
rollback and rescue configuration retrieval, rollback diff and
operational mode commands.

Library usage::

    from junos_rpc import connect

    with connect("rt1.example.jp", "user", "password") as s:
        print(s.get_rollback_config(1))
        print(s.command("show version", "text"))

Subcommands::

    junos-rpc rollback 1 [hostname ...]      # show rollback 1
    junos-rpc diff 1 [hostname ...]          # show | compare rollback 1
    junos-rpc rescue [hostname ...]          # show rescue configuration
    junos-rpc show "show bgp summary"        # run CLI command
    junos-rpc lock [hostname ...]            # check candidate lock
"""

__version__ = "0.1.0"

from junos_rpc.exception import (  # noqa: E402
    ConnectionError,
    DecodeError,
    DeviceError,
    JunosRpcError,
    NotConnectedError,
    TransportError,
)
from junos_rpc.session import Session, connect  # noqa: E402

__all__ = [
    "ConnectionError",
    "DecodeError",
    "DeviceError",
    "JunosRpcError",
    "NotConnectedError",
    "Session",
    "TransportError",
    "connect",
]
