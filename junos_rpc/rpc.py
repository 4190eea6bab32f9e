"""RPC template table."""

from types import MappingProxyType
from xml.sax.saxutils import escape

# Junos XML RPCs. Templates with a slot take exactly one argument:
# an integer rollback index or a CLI command string.
RPC_TEMPLATES = MappingProxyType(
    {
        "lock": "<lock><target><candidate/></target></lock>",
        "unlock": "<unlock><target><candidate/></target></unlock>",
        "get-rollback-information": (
            "<get-rollback-information>"
            "<rollback>{0:d}</rollback>"
            "<format>text</format>"
            "</get-rollback-information>"
        ),
        "get-rollback-information-compare": (
            "<get-rollback-information>"
            "<rollback>0</rollback>"
            "<compare>{0:d}</compare>"
            "<format>text</format>"
            "</get-rollback-information>"
        ),
        "get-rescue-information": (
            "<get-rescue-information>"
            "<format>text</format>"
            "</get-rescue-information>"
        ),
        "command": '<command format="text">{0}</command>',
        "command-xml": '<command format="xml">{0}</command>',
    }
)


def build(name: str, *args, templates=RPC_TEMPLATES) -> str:
    """Return the RPC XML for ``name`` with ``args`` filled in.

    String arguments are XML-escaped. Integer slots reject non-integers
    with ``ValueError``.

    :raises KeyError: unknown RPC name
    """
    template = templates[name]
    args = tuple(escape(a) if isinstance(a, str) else a for a in args)
    return template.format(*args)


def command_name(format: str) -> str:
    """Select the command template: "xml" or plain text for anything else."""
    if format == "xml":
        return "command-xml"
    return "command"
