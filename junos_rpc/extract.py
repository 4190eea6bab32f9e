"""Extract result text from RPC reply payloads."""

from lxml import etree
from xml.sax.saxutils import escape

from junos_rpc.exception import DecodeError

NO_RESCUE = "No rescue configuration set."
NO_OUTPUT = "No output available."


def parse(data: str):
    """Parse a reply payload into an lxml element.

    :raises DecodeError: empty or malformed payload
    """
    if not data or not data.strip():
        raise DecodeError("empty reply")
    try:
        return etree.fromstring(data.strip().encode())
    except etree.XMLSyntaxError as e:
        raise DecodeError(f"malformed reply: {e}") from e


def _local(tag) -> str:
    """Tag name without namespace."""
    return etree.QName(tag).localname


def configuration_output(data: str, root: str) -> str:
    """Return root/configuration-information/configuration-output text.

    ``root`` is the expected top element, e.g. "rollback-information".
    A missing inner element yields an empty string.

    :raises DecodeError: payload is not a ``root`` document
    """
    ele = parse(data)
    if _local(ele.tag) != root:
        raise DecodeError(f"expected element <{root}> but have <{_local(ele.tag)}>")
    for info in ele:
        if not isinstance(info.tag, str) or _local(info.tag) != "configuration-information":
            continue
        for out in info:
            if isinstance(out.tag, str) and _local(out.tag) == "configuration-output":
                return out.text or ""
    return ""


def rollback_output(data: str) -> str:
    return configuration_output(data, "rollback-information")


def rescue_output(data: str) -> str:
    """Rescue configuration text, or NO_RESCUE when none is set."""
    if not data or not data.strip():
        return NO_RESCUE
    return configuration_output(data, "rescue-information") or NO_RESCUE


def inner_xml(data: str) -> str:
    """Raw XML content of the payload's root element, tags included."""
    ele = parse(data)
    text = escape(ele.text) if ele.text else ""
    return text + "".join(
        etree.tostring(child, encoding="unicode", with_tail=True) for child in ele
    )


def command_output(data: str) -> str:
    """Operational command output, or NO_OUTPUT when empty."""
    if not data or not data.strip():
        return NO_OUTPUT
    return inner_xml(data) or NO_OUTPUT
