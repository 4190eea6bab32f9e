"""Session のテスト"""

from unittest.mock import MagicMock, patch

import pytest

from junos_rpc import session as session_mod
from junos_rpc.exception import (
    DecodeError,
    DeviceError,
    NotConnectedError,
    TransportError,
)
from junos_rpc.session import Session
from junos_rpc.transport import Reply

ROLLBACK = (
    "<rollback-information><configuration-information>"
    "<configuration-output>{0}</configuration-output>"
    "</configuration-information></rollback-information>"
)

ERROR_REPLY = Reply(ok=False, errors=[{"message": "A"}, {"message": "B"}], data="")


class TestLock:
    """lock() / unlock() のテスト"""

    def test_lock_unlock(self, session, conn):
        """常に ok=True を返す transport で lock → unlock"""
        assert session.lock() is None
        assert session.unlock() is None
        assert [c.args[0] for c in conn.execute.call_args_list] == [
            "<lock><target><candidate/></target></lock>",
            "<unlock><target><candidate/></target></unlock>",
        ]

    def test_lock_error(self, session, conn):
        conn.execute.return_value = Reply(
            ok=False,
            errors=[{"message": "configuration database locked by: user"}],
            data="",
        )
        with pytest.raises(DeviceError, match="configuration database locked"):
            session.lock()


class TestFirstError:
    """エラーは先頭の1件だけがメッセージになる"""

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.lock(),
            lambda s: s.unlock(),
            lambda s: s.get_rollback_config(1),
            lambda s: s.rollback_diff(1),
            lambda s: s.get_rescue_config(),
            lambda s: s.command("show version", "text"),
            lambda s: s.command("show version", "xml"),
        ],
    )
    def test_first_error_only(self, session, conn, call):
        conn.execute.return_value = ERROR_REPLY
        with pytest.raises(DeviceError) as excinfo:
            call(session)
        assert str(excinfo.value) == "A"
        assert excinfo.value.message == "A"
        assert [e["message"] for e in excinfo.value.errors] == ["A", "B"]

    def test_no_error_descriptor(self, session, conn):
        conn.execute.return_value = Reply(ok=False, errors=[], data="")
        with pytest.raises(DeviceError):
            session.lock()


class TestRollback:
    """get_rollback_config() / rollback_diff() のテスト"""

    def test_get_rollback_config(self, session, conn):
        conn.execute.return_value = Reply(
            ok=True, errors=[], data=ROLLBACK.format("version 22.4R3;")
        )
        assert session.get_rollback_config(3) == "version 22.4R3;"
        sent = conn.execute.call_args.args[0]
        assert "<rollback>3</rollback>" in sent
        assert "<compare>" not in sent

    def test_rollback_diff_no_changes(self, session, conn):
        conn.execute.return_value = Reply(
            ok=True, errors=[], data=ROLLBACK.format("no changes")
        )
        assert session.rollback_diff(0) == "no changes"
        sent = conn.execute.call_args.args[0]
        assert "<compare>0</compare>" in sent

    def test_rollback_diff_verbatim(self, session, conn):
        diff = "[edit system]\n-  host-name rt1;\n+  host-name rt2;\n"
        conn.execute.return_value = Reply(ok=True, errors=[], data=ROLLBACK.format(diff))
        assert session.rollback_diff(1) == diff

    def test_decode_error(self, session, conn):
        conn.execute.return_value = Reply(ok=True, errors=[], data="<output>x")
        with pytest.raises(DecodeError):
            session.get_rollback_config(1)


class TestRescue:
    """get_rescue_config() のテスト"""

    def test_empty(self, session, conn):
        conn.execute.return_value = Reply(
            ok=True,
            errors=[],
            data="<rescue-information><configuration-information>"
            "<configuration-output></configuration-output>"
            "</configuration-information></rescue-information>",
        )
        assert session.get_rescue_config() == "No rescue configuration set."

    def test_text(self, session, conn):
        conn.execute.return_value = Reply(
            ok=True,
            errors=[],
            data="<rescue-information><configuration-information>"
            "<configuration-output>system { host-name rt1; }</configuration-output>"
            "</configuration-information></rescue-information>",
        )
        assert session.get_rescue_config() == "system { host-name rt1; }"


class TestCommand:
    """command() のテスト"""

    def test_xml_template(self, session, conn):
        session.command("show version", "xml")
        assert conn.execute.call_args.args[0] == (
            '<command format="xml">show version</command>'
        )

    @pytest.mark.parametrize("fmt", ["text", "anything-else"])
    def test_text_template(self, session, conn, fmt):
        session.command("show version", fmt)
        assert conn.execute.call_args.args[0] == (
            '<command format="text">show version</command>'
        )

    def test_default_format_is_text(self, session, conn):
        session.command("show version")
        assert 'format="text"' in conn.execute.call_args.args[0]

    def test_empty_output(self, session, conn):
        conn.execute.return_value = Reply(ok=True, errors=[], data="<output></output>")
        assert session.command("clear arp") == "No output available."

    def test_output(self, session, conn):
        conn.execute.return_value = Reply(
            ok=True, errors=[], data="<output>Hostname: rt1</output>"
        )
        assert session.command("show version") == "Hostname: rt1"

    def test_transport_error_propagates(self, session, conn):
        conn.execute.side_effect = TransportError("connection closed")
        with pytest.raises(TransportError):
            session.command("show version")


class TestClose:
    """close() と状態遷移のテスト"""

    def test_close_twice(self, session, conn):
        session.close()
        session.close()
        conn.close.assert_called_once()
        assert session.connected is False

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.lock(),
            lambda s: s.unlock(),
            lambda s: s.get_rollback_config(0),
            lambda s: s.rollback_diff(0),
            lambda s: s.get_rescue_config(),
            lambda s: s.command("show version"),
        ],
    )
    def test_closed_session(self, session, conn, call):
        session.close()
        with pytest.raises(NotConnectedError):
            call(session)
        conn.execute.assert_not_called()

    def test_context_manager(self, conn):
        with Session(conn) as s:
            assert s.connected
        conn.close.assert_called_once()
        assert s.connected is False


class TestConnect:
    """connect() のテスト"""

    def test_connect(self):
        mock_conn = MagicMock()
        with patch.object(session_mod.transport, "dial", return_value=mock_conn) as dial:
            s = session_mod.connect("192.0.2.1", "user", "pass")
        dial.assert_called_once_with(
            "192.0.2.1", "user", "pass", port=830, ssh_private_key_file=None
        )
        assert isinstance(s, Session)
        assert s.conn is mock_conn
