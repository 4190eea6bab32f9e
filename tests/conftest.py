import argparse
import configparser
from unittest.mock import MagicMock

import pytest

from junos_rpc import common
from junos_rpc.session import Session
from junos_rpc.transport import Reply


@pytest.fixture
def junos_common():
    """common モジュールのグローバル変数を退避・復元する"""
    saved = (common.config, common.args)
    yield common
    common.config, common.args = saved


@pytest.fixture
def mock_args(junos_common):
    """テスト用の args グローバル変数を設定"""
    junos_common.args = argparse.Namespace(
        debug=False,
        dry_run=False,
        workers=1,
        tags=None,
        specialhosts=[],
        config="config.ini",
        number=1,
        format="text",
        show_command=None,
        showfile=None,
    )
    return junos_common.args


@pytest.fixture
def mock_config(junos_common):
    """テスト用の config グローバル変数を設定"""
    cfg = configparser.ConfigParser(allow_no_value=True)
    cfg.read_dict(
        {
            "DEFAULT": {
                "id": "testuser",
                "pw": "testpass",
                "sshkey": "id_ed25519",
                "port": "830",
            },
            "test-host": {"host": "192.0.2.1"},
        }
    )
    junos_common.config = cfg
    return cfg


@pytest.fixture
def conn():
    """常に ok=True を返すモック transport"""
    c = MagicMock()
    c.execute.return_value = Reply(ok=True, errors=[], data="")
    return c


@pytest.fixture
def session(conn):
    return Session(conn)
