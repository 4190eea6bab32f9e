#
#   Copyright ©︎2022-2025 AIKAWA Shigechika
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

import argparse
import sys
import logging
import logging.config
import os

if os.path.isfile("logging.ini"):
    logging.config.fileConfig("logging.ini")
else:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
logger = logging.getLogger(__name__)

from junos_rpc import __version__ as version
from junos_rpc import common
from junos_rpc import rpc
from junos_rpc.exception import DeviceError


def _dry_run(hostname, *commands) -> int:
    """接続せずに送信予定の RPC を表示する"""
    print(f"# {hostname}")
    for name, *rpc_args in commands:
        print("dry-run:", rpc.build(name, *rpc_args))
    return 0


def _with_session(hostname, func) -> int:
    """接続して func(session) を実行し、必ず close する"""
    err, s = common.connect(hostname)
    if err or s is None:
        return 1
    try:
        print(f"# {hostname}")
        return func(s)
    except Exception as e:
        logger.error(f"{hostname}: {e}")
        return 1
    finally:
        try:
            s.close()
        except Exception as e:
            logger.debug(f"{hostname}: close: {e}")


# --- サブコマンド用エントリ関数 ---


def cmd_rollback(hostname) -> int:
    """rollback 設定を表示する"""
    number = common.args.number
    if common.args.dry_run:
        return _dry_run(hostname, ("get-rollback-information", number))

    def run(s):
        print(s.get_rollback_config(number).strip())
        return 0

    return _with_session(hostname, run)


def cmd_diff(hostname) -> int:
    """現在の設定と rollback 設定の差分を表示する"""
    number = common.args.number
    if common.args.dry_run:
        return _dry_run(hostname, ("get-rollback-information-compare", number))

    def run(s):
        print(s.rollback_diff(number).strip())
        return 0

    return _with_session(hostname, run)


def cmd_rescue(hostname) -> int:
    """rescue 設定を表示する"""
    if common.args.dry_run:
        return _dry_run(hostname, ("get-rescue-information",))

    def run(s):
        print(s.get_rescue_config().strip())
        return 0

    return _with_session(hostname, run)


def cmd_show(hostname) -> int:
    """CLI コマンドを実行して結果を表示する（-f で複数コマンド）"""
    fmt = common.args.format
    showfile = getattr(common.args, "showfile", None)
    if showfile:
        try:
            commands = common.load_commands(showfile)
        except OSError as e:
            logger.error(f"{hostname}: {e}")
            return 1
    else:
        commands = [common.args.show_command]

    if common.args.dry_run:
        name = rpc.command_name(fmt)
        return _dry_run(hostname, *[(name, c) for c in commands])

    def run(s):
        for c in commands:
            if showfile:
                print(f"## {c}")
            print(s.command(c, fmt).strip())
        return 0

    return _with_session(hostname, run)


def cmd_lock(hostname) -> int:
    """candidate 設定をロック・アンロックできるか確認する"""
    if common.args.dry_run:
        return _dry_run(hostname, ("lock",), ("unlock",))

    def run(s):
        try:
            s.lock()
        except DeviceError as e:
            print(f"lock: failed: {e}")
            return 1
        print("lock: successful")
        try:
            s.unlock()
        except DeviceError as e:
            print(f"unlock: failed: {e}")
            return 1
        print("unlock: successful")
        return 0

    return _with_session(hostname, run)


# --- メイン ---


def build_parser():
    # 共通オプション用の親パーサー
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-c", "--config", default=None, type=str,
        help="config filename (default: config.ini or ~/.config/junos-rpc/config.ini)",
    )
    parent.add_argument(
        "-n", "--dry-run", action="store_true",
        help="print RPC only. No connect.",
    )
    parent.add_argument("-d", "--debug", action="store_true", help="debug output")
    parent.add_argument(
        "--workers", type=int, default=1,
        help="parallel workers (default: 1)",
    )
    parent.add_argument(
        "--tags", default=None,
        help="comma separated tags, hosts must have all of them",
    )

    parser = argparse.ArgumentParser(
        description="junos-rpc: Junos NETCONF RPC ツール",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + version)
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    # rollback
    p_rollback = subparsers.add_parser(
        "rollback", parents=[parent], help="show rollback configuration",
    )
    p_rollback.add_argument("number", type=int, help="rollback number")
    p_rollback.add_argument("specialhosts", metavar="hostname", nargs="*")

    # diff
    p_diff = subparsers.add_parser(
        "diff", parents=[parent], help="compare active configuration with rollback",
    )
    p_diff.add_argument("number", type=int, help="rollback number")
    p_diff.add_argument("specialhosts", metavar="hostname", nargs="*")

    # rescue
    p_rescue = subparsers.add_parser(
        "rescue", parents=[parent], help="show rescue configuration",
    )
    p_rescue.add_argument("specialhosts", metavar="hostname", nargs="*")

    # show
    p_show = subparsers.add_parser(
        "show", parents=[parent], help="run operational mode command",
    )
    p_show.add_argument(
        "-f", "--file", dest="showfile", default=None,
        help="file of commands, one per line",
    )
    p_show.add_argument(
        "--format", choices=["text", "xml"], default="text",
        help="output format (default: text)",
    )
    p_show.add_argument("show_command", nargs="?", default=None)
    p_show.add_argument("specialhosts", metavar="hostname", nargs="*")

    # lock
    p_lock = subparsers.add_parser(
        "lock", parents=[parent], help="lock and unlock candidate configuration",
    )
    p_lock.add_argument("specialhosts", metavar="hostname", nargs="*")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.subcommand == "show":
        if args.showfile:
            # -f 指定時は最初の positional もホスト名
            if args.show_command is not None:
                args.specialhosts.insert(0, args.show_command)
                args.show_command = None
        elif args.show_command is None:
            parser.error("show: command or -f FILE is required")

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    common.args = args
    if common.args.config is None:
        common.args.config = common.get_default_config()

    logger.debug("start")

    if common.read_config():
        print(common.args.config, "is not ready")
        return 1

    targets = common.get_targets()

    dispatch = {
        "rollback": cmd_rollback,
        "diff": cmd_diff,
        "rescue": cmd_rescue,
        "show": cmd_show,
        "lock": cmd_lock,
    }

    func = dispatch[args.subcommand]
    results = common.run_parallel(func, targets, max_workers=common.args.workers)

    # いずれかのホストが非0を返したら非0で終了
    for host, ret in results.items():
        if ret != 0:
            logger.debug(f"{host} returned {ret}")
            return ret

    logger.debug("end")
    return 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
