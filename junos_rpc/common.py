"""Common utilities: config loading, session connection, target resolution, parallel execution."""

from concurrent import futures
import configparser
import os
import sys
from logging import getLogger

from junos_rpc import session
from junos_rpc.exception import ConnectionError

logger = getLogger(__name__)

config = None
args = None

DEFAULT_CONFIG = "config.ini"


def get_default_config():
    """Return ./config.ini, else $XDG_CONFIG_HOME/junos-rpc/config.ini, if either exists."""
    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    for path in (DEFAULT_CONFIG, os.path.join(xdg, "junos-rpc", DEFAULT_CONFIG)):
        if os.path.isfile(path):
            return path
    return DEFAULT_CONFIG


def read_config():
    """Read and parse the INI config file."""
    global config
    config = configparser.ConfigParser(allow_no_value=True)
    config.read(args.config)
    if len(config.sections()) == 0:
        print(args.config, "is empty")
        return True
    for section in config.sections():
        if config.get(section, "host", fallback=None) is None:
            # host is [section] name
            config.set(section, "host", section)
        if args.debug:
            for key in config[section]:
                if key == "pw":
                    continue
                print(section, ">", key, ":", config[section][key])
            print()
    return False


def connect(hostname):
    """Open a NETCONF session to the device of config section ``hostname``.

    :return: (err, session) ``err`` is True and ``session`` None on failure
    """
    logger.debug(f"connect: {hostname} start")
    sshkey = config.get(hostname, "sshkey", fallback=None)
    try:
        s = session.connect(
            config.get(hostname, "host"),
            config.get(hostname, "id"),
            config.get(hostname, "pw", fallback=None),
            port=config.getint(hostname, "port", fallback=830),
            ssh_private_key_file=sshkey or None,
        )
    except ConnectionError as e:
        print(f"{hostname}: {e}")
        return True, None
    except (configparser.Error, ValueError) as e:
        # 設定値の誤り（port が数値でない等）
        print(f"{hostname}: {e}")
        return True, None
    logger.debug(f"connect: {hostname} end")
    return False, s


def _get_host_tags(section: str) -> set[str]:
    """Lower-cased tags of a config section."""
    raw = config.get(section, "tags", fallback="") or ""
    return {t.strip().lower() for t in raw.split(",") if t.strip()}


def _filter_by_tags(required_tags: set[str]) -> list[str]:
    """Return sections whose tags are a superset of required_tags (AND)."""
    return [s for s in config.sections() if required_tags <= _get_host_tags(s)]


def get_targets():
    """Return target host list from CLI args, tags, or config sections."""
    tags = getattr(args, "tags", None)
    hosts = args.specialhosts

    if tags is not None:
        required_tags = {t.strip().lower() for t in tags.split(",") if t.strip()}
    else:
        required_tags = set()

    # --tags なし & hosts なし → 全セクション
    if not required_tags and not hosts:
        return config.sections()

    targets = []
    if required_tags:
        targets = _filter_by_tags(required_tags)
        if not targets and not hosts:
            print("no hosts matched tags:", tags)
            sys.exit(1)
    # 明示指定ホストを追加（存在チェック・重複排除）
    for i in hosts:
        if not config.has_section(i):
            print(i, "is not found in", args.config)
            sys.exit(1)
        if i not in targets:
            targets.append(i)
    logger.debug(f"{targets=}")
    return targets


def load_commands(filepath: str) -> list[str]:
    """Read CLI commands from ``filepath``, one per line.

    Blank lines and lines starting with '#' are skipped.
    """
    commands = []
    with open(filepath) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                commands.append(line)
    return commands


def _guarded(func, target):
    """func(target) の例外をログに出して 1 を返す"""
    try:
        return func(target)
    except Exception as e:
        logger.error(f"{target} generated an exception: {e}")
        return 1


def run_parallel(func, targets, max_workers=1):
    """Run func for every target, one thread per target up to max_workers.

    An exception raised for one target is logged and recorded as 1 for
    that target in both serial and parallel mode.
    """
    if max_workers <= 1:
        return {target: _guarded(func, target) for target in targets}

    with futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        pending = {
            executor.submit(_guarded, func, target): target
            for target in targets
        }
        return {pending[f]: f.result() for f in futures.as_completed(pending)}
