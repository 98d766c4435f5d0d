import json
import logging
import os
import subprocess
import sys
import textwrap
from pathlib import Path

from rich.logging import RichHandler

from ui_query.utils import logger as logger_mod
from ui_query.utils.config import Settings
from ui_query.utils.logger import attach_file_logger, bind, configure_logging, detach_file_logger, get_logger, unbind

REPO_ROOT = Path(__file__).resolve().parents[2]


def test_import_keeps_host_logging_and_ignores_settings():
    code = textwrap.dedent(
        """
        import logging
        host = logging.StreamHandler()
        logging.getLogger().addHandler(host)

        import ui_query
        from ui_query.selectors import query
        from ui_query.core import waiter
        query.log.debug("lookup")

        print("kept" if host in logging.getLogger().handlers else "lost")
        """
    )
    env = dict(os.environ, PYTHONPATH=str(REPO_ROOT), POLL_TIMEOUT_MS="abc")
    proc = subprocess.run(
        [sys.executable, "-c", code], cwd=REPO_ROOT, env=env, capture_output=True, text=True, timeout=60
    )
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "kept"


def test_get_logger_does_not_touch_root_handlers(monkeypatch):
    root = logging.getLogger()
    host = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [host])
    monkeypatch.setattr(logger_mod, "_configured", False)
    get_logger("ui_query.tests").debug("hello")
    assert root.handlers == [host]
    assert logger_mod._configured is False


def test_configure_logging_installs_rich_console_once(monkeypatch):
    root = logging.getLogger()
    level = root.level
    monkeypatch.setattr(root, "handlers", [logging.NullHandler()])
    monkeypatch.setattr(logger_mod, "_configured", False)
    try:
        configure_logging(Settings(LOG_LEVEL="DEBUG", LOG_TO_FILE=False))
        configure_logging(Settings(LOG_LEVEL="DEBUG", LOG_TO_FILE=False))
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
        assert logging.getLogger("playwright").level == logging.WARNING
    finally:
        root.setLevel(level)


def test_file_logger_writes_bound_context(tmp_path):
    path = tmp_path / "logs" / "probe.jsonl"
    handler = attach_file_logger(path, level=logging.DEBUG)
    bind(probe_id="p-1", url="https://example.org")
    try:
        get_logger("ui_query.tests").warning("selector missing")
    finally:
        unbind("probe_id", "url")
        detach_file_logger(handler)
    record = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
    assert record["msg"] == "selector missing"
    assert record["level"] == "WARNING"
    assert record["probe_id"] == "p-1"
    assert record["url"] == "https://example.org"
