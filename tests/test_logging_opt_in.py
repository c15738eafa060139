import logging

from patchforge import patch_text
from patchforge._logging import NoopLogger, debug_enabled, resolve_logger


def test_resolve_logger_default_noop():
    lg = resolve_logger()
    assert isinstance(lg, NoopLogger)
    # Should not raise:
    lg.debug("hello")
    lg.warning("world")
    assert lg.isEnabledFor(logging.DEBUG) is False


def test_resolve_logger_enabled_creates_logger(caplog):
    with caplog.at_level(logging.INFO):
        lg = resolve_logger(enabled=True, name="patchforge.test")
        lg.info("test message")
    assert any("test message" in rec.message for rec in caplog.records)


def test_resolve_logger_uses_passed_logger(caplog):
    custom = logging.getLogger("patchforge.custom")
    with caplog.at_level(logging.DEBUG, logger="patchforge.custom"):
        lg = resolve_logger(logger=custom, enabled=False)
        lg.debug("from custom")
    assert lg is custom
    assert any("from custom" in rec.message for rec in caplog.records)


def test_library_is_silent_by_default(caplog):
    with caplog.at_level(logging.DEBUG):
        patch_text("a\n", "@@ -1 +1 @@\n-a\n+b\n")
    assert not [rec for rec in caplog.records if rec.name.startswith("patchforge")]


def test_passed_logger_receives_engine_records(caplog):
    custom = logging.getLogger("host.app")
    with caplog.at_level(logging.DEBUG, logger="host.app"):
        patch_text("a\n", "@@ -1 +1 @@\n-a\n+b\n", logger=custom)
    names = {rec.name for rec in caplog.records}
    assert "host.app" in names


def test_debug_enabled_follows_logger_level():
    assert debug_enabled(NoopLogger()) is False
    quiet = logging.getLogger("patchforge.quiet")
    quiet.setLevel(logging.WARNING)
    assert debug_enabled(quiet) is False
    assert debug_enabled(resolve_logger(enabled=True, name="patchforge.loud", level=logging.DEBUG))


def test_candidate_ranking_logged_only_at_debug(caplog):
    custom = logging.getLogger("host.ranking")
    with caplog.at_level(logging.INFO, logger="host.ranking"):
        patch_text("a\nb\n", "@@ -1,2 +1,2 @@\n a\n-b\n+c\n", logger=custom)
    assert not any("nominal=" in rec.getMessage() for rec in caplog.records)

    caplog.clear()
    with caplog.at_level(logging.DEBUG, logger="host.ranking"):
        patch_text("a\nb\n", "@@ -1,2 +1,2 @@\n a\n-b\n+c\n", logger=custom)
    assert any("nominal=0" in rec.getMessage() for rec in caplog.records)
