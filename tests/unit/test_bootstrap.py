"""
Unit tests for the startup phase and the process entry point.

Setup failures come back as SetupResult values; only main.run() turns them
into a non-zero exit.
"""

from types import SimpleNamespace

import pytest

import main
from conftest import FailingStorage
from curtail_platform.bootstrap import SetupResult, bootstrap
from curtail_platform.storage.storage import Storage


def test_bootstrap_memory_ok(conf):
    result = bootstrap(conf)
    assert result.ok is True
    assert result.error is None
    assert isinstance(result.storage, Storage)


def test_bootstrap_uses_injected_storage(conf, storage):
    result = bootstrap(conf, storage=storage)
    assert result.ok and result.storage is storage


def test_bootstrap_config_error(conf):
    conf.LISTEN_ON = "nope"
    result = bootstrap(conf)
    assert result.ok is False
    assert result.error.startswith("Config error")


def test_bootstrap_postgres_without_dsn(conf):
    conf.STORAGE_BACKEND = "postgres"
    result = bootstrap(conf)
    assert not result.ok
    assert "CURTAIL_DB_DSN" in result.error


def test_bootstrap_storage_failure_reported_not_raised(conf):
    storage = FailingStorage(fail_on={"bootstrap"})
    result = bootstrap(conf, storage=storage)
    assert not result.ok
    assert result.error.startswith("Storage setup failed")


def test_run_exits_non_zero_on_setup_failure(monkeypatch):
    monkeypatch.setattr(main, "bootstrap", lambda conf: SetupResult(ok=False, error="Config error: boom"))
    served = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *a, **kw: served.append(kw))
    with pytest.raises(SystemExit) as excinfo:
        main.run()
    assert excinfo.value.code == 1
    assert served == []


def test_run_serves_on_configured_address(monkeypatch):
    storage = Storage()
    monkeypatch.setattr(main, "bootstrap", lambda conf: SetupResult(ok=True, storage=storage))
    monkeypatch.setattr(main, "settings", SimpleNamespace(
        STORAGE_BACKEND="memory", DB_DSN="", LISTEN_ON="[::]:8123", LOG_LEVEL="INFO",
    ))
    served = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kw: served.append((app, kw)))
    main.run()
    app, kw = served[0]
    assert kw == {"host": "::", "port": 8123}
    assert app.state.service.storage is storage
