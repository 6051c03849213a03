import os
from unittest import mock

import pytest

from ddtrace_hooks import _monkey
from ddtrace_hooks import get_patched_modules
from ddtrace_hooks import patch
from ddtrace_hooks import patch_all
from tests.utils import override_env


@pytest.fixture(autouse=True)
def when_imported():
    # keep the real integrations from being enabled by these tests
    with mock.patch.object(_monkey, "when_imported") as when_imported:
        yield when_imported


@pytest.fixture(autouse=True)
def patched_modules():
    original = set(_monkey._PATCHED_MODULES)
    _monkey._PATCHED_MODULES.clear()
    yield _monkey._PATCHED_MODULES
    _monkey._PATCHED_MODULES.clear()
    _monkey._PATCHED_MODULES.update(original)


def _hooked(when_imported):
    return [c.args[0] for c in when_imported.call_args_list]


def test_patch(when_imported):
    patch(redis=True, pymongo=True, bottle=False)

    assert get_patched_modules() == {"redis", "pymongo"}
    assert sorted(_hooked(when_imported)) == ["pymongo", "redis"]


def test_patch_unknown_module():
    with pytest.raises(_monkey.ModuleNotFoundException):
        patch(sqlite3=True)
    assert get_patched_modules() == set()


def test_patch_unknown_module_no_raise():
    patch(raise_errors=False, sqlite3=True, redis=True)
    assert get_patched_modules() == {"redis"}


def test_module_not_found_is_a_patch_exception():
    assert issubclass(_monkey.ModuleNotFoundException, _monkey.PatchException)


def test_patch_all():
    with override_env({}):
        for module in _monkey.PATCH_MODULES:
            os.environ.pop("DD_TRACE_%s_ENABLED" % module.upper(), None)
        patch_all()
    assert get_patched_modules() == {"bottle", "redis", "pymongo"}


def test_patch_all_env_override_redis_disabled():
    with override_env(dict(DD_TRACE_REDIS_ENABLED="false")):
        patch_all()
    assert "redis" not in get_patched_modules()
    assert "bottle" in get_patched_modules()


def test_patch_all_env_override_manual_patch():
    # Manual patching should not be affected by the environment variable override.
    with override_env(dict(DD_TRACE_REDIS_ENABLED="false")):
        patch(redis=True)
    assert "redis" in get_patched_modules()


def test_patch_all_arguments_win_over_env():
    with override_env(dict(DD_TRACE_PYMONGO_ENABLED="false")):
        patch_all(pymongo=True, bottle=False)
    assert get_patched_modules() == {"pymongo", "redis"}


def test_patch_all_never_raises():
    patch_all(sqlite3=True)
    assert "sqlite3" not in get_patched_modules()


class TestOnImport(object):
    def test_patches_integration(self):
        integration = mock.Mock()
        integration.get_version.return_value = "5.0.1"

        with mock.patch.object(_monkey.importlib, "import_module", return_value=integration) as import_module:
            _monkey._on_import_factory("redis", "ddtrace_hooks.contrib.%s.patch")(None)

        import_module.assert_called_once_with("ddtrace_hooks.contrib.redis.patch")
        integration.patch.assert_called_once_with()

    def test_failure_raises(self):
        integration = mock.Mock()
        integration.patch.side_effect = AttributeError("no Redis")

        with mock.patch.object(_monkey.importlib, "import_module", return_value=integration):
            with pytest.raises(AttributeError):
                _monkey._on_import_factory("redis", "ddtrace_hooks.contrib.%s.patch")(None)

    def test_failure_is_logged(self):
        integration = mock.Mock()
        integration.patch.side_effect = AttributeError("no Redis")

        with mock.patch.object(_monkey.importlib, "import_module", return_value=integration):
            with mock.patch.object(_monkey, "log") as log:
                _monkey._on_import_factory("redis", "ddtrace_hooks.contrib.%s.patch", raise_errors=False)(None)

        log.error.assert_called_once()
        assert log.error.call_args.args[1] == "redis"
