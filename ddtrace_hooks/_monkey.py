import importlib
import os
from typing import TYPE_CHECKING  # noqa:F401
from typing import Set

from wrapt.importer import when_imported

from ddtrace.internal.logger import get_logger
from ddtrace.internal.utils import formats


if TYPE_CHECKING:  # pragma: no cover
    from typing import Any  # noqa:F401
    from typing import Callable  # noqa:F401


log = get_logger(__name__)

# Default set of modules to automatically patch or not
PATCH_MODULES = {
    "bottle": True,
    "pymongo": True,
    "redis": True,
}

_PATCHED_MODULES = set()  # type: Set[str]


class PatchException(Exception):
    """Wraps regular `Exception` class when patching modules"""

    pass


class ModuleNotFoundException(PatchException):
    pass


def _on_import_factory(module, path_f, raise_errors=True):
    # type: (str, str, bool) -> Callable[[Any], None]
    """Factory to create an import hook for the provided module name"""

    def on_import(hook):
        # Import and patch module
        try:
            imported_module = importlib.import_module(path_f % (module,))
            imported_module.patch()
        except Exception as e:
            if raise_errors:
                raise
            log.error(
                "failed to enable ddtrace-hooks support for %s: %s",
                module,
                str(e),
            )
        else:
            log.debug("ddtrace-hooks enabled for %s %s", module, imported_module.get_version())

    return on_import


def patch_all(**patch_modules):
    # type: (bool) -> None
    """Enables every ddtrace-hooks integration.

    In addition to ``patch_modules``, an override can be specified via an
    environment variable, ``DD_TRACE_<module>_ENABLED`` for each module.

    ``patch_modules`` have the highest precedence for overriding.

    :param dict patch_modules: Override whether particular modules are patched or not.

        >>> patch_all(redis=False)
    """
    modules = PATCH_MODULES.copy()

    # The enabled setting can be overridden by environment variables
    for module in modules:
        env_var = "DD_TRACE_%s_ENABLED" % module.upper()
        if env_var in os.environ:
            modules[module] = formats.asbool(os.environ[env_var])

    # Arguments take precedence over the environment and the defaults.
    modules.update(patch_modules)

    patch(raise_errors=False, **modules)


def patch(raise_errors=True, **patch_modules):
    # type: (bool, bool) -> None
    """Patch only a set of given modules.

    The integration is enabled as soon as the library is imported, or right
    away if it already is.

    :param bool raise_errors: Raise error if one patch fail.
    :param dict patch_modules: List of modules to patch.

        >>> patch(redis=True, pymongo=True)
    """
    contribs = [c for c, should_patch in patch_modules.items() if should_patch]
    patched = []
    for contrib in contribs:
        # Check if we have the requested contrib.
        if contrib not in PATCH_MODULES:
            if raise_errors:
                raise ModuleNotFoundException("%s does not have automatic instrumentation" % contrib)
            log.error("ddtrace-hooks has no integration for %s", contrib)
            continue

        # Use factory to create handler to close over `module` and `raise_errors` values from this loop
        when_imported(contrib)(
            _on_import_factory(contrib, "ddtrace_hooks.contrib.%s.patch", raise_errors=raise_errors)
        )

        # manually add module to patched modules
        _PATCHED_MODULES.add(contrib)
        patched.append(contrib)

    log.info(
        "Configured ddtrace-hooks instrumentation for %s integration(s). The following modules have been patched: %s",
        len(patched),
        ",".join(patched),
    )


def get_patched_modules():
    # type: () -> Set[str]
    """Get the list of patched modules"""
    return _PATCHED_MODULES
