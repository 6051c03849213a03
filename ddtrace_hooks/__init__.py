"""
ddtrace-hooks reports calls made through bottle, redis and pymongo as
``ddtrace`` spans.

Enable every integration, each one taking effect when its library is imported::

    import ddtrace_hooks
    ddtrace_hooks.patch_all()

or pick some::

    ddtrace_hooks.patch(redis=True, pymongo=True)
"""
from ._monkey import ModuleNotFoundException  # noqa:F401
from ._monkey import PATCH_MODULES  # noqa:F401
from ._monkey import PatchException  # noqa:F401
from ._monkey import get_patched_modules
from ._monkey import patch
from ._monkey import patch_all
from .version import __version__


__all__ = [
    "__version__",
    "get_patched_modules",
    "patch",
    "patch_all",
]
