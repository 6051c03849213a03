import pymongo
from pymongo import monitoring

from ddtrace.internal.logger import get_logger

from .monitor import CommandTracer


log = get_logger(__name__)

_listener = None


def get_version():
    # type: () -> str
    return getattr(pymongo, "__version__", "")


def patch():
    """Register a :class:`CommandTracer` for every client created from now on.

    Clients that already exist keep the listeners they were created with.
    """
    global _listener

    if getattr(pymongo, "_datadog_hooks_patch", False):
        return
    pymongo._datadog_hooks_patch = True

    if _listener is None:
        _listener = CommandTracer()
        monitoring.register(_listener)
    else:
        _listener.enabled = True


def unpatch():
    # pymongo cannot unregister a listener, it is turned off instead
    if not getattr(pymongo, "_datadog_hooks_patch", False):
        return
    pymongo._datadog_hooks_patch = False

    if _listener is not None:
        _listener.enabled = False
