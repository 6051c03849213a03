import os

import bottle
import wrapt

from ddtrace import config
from ddtrace.contrib.trace_utils import unwrap as _u
from ddtrace.internal.utils.formats import asbool

from ...internal.formats import to_int
from .trace import TracePlugin


# Configure default configuration
config._add(
    "bottle",
    dict(
        distributed_tracing=asbool(os.getenv("DD_BOTTLE_DISTRIBUTED_TRACING", default=True)),
        capture_body=os.getenv("DD_BOTTLE_CAPTURE_BODY", default="off").lower(),
        body_max_length=to_int(os.getenv("DD_BOTTLE_BODY_MAX_LENGTH"), 1024),
    ),
)


def get_version():
    # type: () -> str
    return getattr(bottle, "__version__", "")


def patch():
    """Install a :class:`TracePlugin` in every ``bottle.Bottle`` created from now on"""
    if getattr(bottle, "_datadog_hooks_patch", False):
        return

    bottle._datadog_hooks_patch = True
    wrapt.wrap_function_wrapper("bottle", "Bottle.__init__", traced_init)


def unpatch():
    if not getattr(bottle, "_datadog_hooks_patch", False):
        return

    bottle._datadog_hooks_patch = False
    _u(bottle.Bottle, "__init__")


def traced_init(wrapped, instance, args, kwargs):
    wrapped(*args, **kwargs)

    service = config._get_service(default="bottle")

    plugin = TracePlugin(service=service)
    instance.install(plugin)
