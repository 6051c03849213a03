import os
import sys

import redis
import wrapt

from ddtrace import config
from ddtrace.contrib.trace_utils import unwrap as _u
from ddtrace.internal.logger import get_logger
from ddtrace.internal.utils.formats import CMD_MAX_LEN

from ...internal.formats import to_int
from .hook import TracingHook


log = get_logger(__name__)

config._add(
    "redis",
    dict(
        _default_service="redis",
        cmd_max_length=to_int(os.getenv("DD_REDIS_CMD_MAX_LENGTH"), CMD_MAX_LEN),
    ),
)

# set on clients and pipelines instrumented by trace_client()
HOOK_ATTR = "_datadog_hooks_hook"

_hook = TracingHook()


def _async_client():
    try:
        from redis.asyncio import client
    except ImportError:
        return None
    return client


def get_version():
    # type: () -> str
    return getattr(redis, "__version__", "")


def patch():
    """Instrument every redis client, sync and asyncio"""
    if getattr(redis, "_datadog_hooks_patch", False):
        return
    redis._datadog_hooks_patch = True

    _w = wrapt.wrap_function_wrapper
    _w("redis", "Redis.execute_command", traced_execute_command(_hook))
    _w("redis.client", "Pipeline.execute", traced_execute_pipeline(_hook))
    _w("redis.client", "Pipeline.immediate_execute_command", traced_execute_command(_hook))

    if _async_client() is None:
        log.debug("redis.asyncio is not available, only synchronous clients are traced")
        return

    from .asyncio_patch import traced_async_execute_command
    from .asyncio_patch import traced_async_execute_pipeline

    _w("redis.asyncio.client", "Redis.execute_command", traced_async_execute_command(_hook))
    _w("redis.asyncio.client", "Pipeline.execute", traced_async_execute_pipeline(_hook))
    _w("redis.asyncio.client", "Pipeline.immediate_execute_command", traced_async_execute_command(_hook))


def unpatch():
    if not getattr(redis, "_datadog_hooks_patch", False):
        return
    redis._datadog_hooks_patch = False

    _u(redis.Redis, "execute_command")
    _u(redis.client.Pipeline, "execute")
    _u(redis.client.Pipeline, "immediate_execute_command")

    async_client = _async_client()
    if async_client is not None:
        _u(async_client.Redis, "execute_command")
        _u(async_client.Pipeline, "execute")
        _u(async_client.Pipeline, "immediate_execute_command")


def trace_client(client, hook=None):
    """Instrument a single redis client, and the pipelines it creates, with ``hook``.

    The client class is left untouched::

        client = trace_client(redis.Redis(), TracingHook(service="sessions"))
    """
    if getattr(client, HOOK_ATTR, None) is not None:
        log.debug("redis client %r is already traced", client)
        return client
    hook = hook or TracingHook()

    async_client = _async_client()
    if async_client is not None and isinstance(client, async_client.Redis):
        from .asyncio_patch import traced_async_execute_command
        from .asyncio_patch import traced_async_execute_pipeline

        execute_command = traced_async_execute_command(hook, own_hook=True)
        execute_pipeline = traced_async_execute_pipeline(hook, own_hook=True)
    else:
        execute_command = traced_execute_command(hook, own_hook=True)
        execute_pipeline = traced_execute_pipeline(hook, own_hook=True)

    def _traced_pipeline(func, instance, args, kwargs):
        pipeline = func(*args, **kwargs)
        _wrap_instance(pipeline, "execute", execute_pipeline)
        _wrap_instance(pipeline, "immediate_execute_command", execute_command)
        setattr(pipeline, HOOK_ATTR, hook)
        return pipeline

    _wrap_instance(client, "execute_command", execute_command)
    _wrap_instance(client, "pipeline", _traced_pipeline)
    setattr(client, HOOK_ATTR, hook)
    return client


def _wrap_instance(instance, name, wrapper):
    method = getattr(instance, name, None)
    if method is None:
        return

    def _bound(func, _, args, kwargs):
        return wrapper(func, instance, args, kwargs)

    setattr(instance, name, wrapt.FunctionWrapper(method, _bound))


def _skip(hook, instance, own_hook):
    if not hook.enabled:
        return True
    # instances traced by trace_client() only report through their own hook
    return not own_hook and getattr(instance, HOOK_ATTR, None) is not None


#
# tracing functions
#
def traced_execute_command(hook, own_hook=False):
    def _traced_execute_command(func, instance, args, kwargs):
        if _skip(hook, instance, own_hook):
            return func(*args, **kwargs)

        exc_info = None
        span = hook.before_process(instance, args)
        try:
            return func(*args, **kwargs)
        except BaseException:
            exc_info = sys.exc_info()
            raise
        finally:
            hook.after_process(span, exc_info)

    return _traced_execute_command


def traced_execute_pipeline(hook, own_hook=False):
    def _traced_execute_pipeline(func, instance, args, kwargs):
        # an empty pipeline never reaches the server
        if _skip(hook, instance, own_hook) or not instance.command_stack:
            return func(*args, **kwargs)

        exc_info = None
        span = hook.before_process_pipeline(instance, instance.command_stack)
        try:
            return func(*args, **kwargs)
        except BaseException:
            exc_info = sys.exc_info()
            raise
        finally:
            hook.after_process_pipeline(span, exc_info)

    return _traced_execute_pipeline
