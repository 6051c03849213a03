import sys

from .patch import _skip


def traced_async_execute_command(hook, own_hook=False):
    async def _traced_async_execute_command(func, instance, args, kwargs):
        if _skip(hook, instance, own_hook):
            return await func(*args, **kwargs)

        exc_info = None
        span = hook.before_process(instance, args)
        try:
            return await func(*args, **kwargs)
        except BaseException:
            exc_info = sys.exc_info()
            raise
        finally:
            hook.after_process(span, exc_info)

    return _traced_async_execute_command


def traced_async_execute_pipeline(hook, own_hook=False):
    async def _traced_async_execute_pipeline(func, instance, args, kwargs):
        if _skip(hook, instance, own_hook) or not instance.command_stack:
            return await func(*args, **kwargs)

        exc_info = None
        span = hook.before_process_pipeline(instance, instance.command_stack)
        try:
            return await func(*args, **kwargs)
        except BaseException:
            exc_info = sys.exc_info()
            raise
        finally:
            hook.after_process_pipeline(span, exc_info)

    return _traced_async_execute_pipeline
