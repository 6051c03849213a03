"""
The redis integration reports every command sent through ``redis-py`` as a
span. Pipelines are reported as a single span named after the queued commands,
in call order, e.g. ``"SET, INCR, GET"``.


Enabling
~~~~~~~~

Instrument every client, synchronous and ``redis.asyncio``::

    from ddtrace_hooks import patch
    patch(redis=True)

Or instrument a single client, leaving the ``redis.Redis`` class untouched::

    import redis
    from ddtrace_hooks.contrib.redis import TracingHook
    from ddtrace_hooks.contrib.redis import trace_client

    client = trace_client(redis.Redis(), TracingHook(service="sessions"))


Global Configuration
~~~~~~~~~~~~~~~~~~~~

.. py:data:: ddtrace.config.redis["service"]

   The service name reported for redis spans.

   This option can also be set with the ``DD_REDIS_SERVICE`` environment
   variable.

   Default: ``"redis"``


.. py:data:: ddtrace.config.redis["cmd_max_length"]

   Max allowable size for the ``redis.raw_command`` span tag.
   Anything beyond the max length is replaced with ``"..."``.

   This option can also be set with the ``DD_REDIS_CMD_MAX_LENGTH`` environment
   variable.

   Default: ``1000``
"""
from .hook import TracingHook
from .hook import get_cmd_details
from .patch import get_version
from .patch import patch
from .patch import trace_client
from .patch import unpatch


__all__ = ["TracingHook", "get_cmd_details", "get_version", "patch", "trace_client", "unpatch"]
