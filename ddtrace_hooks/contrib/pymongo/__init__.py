"""
The pymongo integration reports every command pymongo sends to MongoDB as a
span, using pymongo's command monitoring API.

Spans are named ``pymongo.cmd``; the resource is the command name, prefixed
by the collection for the commands that target one (``songs.find``). The
command itself, rendered as relaxed MongoDB Extended JSON, is reported in the
``mongodb.query`` tag.

Replies the server sends back with ``errmsg``, ``writeErrors`` or
``writeConcernError`` mark the span as failed even though pymongo reports the
command as succeeded.


Enabling
~~~~~~~~

Trace a single client::

    import pymongo
    from ddtrace_hooks.contrib.pymongo import command_monitor

    client = pymongo.MongoClient(event_listeners=[command_monitor(service="users-db")])

Or trace every client created after the call::

    from ddtrace_hooks import patch
    patch(pymongo=True)


Global Configuration
~~~~~~~~~~~~~~~~~~~~

.. py:data:: ddtrace.config.pymongo["service"]

   The service name reported for MongoDB spans.

   This option can also be set with the ``DD_PYMONGO_SERVICE`` environment
   variable.

   Default: ``"pymongo"``
"""
from .monitor import CommandTracer
from .monitor import command_monitor
from .patch import get_version
from .patch import patch
from .patch import unpatch


__all__ = ["CommandTracer", "command_monitor", "get_version", "patch", "unpatch"]
