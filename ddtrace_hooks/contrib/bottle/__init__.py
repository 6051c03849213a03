"""
The bottle integration traces the Bottle web framework. Add the following
plugin to your app::

    import bottle
    from ddtrace_hooks.contrib.bottle import TracePlugin

    app = bottle.Bottle()
    plugin = TracePlugin(service="my-web-app")
    app.install(plugin)

Or install the plugin in every application created afterwards::

    from ddtrace_hooks import patch
    patch(bottle=True)

Each routed request is reported as a ``bottle.request`` span whose resource is
the request method followed by the route pattern, e.g. ``GET /users/<id>``.
An exception escaping the route callback is recorded on the span, which is
reported with a ``500`` status code; bottle then renders the error response.

:ref:`All HTTP tags <http-tagging>` are supported for this integration.

Configuration
~~~~~~~~~~~~~

.. py:data:: ddtrace.config.bottle['distributed_tracing']

   Whether to parse distributed tracing headers from requests received by your bottle app.

   Can also be enabled with the ``DD_BOTTLE_DISTRIBUTED_TRACING`` environment variable.

   Default: ``True``

.. py:data:: ddtrace.config.bottle['capture_body']

   When to report the request body in the ``http.request.body`` tag: ``off``,
   ``errors`` (requests answered with a 5xx status), ``transactions`` or ``all``.

   Can also be set with the ``DD_BOTTLE_CAPTURE_BODY`` environment variable.

   Default: ``off``

.. py:data:: ddtrace.config.bottle['body_max_length']

   Number of bytes of the request body reported when it is captured.

   Can also be set with the ``DD_BOTTLE_BODY_MAX_LENGTH`` environment variable.

   Default: ``1024``


Example::

    from ddtrace import config

    # Enable distributed tracing
    config.bottle['distributed_tracing'] = True

    # Override both options for a single application only
    app.install(TracePlugin(distributed_tracing=False, capture_body="errors"))

"""
from .patch import get_version
from .patch import patch
from .patch import unpatch
from .trace import TracePlugin


__all__ = ["TracePlugin", "get_version", "patch", "unpatch"]
