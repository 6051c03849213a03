import threading
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Tuple  # noqa:F401

from bson import json_util
from pymongo import monitoring

from ddtrace import config
from ddtrace.constants import ERROR_MSG
from ddtrace.constants import ERROR_TYPE
from ddtrace.constants import SPAN_KIND
from ddtrace.ext import SpanKind
from ddtrace.ext import SpanTypes
from ddtrace.ext import db
from ddtrace.ext import mongo as mongox
from ddtrace.ext import net as netx
from ddtrace.internal.constants import COMPONENT
from ddtrace.internal.logger import get_logger
import ddtrace.trace

from ...ext import MONGO_ERROR_CODE_NAME
from ...ext import MONGO_ERROR_LABELS
from .reply import collection_name
from .reply import failure_message
from .reply import reply_error


log = get_logger(__name__)

config._add("pymongo", dict(_default_service="pymongo"))

SPAN_NAME = "pymongo.cmd"
OPERATION_FAILURE = "pymongo.errors.OperationFailure"


class CommandTracer(monitoring.CommandListener):
    """Reports every command pymongo sends as a span.

    Register it on a single client::

        client = pymongo.MongoClient(event_listeners=[CommandTracer(service="users-db")])

    or for every client created afterwards with :func:`ddtrace_hooks.contrib.pymongo.patch`.

    The span opened when a command starts is closed when the matching
    ``succeeded`` or ``failed`` event arrives. pymongo does not let listeners
    attach data to a command, so in-flight spans are kept in a map keyed by
    ``(connection_id, request_id)``.
    """

    def __init__(self, tracer=None, service=None, json_options=None):
        self._tracer = tracer
        self._service = service
        self._json_options = json_options or json_util.RELAXED_JSON_OPTIONS
        self.enabled = True

        self._lock = threading.Lock()
        self._spans = {}  # type: Dict[Tuple[Any, int], ddtrace.trace.Span]

    @property
    def tracer(self):
        return self._tracer or ddtrace.trace.tracer

    @property
    def service(self):
        return self._service or config.pymongo.service or config.pymongo.get("_default_service")

    def started(self, event):
        if not self.enabled or not self.tracer.enabled:
            return

        resource = event.command_name
        collection = collection_name(event.command_name, event.command)
        if collection:
            resource = "%s.%s" % (collection, resource)

        span = self.tracer.start_span(
            SPAN_NAME,
            child_of=self.tracer.context_provider.active(),
            service=self.service,
            resource=resource,
            span_type=SpanTypes.MONGODB,
            activate=False,
        )
        span.set_tag(SPAN_KIND, SpanKind.CLIENT)
        span.set_tag(COMPONENT, config.pymongo.integration_name)
        span.set_tag(db.SYSTEM, mongox.SERVICE)
        if event.database_name:
            span.set_tag(mongox.DB, event.database_name)
        if collection:
            span.set_tag(mongox.COLLECTION, collection)

        statement = self._encode(event.command)
        if statement is not None:
            span.set_tag(mongox.QUERY, statement)
        _set_address_tags(span, event.connection_id)

        key = (event.connection_id, event.request_id)
        with self._lock:
            self._spans[key] = span

    def succeeded(self, event):
        message = reply_error(event.reply)
        if message is not None:
            self._finished(event, OPERATION_FAILURE, message)
        else:
            self._finished(event)

    def failed(self, event):
        failure = event.failure
        error_type = OPERATION_FAILURE
        tags = {}
        if isinstance(failure, dict):
            error_type = failure.get("errtype") or error_type
            if failure.get("codeName"):
                tags[MONGO_ERROR_CODE_NAME] = failure["codeName"]
            if failure.get("errorLabels"):
                tags[MONGO_ERROR_LABELS] = ",".join(failure["errorLabels"])
        self._finished(event, error_type, failure_message(failure), tags)

    def _finished(self, event, error_type=None, message=None, tags=None):
        key = (event.connection_id, event.request_id)
        with self._lock:
            span = self._spans.pop(key, None)
        if span is None:
            return

        try:
            if message is not None:
                span.error = 1
                span.set_tag(ERROR_TYPE, error_type)
                span.set_tag(ERROR_MSG, message)
                for tag, value in (tags or {}).items():
                    span.set_tag(tag, value)
        finally:
            span.finish()

    def _encode(self, command):
        # type: (Any) -> Optional[str]
        """Render ``command`` as MongoDB Extended JSON"""
        if not command:
            return None
        try:
            return json_util.dumps(command, json_options=self._json_options)
        except Exception:
            log.debug("unable to encode mongodb command", exc_info=True)
            return None


def command_monitor(tracer=None, service=None, json_options=None):
    """Return a new :class:`CommandTracer`"""
    return CommandTracer(tracer=tracer, service=service, json_options=json_options)


def _set_address_tags(span, address):
    if not isinstance(address, tuple) or len(address) != 2:
        return
    span.set_tag(netx.TARGET_HOST, str(address[0]))
    span.set_tag(netx.SERVER_ADDRESS, str(address[0]))
    span.set_tag(netx.TARGET_PORT, address[1])
