from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import List  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Sequence  # noqa:F401
from typing import Tuple  # noqa:F401

from ddtrace import config
from ddtrace.constants import SPAN_KIND
from ddtrace.contrib.internal.redis_utils import _extract_conn_tags
from ddtrace.ext import SpanKind
from ddtrace.ext import SpanTypes
from ddtrace.ext import db
from ddtrace.ext import redis as redisx
from ddtrace.internal.constants import COMPONENT
import ddtrace.trace

from ...ext import EMPTY_ARGS
from ...ext import EMPTY_COMMAND
from ...internal.formats import stringify_arg
from ...internal.formats import truncate


def get_cmd_details(args, cmd_max_len=None):
    # type: (Sequence[Any], Optional[int]) -> Tuple[str, str]
    """Return the ``(name, statement)`` pair describing a redis command.

    The name is the upper-cased command, the statement is every argument
    joined with a space, the command itself upper-cased.
    """
    parts = []  # type: List[str]
    for i, arg in enumerate(args):
        text = stringify_arg(arg)
        if i == 0:
            text = text.upper()
        parts.append(text)

    name = parts[0] if parts else ""
    if not name:
        name = EMPTY_COMMAND

    statement = " ".join(parts).strip()
    if not statement and name != "PING":
        statement = EMPTY_ARGS

    return name, truncate(statement, cmd_max_len)


def _command_args(command):
    # redis.cluster.ClusterPipeline stacks PipelineCommand objects,
    # the other pipelines stack (args, options) tuples
    args = getattr(command, "args", None)
    if args is None:
        args = command[0]
    return args


def _connection_tags(instance):
    # type: (Any) -> Dict[str, Any]
    pool = getattr(instance, "connection_pool", None)
    if pool is None:
        return {}
    return _extract_conn_tags(getattr(pool, "connection_kwargs", {}))


class TracingHook(object):
    """Reports redis commands and pipelines as spans.

    Every ``before_*`` call opens and activates a span which the matching
    ``after_*`` call must close::

        hook = TracingHook(service="sessions")
        span = hook.before_process(client, ("GET", "key"))
        try:
            result = call()
        finally:
            hook.after_process(span, sys.exc_info())
    """

    def __init__(self, tracer=None, service=None):
        self._tracer = tracer
        self._service = service

    @property
    def tracer(self):
        return self._tracer or ddtrace.trace.tracer

    @property
    def service(self):
        return self._service or config.redis.service or config.redis.get("_default_service")

    @property
    def enabled(self):
        # type: () -> bool
        return bool(self.tracer.enabled)

    def _start_span(self, resource, instance):
        span = self.tracer.trace(
            redisx.CMD,
            service=self.service,
            resource=resource,
            span_type=SpanTypes.REDIS,
        )
        span.set_tag(SPAN_KIND, SpanKind.CLIENT)
        span.set_tag(COMPONENT, config.redis.integration_name)
        span.set_tag(db.SYSTEM, redisx.APP)
        for key, value in _connection_tags(instance).items():
            span.set_tag(key, value)
        return span

    def before_process(self, instance, args):
        """Open the span for a single command"""
        name, statement = get_cmd_details(args, config.redis.get("cmd_max_length"))
        span = self._start_span(name, instance)
        span.set_tag(redisx.RAWCMD, statement)
        span.set_metric(redisx.ARGS_LEN, len(args))
        return span

    def after_process(self, span, exc_info=None):
        """Close the span opened by :meth:`before_process`"""
        self._finish(span, exc_info)

    def before_process_pipeline(self, instance, command_stack):
        """Open a single span covering every command queued in a pipeline"""
        names = []
        statements = []
        for command in command_stack:
            name, statement = get_cmd_details(_command_args(command))
            names.append(name)
            statements.append(statement)

        span = self._start_span(", ".join(names), instance)
        span.set_tag(redisx.RAWCMD, truncate(", ".join(statements), config.redis.get("cmd_max_length")))
        span.set_metric(redisx.PIPELINE_LEN, len(command_stack))
        return span

    def after_process_pipeline(self, span, exc_info=None):
        """Close the span opened by :meth:`before_process_pipeline`"""
        self._finish(span, exc_info)

    @staticmethod
    def _finish(span, exc_info):
        try:
            if exc_info is not None and exc_info[0] is not None:
                span.set_exc_info(*exc_info)
        finally:
            span.finish()
