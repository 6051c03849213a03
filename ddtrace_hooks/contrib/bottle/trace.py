import sys

from bottle import HTTPError
from bottle import HTTPResponse
from bottle import request
from bottle import response

from ddtrace import config
from ddtrace.constants import SPAN_KIND
from ddtrace.contrib import trace_utils
from ddtrace.ext import SpanKind
from ddtrace.ext import SpanTypes
from ddtrace.ext import http
from ddtrace.internal.compat import ensure_text
from ddtrace.internal.constants import COMPONENT
from ddtrace.internal.logger import get_logger
from ddtrace.internal.utils.formats import asbool
import ddtrace.trace

from ...ext import HTTP_REQUEST_BODY


log = get_logger(__name__)

CAPTURE_BODY_MODES = ("off", "errors", "transactions", "all")


class TracePlugin(object):
    """Bottle plugin reporting one ``bottle.request`` span per routed request::

        app = bottle.Bottle()
        app.install(TracePlugin(service="my-web-app"))
    """

    name = "trace"
    api = 2

    def __init__(self, service=None, tracer=None, distributed_tracing=None, capture_body=None):
        self.service = service or config._get_service(default="bottle")
        self.tracer = tracer or ddtrace.trace.tracer
        self._distributed_tracing = None
        self._capture_body = None
        if distributed_tracing is not None:
            self.distributed_tracing = distributed_tracing
        if capture_body is not None:
            self.capture_body = capture_body

    # options left unset on the plugin follow config.bottle

    @property
    def distributed_tracing(self):
        if self._distributed_tracing is None:
            return config.bottle.distributed_tracing
        return self._distributed_tracing

    @distributed_tracing.setter
    def distributed_tracing(self, distributed_tracing):
        self._distributed_tracing = asbool(distributed_tracing)

    @property
    def capture_body(self):
        if self._capture_body is None:
            return config.bottle.capture_body
        return self._capture_body

    @capture_body.setter
    def capture_body(self, mode):
        if mode not in CAPTURE_BODY_MODES:
            raise ValueError("capture_body must be one of %s, not %r" % (", ".join(CAPTURE_BODY_MODES), mode))
        self._capture_body = mode

    def apply(self, callback, route):
        def wrapped(*args, **kwargs):
            rule = getattr(route, "rule", None)
            # routes registered without a pattern fall back to the requested path
            resource = "{} {}".format(request.method, rule or request.path)
            return self.trace_and_serve(callback, args, kwargs, resource, rule)

        return wrapped

    def trace_and_serve(self, callback, args, kwargs, resource, route=None):
        """Call ``callback(*args, **kwargs)`` inside a span named by ``resource``"""
        if not self.tracer or not self.tracer.enabled:
            return callback(*args, **kwargs)

        trace_utils.activate_distributed_headers(
            self.tracer,
            int_config=config.bottle,
            request_headers=request.headers,
            override=self._distributed_tracing,
        )

        s = self.tracer.trace(
            "bottle.request",
            service=self.service,
            resource=resource,
            span_type=SpanTypes.WEB,
        )
        s.set_tag(SPAN_KIND, SpanKind.SERVER)
        s.set_tag(COMPONENT, config.bottle.integration_name)
        if route:
            s.set_tag(http.ROUTE, route)

        code = None
        result = None
        try:
            result = callback(*args, **kwargs)
            return result
        except (HTTPError, HTTPResponse) as e:
            # abort() and redirect() interrupt the callback with a response,
            # its status code is the one sent
            code = e.status_code
            raise
        except Exception:
            # bottle's catch-all turns the exception into a 500 response
            code = 500
            s.set_exc_info(*sys.exc_info())
            raise
        finally:
            try:
                self._finish_request(s, result, code)
            except Exception:
                log.debug("unable to set http metadata on %r", s, exc_info=True)
            s.finish()

    def _finish_request(self, s, result, code):
        if isinstance(result, HTTPResponse):
            response_code = result.status_code
        elif code:
            response_code = code
        else:
            # bottle local response has not yet been updated so this
            # will be default
            response_code = response.status_code

        if response_code >= 500:
            s.error = 1

        trace_utils.set_http_meta(
            s,
            config.bottle,
            method=request.method,
            url=request.urlparts._replace(query="").geturl(),
            status_code=response_code,
            query=request.query_string,
            request_headers=request.headers,
            response_headers=response.headers,
        )

        if _should_capture_body(self.capture_body, response_code >= 500):
            _set_request_body(s, config.bottle.body_max_length)


def _should_capture_body(mode, errored):
    if mode in ("transactions", "all"):
        return True
    return mode == "errors" and errored


def _set_request_body(span, max_length):
    try:
        body = request.body.read(max_length)
    except Exception:
        log.debug("unable to read bottle request body", exc_info=True)
        return
    if body:
        span.set_tag(HTTP_REQUEST_BODY, ensure_text(body, errors="replace"))
