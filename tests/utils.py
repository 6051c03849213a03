import contextlib
import os
from typing import List  # noqa:F401
import unittest

import wrapt

import ddtrace
from ddtrace.ext import http
from ddtrace.trace import Span  # noqa:F401
from ddtrace.trace import TraceFilter
from ddtrace.trace import Tracer


def assert_span_http_status_code(span, code):
    """Assert on the span's 'http.status_code' tag"""
    tag = span.get_tag(http.STATUS_CODE)
    code = str(code)
    assert tag == code, "%r != %r" % (tag, code)


def is_wrapped(obj):
    """Whether ``obj`` is a wrapt function wrapper"""
    return isinstance(obj, (wrapt.FunctionWrapper, wrapt.BoundFunctionWrapper))


@contextlib.contextmanager
def override_env(env):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with self.override_env(dict(DD_REDIS_CMD_MAX_LENGTH="10")):
            # Your test
    """
    # Copy the full original environment
    original = dict(os.environ)

    # Update based on the passed in arguments
    os.environ.update(env)
    try:
        yield
    finally:
        # Full clear the environment out and reset back to the original
        os.environ.clear()
        os.environ.update(original)


@contextlib.contextmanager
def override_config(integration, values):
    """
    Temporarily override an integration configuration value::

        >>> with self.override_config('bottle', dict(capture_body='all')):
            # Your test
    """
    options = getattr(ddtrace.config, integration)

    original = dict((key, options.get(key)) for key in values.keys())

    options.update(values)
    try:
        yield
    finally:
        options.update(original)


@contextlib.contextmanager
def override_http_config(integration, values):
    """
    Temporarily override an integration configuration for HTTP value::

        >>> with self.override_http_config('bottle', dict(trace_query_string=True)):
            # Your test
    """
    options = getattr(ddtrace.config, integration).http

    original = {}
    for key, value in values.items():
        original[key] = getattr(options, key)
        setattr(options, key, value)

    try:
        yield
    finally:
        for key, value in original.items():
            setattr(options, key, value)


class SpanCollector(TraceFilter):
    """Trace processor keeping finished traces in memory instead of sending them to an agent"""

    def __init__(self):
        self.traces = []  # type: List[List[Span]]

    def process_trace(self, trace):
        self.traces.append(trace)
        # dropped, nothing reaches the writer
        return None


class DummyTracer(Tracer):
    """
    DummyTracer is a tracer which keeps finished traces in memory
    """

    def __init__(self):
        super(DummyTracer, self).__init__()
        self._collector = SpanCollector()
        self.configure(trace_processors=[self._collector])

    def get_spans(self):
        # type: () -> List[Span]
        return [span for trace in self._collector.traces for span in trace]

    def pop(self):
        # type: () -> List[Span]
        spans = self.get_spans()
        self._collector.traces = []
        return spans


class TestSpanContainer(object):
    """
    Helper class for a container of Spans.

    Subclasses of this class must implement a `get_spans` method::

        def get_spans(self):
            return []

    This class provides methods and assertions over a list of spans::

        class TestCases(TracerTestCase):
            def test_spans(self):
                # TODO: Create spans

                self.assert_span_count(3)

                # Grab only the `redis.command` spans
                spans = self.filter_spans(name='redis.command')
    """

    @property
    def spans(self):
        return self.get_spans()

    def get_spans(self):
        """subclass required property"""
        raise NotImplementedError

    def assert_span_count(self, count):
        """Assert this container has the expected number of spans"""
        assert len(self.spans) == count, "Span count {0} != {1}".format(len(self.spans), count)

    def assert_has_no_spans(self):
        """Assert this container does not have any spans"""
        assert len(self.spans) == 0, "Span count {0}".format(len(self.spans))

    def filter_spans(self, **kwargs):
        """
        Helper to filter current spans by attribute, e.g. ``filter_spans(name="redis.command")``

        :returns: generator for the matched spans
        """
        for span in self.spans:
            if all(getattr(span, name) == value for name, value in kwargs.items()):
                yield span

    def find_span(self, **kwargs):
        """
        Find a single span matching the provided attributes.

        :returns: The first matching span
        """
        span = next(self.filter_spans(**kwargs), None)
        assert span is not None, "No span found for filter {0!r}, have {1} spans".format(kwargs, len(self.spans))
        return span


class TracerSpanContainer(TestSpanContainer):
    """
    A class to wrap a :class:`tests.utils.DummyTracer` with a
    :class:`tests.utils.TestSpanContainer` to use in tests
    """

    def __init__(self, tracer):
        self.tracer = tracer
        super(TracerSpanContainer, self).__init__()

    def get_spans(self):
        return self.tracer.get_spans()

    def reset(self):
        """Helper to reset the existing list of spans created"""
        self.tracer.pop()


class TracerTestCase(TestSpanContainer, unittest.TestCase):
    """
    TracerTestCase is a base test case for when you need access to a dummy tracer and span assertions
    """

    override_env = staticmethod(override_env)
    override_config = staticmethod(override_config)
    override_http_config = staticmethod(override_http_config)

    def setUp(self):
        """Before each test case, setup a dummy tracer to use"""
        self.tracer = DummyTracer()

        super(TracerTestCase, self).setUp()

    def tearDown(self):
        """After each test case, reset and remove the dummy tracer"""
        super(TracerTestCase, self).tearDown()

        self.reset()
        self.tracer.context_provider.activate(None)
        delattr(self, "tracer")

    def get_spans(self):
        """Required subclass method for TestSpanContainer"""
        return self.tracer.get_spans()

    def pop_spans(self):
        # type: () -> List[Span]
        return self.tracer.pop()

    def reset(self):
        """Helper to reset the existing list of spans created"""
        self.tracer.pop()
