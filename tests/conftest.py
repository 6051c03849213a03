import pytest

from tests.utils import DummyTracer
from tests.utils import TracerSpanContainer


@pytest.fixture
def tracer():
    return DummyTracer()


@pytest.fixture
def test_spans(tracer):
    container = TracerSpanContainer(tracer)
    yield container
    container.reset()


@pytest.fixture(autouse=True)
def clear_context_after_every_test(tracer):
    try:
        yield
    finally:
        tracer.context_provider.activate(None)
