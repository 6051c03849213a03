from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Text  # noqa:F401

from ddtrace.internal.compat import ensure_text
from ddtrace.internal.logger import get_logger
from ddtrace.internal.utils.formats import CMD_MAX_LEN
from ddtrace.internal.utils.formats import VALUE_MAX_LEN
from ddtrace.internal.utils.formats import VALUE_PLACEHOLDER
from ddtrace.internal.utils.formats import VALUE_TOO_LONG_MARK


log = get_logger(__name__)


def stringify_arg(arg, value_max_len=VALUE_MAX_LEN):
    # type: (Any, int) -> Text
    """Render a single command argument as text, truncated to ``value_max_len``"""
    try:
        if isinstance(arg, (bytes, str)):
            text = ensure_text(arg, errors="backslashreplace")
        elif isinstance(arg, memoryview):
            text = ensure_text(arg.tobytes(), errors="backslashreplace")
        else:
            text = str(arg)
    except Exception:
        log.debug("unable to stringify redis argument", exc_info=True)
        return VALUE_PLACEHOLDER

    if len(text) > value_max_len:
        text = text[:value_max_len] + VALUE_TOO_LONG_MARK
    return text


def truncate(text, max_len=CMD_MAX_LEN):
    # type: (Text, Optional[int]) -> Text
    if max_len is None or len(text) <= max_len:
        return text
    return text[:max_len] + VALUE_TOO_LONG_MARK


def to_int(value, default):
    # type: (Optional[str], int) -> int
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default
