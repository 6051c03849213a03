"""Helpers reading pymongo commands and server replies."""
from collections.abc import Mapping
from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401


# commands whose first value is the name of the collection they act on
COLLECTION_COMMANDS = frozenset(
    [
        # aggregation
        "aggregate",
        "count",
        "distinct",
        "mapReduce",
        # geospatial
        "geoNear",
        "geoSearch",
        # query and write operations
        "delete",
        "find",
        "findAndModify",
        "insert",
        "parallelCollectionScan",
        "update",
        # administration
        "compact",
        "convertToCapped",
        "create",
        "createIndexes",
        "drop",
        "dropIndexes",
        "killCursors",
        "listIndexes",
        "reIndex",
        # diagnostic
        "collStats",
    ]
)


def collection_name(command_name, command):
    # type: (str, Mapping[str, Any]) -> Optional[str]
    """Return the collection targeted by ``command``, if it names one"""
    if command_name in COLLECTION_COMMANDS:
        key = command_name
    elif command_name == "getMore":
        key = "collection"
    else:
        return None

    try:
        value = command.get(key)
    except Exception:
        return None
    return value if isinstance(value, str) else None


def reply_error(reply):
    # type: (Optional[Mapping[str, Any]]) -> Optional[str]
    """Return the error message carried by an otherwise successful reply.

    The server reports some failures (``ok: 1`` with ``writeErrors`` on bulk
    writes, for instance) in replies that pymongo still considers succeeded.
    Returns ``None`` for a clean reply; an empty ``errmsg`` yields ``""``.
    """
    if not reply:
        return None

    found = None
    for key in reply:
        if key == "errmsg":
            message = reply[key]
            if isinstance(message, str):
                if message:
                    return message
                # an empty errmsg still flags the reply, a later field may say more
                found = message
        elif key == "writeErrors":
            message = _write_errors(reply[key])
            if message:
                return message
        elif key == "writeConcernError":
            message = _errmsg(reply[key])
            if message:
                return message
    return found


def failure_message(failure):
    # type: (Any) -> str
    message = _errmsg(failure)
    if message:
        return message
    return str(failure)


def _write_errors(write_errors):
    if not isinstance(write_errors, (list, tuple)):
        return None
    messages = [m for m in (_errmsg(error) for error in write_errors) if m]
    return ", ".join(messages) or None


def _errmsg(document):
    if not isinstance(document, Mapping):
        return None
    message = document.get("errmsg")
    if isinstance(message, str) and message:
        return message
    return None
