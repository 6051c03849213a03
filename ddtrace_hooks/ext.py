"""
Tags and placeholders reported by ddtrace-hooks that :mod:`ddtrace.ext` does not define.
"""

# bottle
HTTP_REQUEST_BODY = "http.request.body"

# redis
EMPTY_COMMAND = "(empty command)"
EMPTY_ARGS = "(empty args)"

# pymongo
MONGO_ERROR_CODE_NAME = "mongodb.error.code_name"
MONGO_ERROR_LABELS = "mongodb.error.labels"
