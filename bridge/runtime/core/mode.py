# Where: bridge/runtime/core/mode.py
# What: Decide once whether the process runs inside the Lambda execution environment.
# Why: Callers pick the Runtime Loop or a local server from a value that never changes.
import functools
import os

# Set by the Lambda service only inside the hosted execution environment.
MODE_INDICATOR_ENV = "AWS_LAMBDA_RUNTIME_API"


@functools.lru_cache(maxsize=None)
def running_in_lambda() -> bool:
    """Evaluated on first call and cached for the lifetime of the process."""
    return bool(os.environ.get(MODE_INDICATOR_ENV, "").strip())
