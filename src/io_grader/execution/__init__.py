from .engine import ExecutionEngine
from .environment import ChildEnvironment
from .local_engine import LocalEngine
from .types import TIMEOUT_MESSAGE, ExecutionRequest, ExecutionResult

__all__ = [
    "ChildEnvironment",
    "ExecutionEngine",
    "ExecutionRequest",
    "ExecutionResult",
    "LocalEngine",
    "TIMEOUT_MESSAGE",
]
