from .comparison import compare
from .config import GradingConfig
from .errors import ConfigurationError, GraderError, SetupError
from .execution.local_engine import LocalEngine
from .grader import grade, run_grader
from .hierarchy import TestBranch, TestLeaf, parse_test_report
from .result import ResultEnvelope, decode_envelope, encode_envelope
from .scoring import ScoreOutcome, score_hierarchy

__all__ = [
    "ConfigurationError",
    "GraderError",
    "GradingConfig",
    "LocalEngine",
    "ResultEnvelope",
    "ScoreOutcome",
    "SetupError",
    "TestBranch",
    "TestLeaf",
    "compare",
    "decode_envelope",
    "encode_envelope",
    "grade",
    "parse_test_report",
    "run_grader",
    "score_hierarchy",
]
