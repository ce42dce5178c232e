"""Operation result types and status enums.

Standardized result types for calls to external collaborators, including
the status enum, the result dataclass and exception classifiers.
"""

from infrastructure.operations.classifiers import (
    classify_aws_error,
    classify_http_error,
    classify_smtp_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
    "classify_smtp_error",
    "classify_aws_error",
]
