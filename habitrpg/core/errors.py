"""
Failure categories shared by all use cases.

Expected failures never escape a use case as exceptions: they are returned
as results with success=False, a message and an ErrorCategory.
OperationRejected is only used inside a transaction block to abort it
(Tortoise rolls back on any exception leaving in_transaction()).
"""

from enum import Enum


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"


class OperationRejected(Exception):
    """Expected business failure raised inside a transaction."""

    def __init__(self, message: str, category: ErrorCategory):
        super().__init__(message)
        self.message = message
        self.category = category
