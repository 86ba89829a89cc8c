"""
Exception hierarchy for the delegate-vp toolkit.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (RPC, network)
- NonRetryableException: Permanent failures that won't benefit from retry (bad data)
- ConfigurationException: Startup/config errors that prevent operation

Domain exceptions:
- DataSourceError -> RetryableException (page or chunk RPC failures)
- ContractViolationError -> NonRetryableException (malformed contract responses)
- InvalidInputError -> NonRetryableException (rejected before any network call)

The retryable/non-retryable split only classifies failures. The pipeline
itself never retries; a caller above it may.
"""

from typing import Any, Dict, Optional


class RetryableException(Exception):
    """
    Base class for exceptions that may succeed on retry.

    Use for transient failures like:
    - RPC timeouts
    - Rate limiting
    - Temporary network issues
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})


class NonRetryableException(Exception):
    """
    Base class for exceptions that won't benefit from retry.

    Use for permanent failures like:
    - Invalid input data
    - Malformed responses
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})


class ConfigurationException(NonRetryableException):
    """
    Exception for configuration/startup errors.

    Use when:
    - Required environment variables are malformed
    - The RPC URL cannot be used
    - Packaged resources (ABIs) are missing
    """

    pass


class DataSourceError(RetryableException):
    """
    An underlying network/RPC failure while fetching a page or a chunk.

    Aborts the enclosing enumeration or fetch; never retried internally.
    """

    pass


class ContractViolationError(NonRetryableException):
    """
    The contract returned a response that does not match the request
    (wrong length, wrong order, oversized page, negative power).
    """

    pass


class InvalidInputError(NonRetryableException, ValueError):
    """
    Invalid delegate address or a zero page/chunk/concurrency size.

    Raised before any network call is made. Also a ValueError so argparse
    type converters report it as a usage error.
    """

    pass
