"""
Retry policies.

This package handles:
1. Classifying failures as retryable or not
2. Waiting between attempts (cancellably)
3. Re-raising the last failure once attempts are exhausted
"""

from .retry_policy import PolicyResult, RetryPolicy, default_retry_predicate

__all__ = ["PolicyResult", "RetryPolicy", "default_retry_predicate"]
