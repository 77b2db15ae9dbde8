from dataclasses import dataclass, field


DEFAULT_RETRYABLE_CODES = frozenset(
    {
        "SlowDown",
        "Throttling",
        "ThrottlingException",
        "RequestTimeout",
        "RequestTimeTooSkewed",
        "InternalError",
        "ServiceUnavailable",
        "500",
        "502",
        "503",
        "504",
    }
)


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff policy for object-store calls."""

    max_attempts: int = 3
    base_delay: float = 1.0          # seconds before the first retry
    max_delay: float = 8.0
    backoff_multiplier: float = 2.0
    retryable_codes: frozenset[str] = field(default=DEFAULT_RETRYABLE_CODES)
    retry_connection_errors: bool = True

    def delay_for(self, attempt: int) -> float:
        """Delay after the given 0-based failed attempt."""
        return min(self.base_delay * (self.backoff_multiplier ** attempt), self.max_delay)

    def is_retryable_code(self, code: str) -> bool:
        return code in self.retryable_codes


NO_RETRY = RetryPolicy(max_attempts=1)
