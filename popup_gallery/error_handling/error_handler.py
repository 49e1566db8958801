"""
Error handler with retry logic for listing sources.

Implements exponential backoff, timeout escalation, and recovery suggestions
for failed listing fetches.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple, Type

from popup_gallery.error_handling.errors import ListingSourceError, SourceUnavailable


# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior with exponential backoff.

    Attributes:
        max_retries: Maximum number of attempts
        initial_timeout_seconds: Request timeout used by the first attempt
        timeout_multiplier: Multiplier for timeout escalation on each retry
        backoff_base_seconds: Delay before the first retry, doubled afterwards
    """
    max_retries: int = 3
    initial_timeout_seconds: float = 10.0
    timeout_multiplier: float = 1.5
    backoff_base_seconds: float = 2.0

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")

    def get_timeout(self, attempt: int, initial: Optional[float] = None) -> float:
        """
        Calculate timeout for a specific retry attempt.

        timeout = initial * (timeout_multiplier ^ attempt)

        Args:
            attempt: The retry attempt number (0-indexed)
            initial: Timeout for attempt 0, defaults to initial_timeout_seconds

        Returns:
            Timeout value in seconds for the given attempt
        """
        base = self.initial_timeout_seconds if initial is None else initial
        return base * (self.timeout_multiplier ** attempt)

    def get_backoff_delay(self, attempt: int) -> float:
        """
        Calculate backoff delay before retry attempt.

        delay = backoff_base_seconds * (2 ^ attempt)

        Args:
            attempt: The retry attempt number (0-indexed)

        Returns:
            Delay in seconds before the retry attempt
        """
        return self.backoff_base_seconds * (2 ** attempt)


class ErrorHandler:
    """
    Error handler with retry logic and diagnostic capabilities.

    Retries transient source failures with escalating timeouts and exponential
    backoff. Anything that is not retryable propagates on the first attempt.

    Attributes:
        config: Retry configuration
        retryable: Exception types that trigger another attempt
    """

    def __init__(
        self,
        max_retries: int = 3,
        timeout_multiplier: float = 1.5,
        backoff_base_seconds: float = 2.0,
        initial_timeout_seconds: float = 10.0,
        retryable: Tuple[Type[BaseException], ...] = (SourceUnavailable,),
    ):
        """
        Initialize error handler with retry configuration.

        Args:
            max_retries: Maximum number of attempts (default: 3)
            timeout_multiplier: Multiplier for timeout escalation (default: 1.5)
            backoff_base_seconds: Delay before the first retry (default: 2.0)
            initial_timeout_seconds: Timeout used when the caller passes none
            retryable: Exception types worth retrying
        """
        self.config = RetryConfig(
            max_retries=max_retries,
            initial_timeout_seconds=initial_timeout_seconds,
            timeout_multiplier=timeout_multiplier,
            backoff_base_seconds=backoff_base_seconds,
        )
        self.retryable = retryable

    @classmethod
    def from_config(cls, config: RetryConfig) -> 'ErrorHandler':
        return cls(
            max_retries=config.max_retries,
            timeout_multiplier=config.timeout_multiplier,
            backoff_base_seconds=config.backoff_base_seconds,
            initial_timeout_seconds=config.initial_timeout_seconds,
        )

    async def retry_with_backoff(
        self,
        operation: Callable,
        *args,
        **kwargs
    ) -> Any:
        """
        Execute operation with exponential backoff retry logic.

        When the operation is called with a ``timeout_seconds`` keyword, each
        attempt receives an escalated timeout derived from the given value.

        Args:
            operation: Async callable to execute
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            Result from successful operation execution

        Raises:
            Exception: The last retryable exception once all attempts are
                exhausted, or any non-retryable exception immediately
        """
        name = getattr(operation, '__name__', repr(operation))
        initial_timeout = kwargs.get('timeout_seconds')
        last_exception = None

        for attempt in range(self.config.max_retries):
            try:
                logger.info(
                    f"Attempt {attempt + 1}/{self.config.max_retries} for operation {name}"
                )

                if 'timeout_seconds' in kwargs:
                    kwargs['timeout_seconds'] = self.config.get_timeout(attempt, initial_timeout)

                result = await operation(*args, **kwargs)

                logger.info(f"Operation {name} succeeded on attempt {attempt + 1}")
                return result

            except self.retryable as e:
                last_exception = e

                self._log_error(
                    operation_name=name,
                    attempt=attempt + 1,
                    max_attempts=self.config.max_retries,
                    error=e,
                    kwargs=kwargs
                )

                if attempt == self.config.max_retries - 1:
                    logger.error(
                        f"Operation {name} failed after {self.config.max_retries} attempts. "
                        f"Final error: {str(e)}"
                    )
                    break

                backoff_delay = self.config.get_backoff_delay(attempt)
                logger.info(f"Waiting {backoff_delay:.1f}s before retry...")
                await asyncio.sleep(backoff_delay)

        raise last_exception

    def describe_failure(self, error: Exception) -> Dict[str, Any]:
        """
        Provide recovery suggestions for a failed listing fetch.

        Args:
            error: The exception that ended the load

        Returns:
            Dictionary with error analysis and recovery suggestions
        """
        reason = getattr(error, 'reason', str(error)).lower()
        source = getattr(error, 'source', None)

        suggestions = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'timestamp': datetime.now().isoformat(),
            'recovery_suggestions': []
        }

        if 'timed out' in reason or 'timeout' in reason:
            suggestions['recovery_suggestions'].extend([
                'Increase REQUEST_TIMEOUT_SECONDS',
                'Check your internet connection speed',
            ])
        elif source == 'http':
            suggestions['recovery_suggestions'].extend([
                'Verify LISTINGS_URL points at a reachable listings endpoint',
                'Check that the listings service is running and returns JSON',
            ])
        elif source == 'file':
            suggestions['recovery_suggestions'].extend([
                'Verify LISTINGS_PATH points at a readable JSON file',
                'Check that the file holds a JSON array of listings',
            ])
        elif isinstance(error, ListingSourceError):
            suggestions['recovery_suggestions'].append('Retry the load')
        else:
            suggestions['recovery_suggestions'].append('Run again with --verbose for details')

        logger.info(f"Recovery suggestions: {suggestions['recovery_suggestions']}")

        return suggestions

    def _log_error(
        self,
        operation_name: str,
        attempt: int,
        max_attempts: int,
        error: BaseException,
        kwargs: dict
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            attempt: Current attempt number
            max_attempts: Maximum number of attempts
            error: The exception that occurred
            kwargs: Keyword arguments passed to the operation
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'attempt': f"{attempt}/{max_attempts}",
            'error_type': type(error).__name__,
            'error_message': str(error),
            'kwargs': {k: str(v) for k, v in kwargs.items()} if kwargs else {}
        }

        logger.warning(
            f"Operation failed: {operation_name} | "
            f"Attempt: {attempt}/{max_attempts} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")
