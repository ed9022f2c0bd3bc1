"""
Read retry policy.

Every read against the contract goes through one ``RetryPolicy`` so that
transient RPC failures (timeouts, dropped connections, rate limits) are
retried the same way everywhere. Writes are never retried.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from web3.exceptions import ABIFunctionNotFound, BadFunctionCallOutput, ContractLogicError

from marketplace.config import Settings
from marketplace.errors import MarketplaceError, NotFoundError
from marketplace.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def is_transient(exc: BaseException) -> bool:
    """Contract reverts and classified errors will not succeed on retry."""
    permanent = (MarketplaceError, NotFoundError, ContractLogicError, BadFunctionCallOutput, ABIFunctionNotFound)
    return not isinstance(exc, permanent)


def _log_retry(retry_state) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(f"Read attempt {retry_state.attempt_number} failed: {exc}; retrying")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay: float = 1.0
    max_delay: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.read_retry_attempts,
            delay=settings.read_retry_delay,
            max_delay=settings.read_retry_max_delay,
        )

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.delay, min=self.delay, max=self.max_delay),
            retry=retry_if_exception(is_transient),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def run(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``func(*args, **kwargs)`` under this policy."""
        return await self.retrying()(func, *args, **kwargs)
