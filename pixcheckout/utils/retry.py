import asyncio
from typing import Awaitable, Callable, TypeVar

from pixcheckout.utils.logger import logger

T = TypeVar("T")


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay: float = 1.0,
) -> T:
    """
    Executa `operation` até `max_retries` vezes com backoff exponencial
    (delay * 2**tentativa). Relança o último erro quando todas falham.
    """
    if max_retries < 1:
        raise ValueError("max_retries deve ser >= 1")

    last_error: Exception | None = None
    for tentativa in range(max_retries):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            logger.warning(f"[Retry] Tentativa {tentativa + 1}/{max_retries} falhou: {e}")
            if tentativa < max_retries - 1:
                await asyncio.sleep(delay * (2 ** tentativa))

    raise last_error
