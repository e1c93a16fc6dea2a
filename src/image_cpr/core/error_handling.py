# src/image_cpr/core/error_handling.py

import functools
import time

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ImageCprError, StorageError
from .logging_config import DEFAULT_LOGGER_NAME, get_logger

RETRYABLE_S3_ERROR_CODES = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "SlowDown",
    "RequestTimeout",
    "InternalError",
    "ServiceUnavailable",
)


def _logger_for(func):
    return get_logger(f"{DEFAULT_LOGGER_NAME}.{func.__name__}")


def with_error_handling(func):
    """
    Decorator that turns storage failures into StorageError.

    botocore and filesystem errors are logged with their traceback and
    re-raised as StorageError; pipeline errors pass through untouched.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = _logger_for(func)
        try:
            return func(*args, **kwargs)
        except ImageCprError:
            raise
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
            raise StorageError(f"Storage operation {func.__name__} failed: {e}") from e
    return wrapper


def _is_retryable(error: StorageError) -> bool:
    cause = error.__cause__
    if isinstance(cause, ClientError):
        error_code = cause.response.get("Error", {}).get("Code")
        return error_code in RETRYABLE_S3_ERROR_CODES
    return False


def retry_storage_operation(max_attempts=3, initial_delay=1, backoff_factor=2):
    """
    Decorator to retry throttled S3 operations with exponential backoff.

    Only StorageErrors caused by a retryable S3 error code are retried;
    everything else is raised on the first failure.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = _logger_for(func)
            delay = initial_delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except StorageError as e:
                    if not _is_retryable(e):
                        raise
                    if attempt >= max_attempts:
                        logger.error(
                            f"Storage operation '{func.__name__}' failed after "
                            f"{max_attempts} attempts. Error: {e}"
                        )
                        raise
                    logger.warning(
                        f"Storage operation '{func.__name__}' failed. Attempt "
                        f"{attempt}/{max_attempts}. Retrying in {delay:.2f}s. Error: {e}"
                    )
                    time.sleep(delay)
                    delay *= backoff_factor
        return wrapper
    return decorator
