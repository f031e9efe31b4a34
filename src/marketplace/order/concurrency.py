"""Version-checked writes with bounded retry.

Each Order save compares the loaded ``_version`` with the stored one; a stale
save raises ``ExpectedVersionError``. Command handlers reload the order on
every run, so re-processing the same command re-applies it to fresh state.
"""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from marketplace.errors import ConflictError

logger = structlog.get_logger(__name__)

MAX_CONFLICT_RETRIES = 3


def process_with_retry(command, attempts=MAX_CONFLICT_RETRIES):
    """Process ``command`` synchronously, retrying on version conflicts.

    Raises:
        ConflictError: every one of the ``attempts`` hit a conflict.
    """
    command_name = command.__class__.__name__
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning(
                "Version conflict while processing command",
                command=command_name,
                attempt=attempt,
                max_attempts=attempts,
                error=str(exc),
            )

    raise ConflictError(
        "The order was modified concurrently, please retry",
        command=command_name,
        attempts=attempts,
    )
