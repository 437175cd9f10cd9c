"""Optimistic concurrency helpers.

Protean's version check only guards records that already exist. A record
saved for the first time (a product's stock ledger, an owner's first cart)
has nothing to compare against, so two units of work could both insert it.
``insert_once`` makes the second insert fail the same way a stale update
does, with ``ExpectedVersionError``, and ``process_with_retry`` re-runs a
command that lost either kind of race.
"""

import threading

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from commerce.errors import ConcurrentUpdate

logger = structlog.get_logger(__name__)

_inserts = threading.RLock()


def insert_once(save, item, already_exists, description: str):
    """Save a new ``item`` unless ``already_exists()`` reports a record under its key.

    The existence check and the write are serialized, so of two writers
    racing for the same key the second always sees the first.
    """
    with _inserts:
        if already_exists():
            raise ExpectedVersionError(f"{description} was created concurrently")
        return save(item)


def process_with_retry(command, attempts: int):
    """Process ``command`` synchronously, re-running it after a lost version race.

    Each attempt is a fresh unit of work that re-reads everything it touches.
    Raises ``ConcurrentUpdate`` once ``attempts`` runs are used up.
    """
    name = command.__class__.__name__
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning("Concurrent update, retrying", command=name, attempt=attempt, error=str(exc))

    raise ConcurrentUpdate(name, attempts)
