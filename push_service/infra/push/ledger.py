"""Per-recipient bookkeeping for one multicast send.

The ledger holds the latest known outcome for every recipient; the selector
decides which recipients get another attempt.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence

from push_service.infra.push.constants import RETRYABLE_ERRORS
from push_service.infra.push.results import Failure, Indeterminate, Outcome


class ResultLedger(Mapping[str, Outcome]):
    """Latest outcome per recipient, starting as :class:`Indeterminate`.

    Entries are only ever overwritten by a newer attempt that reported on the
    recipient; recipients left out of an attempt keep their entry.
    """

    def __init__(self, recipients: Iterable[str]) -> None:
        self._outcomes: dict[str, Outcome] = dict.fromkeys(recipients, Indeterminate())

    def __getitem__(self, recipient: str) -> Outcome:
        return self._outcomes[recipient]

    def __iter__(self) -> Iterator[str]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def record(self, recipients: Sequence[str], outcomes: Sequence[Outcome]) -> None:
        """Store one attempt's outcomes, aligned by position with ``recipients``."""
        if len(recipients) != len(outcomes):
            msg = f"{len(outcomes)} outcomes for {len(recipients)} recipients"
            raise ValueError(msg)
        for recipient, outcome in zip(recipients, outcomes, strict=True):
            self._outcomes[recipient] = outcome

    def outcomes_for(self, recipients: Iterable[str]) -> tuple[Outcome, ...]:
        """Outcomes in the order of ``recipients``."""
        return tuple(self._outcomes[recipient] for recipient in recipients)


def is_retryable(outcome: Outcome, retryable_errors: frozenset[str] = RETRYABLE_ERRORS) -> bool:
    """Whether another attempt may improve this outcome."""
    if isinstance(outcome, Indeterminate):
        return True
    return isinstance(outcome, Failure) and outcome.error_code in retryable_errors


def select_retry_set(
    candidates: Sequence[str],
    ledger: Mapping[str, Outcome],
    retryable_errors: frozenset[str] = RETRYABLE_ERRORS,
) -> list[str]:
    """Return the candidates that should be sent again, in candidate order.

    A candidate qualifies when its ledger outcome is :class:`Indeterminate` or
    a :class:`Failure` whose code is in ``retryable_errors``.
    """
    return [
        recipient
        for recipient in candidates
        if is_retryable(ledger.get(recipient, Indeterminate()), retryable_errors)
    ]


__all__ = ["ResultLedger", "is_retryable", "select_retry_set"]
