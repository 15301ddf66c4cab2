"""Cooperative cancellation for pipeline runs."""


class OperationCancelled(Exception):
    """Raised inside a run whose token was cancelled."""


class CancellationToken:
    """
    One-way flag shared between a caller and the run it started.

    The run checks the token between stages; the caller checks it again
    before committing results.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelled()
