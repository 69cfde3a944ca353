"""Accounting workflow flags.

A feature carries the pair ``(has_accounting, is_accounting_done)``. Only three
pairs are valid::

    (False, False)  no accounting step
    (True,  False)  accounting required, pending
    (True,  True)   accounting required, done

``is_completed`` is tracked separately and never interacts with this pair.
"""

from dataclasses import dataclass

from src.featuretree.core.exceptions import AccountingStateError

ACCOUNTING_NOT_REQUIRED_MESSAGE = (
    "Cannot mark accounting as done for a feature that does not require accounting"
)


@dataclass(frozen=True)
class AccountingState:
    has_accounting: bool = False
    is_accounting_done: bool = False

    @property
    def is_valid(self) -> bool:
        return self.has_accounting or not self.is_accounting_done


def resolve_accounting(
    current: AccountingState | None,
    *,
    has_accounting: bool | None = None,
    is_accounting_done: bool | None = None,
) -> AccountingState:
    """Overlay incoming flag changes on the stored state and validate the result.

    ``None`` means "not provided". ``current`` is ``None`` on creation, where
    defaults apply and an invalid pair is rejected rather than coerced.

    On update, explicitly turning ``has_accounting`` off clears
    ``is_accounting_done`` whatever value was sent alongside it.

    Raises:
        AccountingStateError: if the resulting pair would be ``(False, True)``.
    """
    if current is None:
        state = AccountingState(
            has_accounting=bool(has_accounting),
            is_accounting_done=bool(is_accounting_done),
        )
        if not state.is_valid:
            raise AccountingStateError(ACCOUNTING_NOT_REQUIRED_MESSAGE)
        return state

    effective_has = current.has_accounting if has_accounting is None else has_accounting
    effective_done = (
        current.is_accounting_done if is_accounting_done is None else is_accounting_done
    )

    if has_accounting is False:
        return AccountingState(has_accounting=False, is_accounting_done=False)

    state = AccountingState(has_accounting=effective_has, is_accounting_done=effective_done)
    if not state.is_valid:
        raise AccountingStateError(ACCOUNTING_NOT_REQUIRED_MESSAGE)
    return state
