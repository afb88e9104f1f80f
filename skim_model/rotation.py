"""
Recipient Rotation.

Two-phase change of the yield recipient:

    Stable -> PendingChange -> (finalize) Stable
                            -> (cancel)   Stable

Finalizing is permissionless but only possible once the cooldown has passed,
which gives depositors a window to exit before yield routing changes.
"""

import logging
from dataclasses import dataclass
from typing import Union

from .config import RECIPIENT_CHANGE_COOLDOWN
from .errors import (
    ChangeAlreadyPending,
    CooldownNotElapsed,
    InvalidAddress,
    NoPendingChange,
    RotationInconsistent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stable:
    """No recipient change in flight."""


@dataclass(frozen=True)
class PendingChange:
    target: str
    requested_at: int


RotationState = Union[Stable, PendingChange]


class RecipientRotation:
    """
    Holds the current beneficiary and the state of any pending change.
    """

    def __init__(self, beneficiary, cooldown=RECIPIENT_CHANGE_COOLDOWN):
        if not beneficiary:
            raise InvalidAddress("Beneficiary cannot be empty")
        self.beneficiary = beneficiary
        self.cooldown = cooldown
        self.state: RotationState = Stable()

    @property
    def pending_beneficiary(self):
        return self.state.target if isinstance(self.state, PendingChange) else None

    @property
    def change_requested_at(self):
        return self.state.requested_at if isinstance(self.state, PendingChange) else None

    def ready_at(self):
        if not isinstance(self.state, PendingChange):
            return None
        return self.state.requested_at + self.cooldown

    def is_consistent(self, holds_shares):
        """
        False while a change is pending whose target has become the current
        beneficiary or has acquired shares of its own.

        Args:
            holds_shares: Callable returning True if an address holds shares
        """
        if not isinstance(self.state, PendingChange):
            return True
        target = self.state.target
        return bool(target) and target != self.beneficiary and not holds_shares(target)

    def propose(self, new_recipient, now, holds_shares):
        """
        Starts the cooldown towards new_recipient.

        Raises:
            ChangeAlreadyPending: If a change is already in flight
            InvalidAddress: For an empty address or the current beneficiary
            RotationInconsistent: If the target already holds shares
        """
        if isinstance(self.state, PendingChange):
            raise ChangeAlreadyPending(f"Change to {self.state.target} already pending")
        if not new_recipient:
            raise InvalidAddress("New recipient cannot be empty")
        if new_recipient == self.beneficiary:
            raise InvalidAddress("New recipient is already the beneficiary")
        if holds_shares(new_recipient):
            raise RotationInconsistent(f"New recipient {new_recipient} already holds shares")

        self.state = PendingChange(target=new_recipient, requested_at=now)
        logger.info("recipient change to %s proposed at %s, ready at %s", new_recipient, now, self.ready_at())
        return self.state

    def cancel(self):
        """
        Abandons the pending change.

        Returns:
            The address that would have become beneficiary
        """
        if not isinstance(self.state, PendingChange):
            raise NoPendingChange("No recipient change to cancel")

        cancelled = self.state.target
        self.state = Stable()
        logger.info("recipient change to %s cancelled", cancelled)
        return cancelled

    def check_finalize(self, now, holds_shares):
        """Raises if finalize would be rejected right now."""
        if not isinstance(self.state, PendingChange):
            raise NoPendingChange("No recipient change to finalize")
        if now < self.ready_at():
            raise CooldownNotElapsed(self.ready_at(), now)
        if not self.is_consistent(holds_shares):
            raise RotationInconsistent(f"Pending recipient {self.state.target} is no longer eligible")

    def finalize(self, now, holds_shares):
        """
        Completes the change. The caller moves the beneficiary's shares.

        Returns:
            (previous, current) beneficiary addresses
        """
        self.check_finalize(now, holds_shares)

        previous = self.beneficiary
        self.beneficiary = self.state.target
        self.state = Stable()
        logger.info("beneficiary changed from %s to %s at %s", previous, self.beneficiary, now)
        return previous, self.beneficiary
