"""
Error types for the yield-skimming vault model.

Every error is a ValueError so callers that only care about "the operation was
rejected" can keep catching ValueError. All checks run before any state is
mutated, so a raised error always leaves the vault untouched.
"""


class VaultError(ValueError):
    """Base class for every rejection raised by the vault model."""


class InvalidAmount(VaultError):
    """Amount is zero, negative or otherwise unusable."""


class InvalidAddress(VaultError):
    """Address is empty."""


class InvalidRate(VaultError):
    """The rate reader returned a zero rate or out-of-bounds decimals."""


class InsufficientBalance(VaultError):
    pass


class InsufficientAllowance(VaultError):
    pass


class Unauthorized(VaultError):
    """Caller does not hold the role the operation requires."""


class VaultShutdown(VaultError):
    pass


class VaultInsolvent(VaultError):
    """Raised when a deposit is attempted while vault value is below user debt."""


class BeneficiaryRestricted(VaultError):
    """The beneficiary cannot deposit, mint or receive shares by transfer."""


class InsolvencyProtection(VaultError):
    """
    The beneficiary tried to move more shares than the redemption gate allows.

    Not a bug: retry with an amount at or below the current ceiling.
    """

    def __init__(self, requested, allowed):
        self.requested = requested
        self.allowed = allowed
        super().__init__(
            f"Insolvency protection: beneficiary requested {requested} shares, "
            f"only {allowed} are redeemable"
        )


class CollateralUnavailable(VaultError):
    """The raw collateral balance could not be read."""


class RotationError(VaultError):
    """Base class for recipient rotation state-machine violations."""


class NoPendingChange(RotationError):
    pass


class ChangeAlreadyPending(RotationError):
    pass


class CooldownNotElapsed(RotationError):
    def __init__(self, ready_at, now):
        self.ready_at = ready_at
        self.now = now
        super().__init__(f"Cooldown not elapsed: finalize allowed at {ready_at}, now {now}")


class RotationInconsistent(RotationError):
    """The pending recipient change no longer satisfies its preconditions."""
