"""
Collateral Pool Model.

Holds the vault's raw collateral (the yield-bearing token itself, e.g. wstETH).
How collateral is deployed to a yield source is out of scope; the pool only
reports the total it controls, idle plus deployed, and moves raw amounts in and
out on deposits and withdrawals.
"""

from .errors import CollateralUnavailable, InvalidAmount, InsufficientBalance


class CollateralPool:
    """
    Simulates the adapter that reports the strategy's raw collateral balance.
    """

    def __init__(self):
        # Raw collateral idle in the vault
        self.idle_balance = 0

        # Raw collateral deployed to the yield source
        self.deployed_balance = 0

        # Cleared to simulate a yield source that cannot be read
        self.available = True

    def raw_collateral_balance(self):
        """
        Returns the total raw collateral controlled by the strategy.

        Raises:
            CollateralUnavailable: If the yield source cannot be read
        """
        if not self.available:
            raise CollateralUnavailable("Raw collateral balance cannot be read")
        return self.idle_balance + self.deployed_balance

    def receive(self, amount):
        """Receive raw collateral from a depositor."""
        if amount <= 0:
            raise InvalidAmount(f"Invalid collateral amount: {amount}")

        self.idle_balance += amount
        return True

    def check_send(self, amount):
        if amount <= 0:
            raise InvalidAmount(f"Invalid collateral amount: {amount}")
        if amount > self.raw_collateral_balance():
            raise InsufficientBalance(
                f"Pool holds {self.raw_collateral_balance()} raw collateral, needs {amount}"
            )

    def send(self, amount):
        """
        Send raw collateral out, drawing on idle funds first.
        """
        self.check_send(amount)

        from_idle = min(amount, self.idle_balance)
        self.idle_balance -= from_idle
        self.deployed_balance -= amount - from_idle
        return True

    def deploy(self, amount):
        """Marks idle collateral as deployed; the total is unchanged."""
        if amount <= 0 or amount > self.idle_balance:
            raise InvalidAmount(f"Invalid collateral amount: {amount}")

        self.idle_balance -= amount
        self.deployed_balance += amount
        return True

    def slash(self, amount):
        """
        Removes raw collateral without a withdrawal, modelling a loss in the
        yield source that the exchange rate does not capture.
        """
        if amount <= 0 or amount > self.raw_collateral_balance():
            raise InvalidAmount(f"Invalid slash amount: {amount}")

        from_deployed = min(amount, self.deployed_balance)
        self.deployed_balance -= from_deployed
        self.idle_balance -= amount - from_deployed
        return True
