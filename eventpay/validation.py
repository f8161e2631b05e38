from dataclasses import dataclass

MIN_AMOUNT_CENTS = 500
MAX_AMOUNT_CENTS = 65000
CURRENCY = "usd"


class AmountOutOfBounds(Exception):
    """Requested amount falls outside the accepted payment range."""


class AmountTooLow(AmountOutOfBounds):
    """Amount is below the minimum payment."""


class AmountTooHigh(AmountOutOfBounds):
    """Amount is above the package price."""


def format_dollars(cents: int) -> str:
    """Format minor units as a dollar string, e.g. 12345 -> "$123.45"."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars}.{remainder:02d}"


@dataclass(frozen=True)
class AmountPolicy:
    min_cents: int = MIN_AMOUNT_CENTS
    max_cents: int = MAX_AMOUNT_CENTS
    currency: str = CURRENCY

    def check(self, amount: int) -> int:
        """
        Validate an amount in minor units.

        Returns the amount unchanged if it is within bounds.
        Raises AmountTooLow if amount < min_cents.
        Raises AmountTooHigh if amount > max_cents.
        """
        if amount < self.min_cents:
            raise AmountTooLow(
                f"Minimum payment amount is {format_dollars(self.min_cents)}"
            )
        if amount > self.max_cents:
            raise AmountTooHigh("Payment amount exceeds package price")
        return amount
