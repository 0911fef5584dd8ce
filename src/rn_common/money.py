"""Integer arithmetic for rupee amounts.

All prices, rents and deposits are int (whole rupees). No float, no Decimal.
"""


def validate_amount(amount: int, field: str) -> None:
    """Raise ValueError unless amount is a strictly positive integer."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{field} must be an integer amount, got {amount!r}")
    if amount <= 0:
        raise ValueError(f"{field} must be greater than 0, got {amount}")


def rupees_to_display(amount: int) -> str:
    """Format rupees for display: 18000 -> '₹18,000', -2000 -> '-₹2,000'."""
    if amount < 0:
        return f"-₹{-amount:,}"
    return f"₹{amount:,}"
