"""Token grant sizing."""

from dataclasses import dataclass

# Token grants are sized at roughly a third of the equity grant's bps
TOKEN_TO_EQUITY_RATIO = 0.35


@dataclass(frozen=True)
class TokenGrant:
    token_amount: int
    percent_supply: float
    pool_impact_percent: float
    pool_remaining_after: float


def size_token_grant(equity_bps: float, total_supply: float) -> int:
    """Token amount equivalent to 35% of an equity grant's basis points."""
    percent_supply = equity_bps * TOKEN_TO_EQUITY_RATIO / 100
    return round(percent_supply / 100 * total_supply)


def calculate_token_grant(token_amount: float, total_supply: float, remaining_pool: float) -> TokenGrant:
    """Supply share and token pool impact of a grant.

    An empty pool reports 100% impact.
    """
    return TokenGrant(
        token_amount=round(token_amount),
        percent_supply=token_amount / total_supply * 100,
        pool_impact_percent=token_amount / remaining_pool * 100 if remaining_pool > 0 else 100.0,
        pool_remaining_after=max(0.0, remaining_pool - token_amount),
    )
