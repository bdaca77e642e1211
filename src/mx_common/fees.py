"""Trading fee arithmetic.

Buy side pays the broker fee on top of the price; sell side gives up broker
fee + sales tax from the proceeds. Fees only adjust notional and profit
figures, never queue position or ETA.
"""


def clamp_percent(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    if value < 0:
        return 0.0
    if value > 100:
        return 100.0
    return float(value)


def trade_fee_multipliers(broker_fee_percent: float, sales_tax_percent: float) -> tuple[float, float]:
    """Return (buy_cost_mult, sell_revenue_mult).

    buy_cost_mult     = 1 + broker / 100
    sell_revenue_mult = 1 - (broker + tax) / 100, floored at 0
    """
    broker = clamp_percent(broker_fee_percent)
    tax = clamp_percent(sales_tax_percent)
    buy_cost_mult = 1.0 + broker / 100.0
    sell_revenue_mult = max(0.0, 1.0 - (broker + tax) / 100.0)
    return buy_cost_mult, sell_revenue_mult


def net_unit_price(
    price: float, is_buy: bool, broker_fee_percent: float, sales_tax_percent: float
) -> float:
    """Per-unit cash effect of a fill: what a buy costs, what a sell nets."""
    buy_mult, sell_mult = trade_fee_multipliers(broker_fee_percent, sales_tax_percent)
    if is_buy:
        return price * buy_mult
    return price * sell_mult
