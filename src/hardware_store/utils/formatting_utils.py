from decimal import Decimal, ROUND_HALF_UP


class FormattingUtils:
    """
    Money formatting and arithmetic for display and order totals

    Amounts are integers in the currency's smallest unit in use. For UGX that
    is the shilling itself, so decimal_places is 0.
    """

    CURRENCY_FORMATS = {
        'UGX': {'symbol': 'UGX', 'decimal_places': 0, 'symbol_position': 'before'},
        'KES': {'symbol': 'KSh', 'decimal_places': 2, 'symbol_position': 'before'},
        'USD': {'symbol': '$', 'decimal_places': 2, 'symbol_position': 'before'},
    }

    @classmethod
    def format_money(
        cls,
        amount: int,
        currency: str = 'UGX',
        include_symbol: bool = True
    ) -> str:
        """
        Format money amount for display

        Examples:
            format_money(35000) -> "UGX 35,000"
            format_money(1299, 'USD') -> "$12.99"
        """
        currency_config = cls.CURRENCY_FORMATS.get(currency, cls.CURRENCY_FORMATS['UGX'])
        decimal_places = currency_config['decimal_places']
        value = Decimal(amount) / (10 ** decimal_places)

        if decimal_places == 0:
            formatted_amount = f"{value:,.0f}"
        else:
            formatted_amount = f"{value:,.{decimal_places}f}"

        if not include_symbol:
            return formatted_amount

        symbol = currency_config['symbol']
        if symbol.isalpha():
            return f"{symbol} {formatted_amount}"
        return f"{symbol}{formatted_amount}"

    @classmethod
    def apply_rate(cls, amount: int, rate: float) -> int:
        """Multiply an integer amount by a rate, rounding half up"""
        result = (Decimal(amount) * Decimal(str(rate))).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        return int(result)
