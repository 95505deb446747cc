from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, TYPE_CHECKING

from wallet_currency.domain.monetary import exchange as engine
from wallet_currency.domain.monetary.currency_config import CurrencyConfig
from wallet_currency.domain.monetary.errors import InvalidAmountFormatError, MisconfiguredIncomeTypeError, UnknownIncomeTypeError
from wallet_currency.domain.monetary.income_type import IncomeType

if TYPE_CHECKING:
    from wallet_currency.platform.ledger.ledger import Ledger

logger = logging.getLogger(__name__)


class Currency:
    """Represents one configured currency and converts amounts for ledger storage.

    A Currency is an immutable value object and a pure function of its configuration: building it
    twice from the same configuration gives instances with identical behavior.

    Amounts come in two forms:
    - display amounts: human-facing decimal strings such as "12.5"
    - minor units: integer strings counting the smallest unit, such as "12500" for 3 decimals

    Attributes:
        id (str): Currency code.
        symbol (str): Display symbol.
        decimals (int): Number of minor-unit digits.
        scale (int): Maximum fractional digits shown by `from_minor_unit`.
        rate (Decimal): Exchange rate against the common reference unit (0 = not exchangeable).
        unit_factor (int): Exactly 10 ** $decimals.
    """

    __slots__ = ("_config", "_unit_factor")

    # region Init

    def __init__(self, code: str, options: Mapping[str, Any] | None = None) -> None:
        """Initialize a Currency from its code and raw configuration record.

        Missing or malformed options fall back to defaults; see `CurrencyConfig.from_mapping`.

        Args:
            code: Currency code (e.g. "usd", "coin").
            options: Raw configuration record with optional fields `name`, `symbol`, `withdraw`,
                `decimals`, `scale`, `rate` and `types`.
        """
        self._config = CurrencyConfig.from_mapping(code, options)
        self._unit_factor = engine.unit_factor_for(self._config.decimals)
        logger.debug(f"Constructed Currency '{code}' (decimals={self._config.decimals}, scale={self._config.scale}, rate={self._config.rate})")

    @classmethod
    def from_config(cls, config: CurrencyConfig) -> Currency:
        """Build a Currency from an already sanitized $config."""
        # Raise: config must be the immutable record, not a raw mapping
        if not isinstance(config, CurrencyConfig):
            raise TypeError(f"Cannot call `Currency.from_config` because $config is not CurrencyConfig (got type '{type(config).__name__}')")

        return cls(config.id, config.as_dict())

    # endregion

    # region Properties

    @property
    def config(self) -> CurrencyConfig:
        """Get the full immutable configuration."""
        return self._config

    @property
    def id(self) -> str:
        """Get the currency code."""
        return self._config.id

    @property
    def name(self) -> str:
        """Get the currency name."""
        return self._config.name

    @property
    def symbol(self) -> str:
        """Get the display symbol."""
        return self._config.symbol

    @property
    def withdraw(self) -> bool:
        """Get whether withdrawal is permitted for this currency."""
        return self._config.withdraw

    @property
    def decimals(self) -> int:
        """Get the number of minor-unit digits."""
        return self._config.decimals

    @property
    def scale(self) -> int:
        """Get the default number of fractional digits for display amounts."""
        return self._config.scale

    @property
    def rate(self) -> Decimal:
        """Get the exchange rate against the common reference unit."""
        return self._config.rate

    @property
    def types(self) -> Mapping[str, Any]:
        """Get the read-only income-type map."""
        return self._config.types

    @property
    def unit_factor(self) -> int:
        """Get the number of minor units in one display unit."""
        return self._unit_factor

    def get(self, key: str, default: Any = None) -> Any:
        """Return configuration field $key (e.g. "rate", "types"), or $default if unknown."""
        return getattr(self._config, key, default) if key in CurrencyConfig.__dataclass_fields__ else default

    # endregion

    # region Conversion

    def to_minor_unit(self, value: str) -> str | None:
        """Convert display amount $value into minor units.

        Args:
            value: Non-negative decimal string ("10", "0.125"). Digits beyond $decimals are truncated.

        Returns:
            Integer string of minor units, or None when $value is malformed (negative, exponent
            notation, several dots, leading zeros, surrounding garbage).
        """
        return engine.to_minor_unit(value, self._unit_factor)

    def from_minor_unit(self, value: str, scale: int | None = None) -> str:
        """Convert minor units $value back into a display amount.

        Args:
            value: Integer string, optionally negative.
            scale: Fractional digits to keep; defaults to the configured $scale.

        Returns:
            Display amount without trailing zeros; "0" when $value is malformed.
        """
        return engine.from_minor_unit(value, self._unit_factor, self.scale if scale is None else scale)

    def format(self, value: str, scale: int | None = None, with_symbol: bool = True) -> str:
        """Return minor units $value as display text, e.g. "1.5 USD"."""
        amount = self.from_minor_unit(value, scale)
        return f"{amount} {self.symbol}" if with_symbol else amount

    # endregion

    # region Income types

    def check_type(self, type: str) -> IncomeType | None:
        """Return the income type named $type if this currency accepts it.

        The type must be declared in $types as a record with a `name` field. The returned record
        always carries a `withdraw` flag (False unless configured).

        Returns:
            IncomeType, or None for an empty, unknown or malformed type.
        """
        if not type:
            return None

        record = self.types.get(type)
        if not isinstance(record, Mapping) or record.get("name") is None:
            return None

        return IncomeType.from_record(type, record)

    # endregion

    # region Exchange

    def can_exchange_to(self, currency: Currency) -> bool:
        """Return True if amounts of this currency may be exchanged into $currency.

        Both currencies need a positive rate and $currency must declare "from" + this id in its
        types (directed permission: B accepts inflow from A).
        """
        return engine.is_exchangeable(self, currency)

    def exchange_minor_amount(self, currency: Currency, amount_minor: str | int) -> str | None:
        """Return how many minor units of $currency correspond to $amount_minor of this currency.

        Returns:
            Integer string truncated toward zero, or None if the exchange is not permitted
            or $amount_minor is not an integer.
        """
        if not engine.is_integer_amount(amount_minor) or not self.can_exchange_to(currency):
            return None
        return engine.exchange_minor_units(amount_minor, self.rate, currency.rate)

    def exchange_amount(self, currency: Currency, amount: str) -> str | None:
        """Return the minor units of $currency obtained for display $amount of this currency.

        Computes floor(to_minor_unit($amount) * $currency.rate / self.rate).

        Returns:
            Integer string, or None when the exchange is not permitted or $amount is malformed.
        """
        amount_minor = self.to_minor_unit(amount)
        if amount_minor is None:
            return None
        return self.exchange_minor_amount(currency, amount_minor)

    # endregion

    # region Ledger operations

    def deposit(self, ledger: Ledger, amount: str, type: str, subject_id: str) -> bool:
        """Record income of display $amount under income type $type in $ledger.

        Args:
            ledger: Ledger that books the deposit.
            amount: Display amount to deposit.
            type: Income type declared in this currency's $types.
            subject_id: Identifier of the business object that caused the income.

        Returns:
            Whatever the ledger reports (True on success).

        Raises:
            UnknownIncomeTypeError: If $type is not a declared income type.
            MisconfiguredIncomeTypeError: If the income type has no `subject`.
            InvalidAmountFormatError: If $amount is not a valid display amount.
        """
        income_type = self.check_type(type)
        # Raise: unrecognized income must never be booked
        if income_type is None:
            raise UnknownIncomeTypeError(type, self.id)

        # Raise: the ledger needs a subject to book the deposit under
        if not income_type.subject:
            raise MisconfiguredIncomeTypeError(type, self.id)

        amount_minor = self._require_minor_unit(amount)
        logger.info(f"Depositing {amount} {self.id} ({amount_minor} minor units) as '{type}' for subject '{income_type.subject}' #{subject_id}")
        return ledger.record_deposit(self, amount_minor, income_type.key, income_type.subject, subject_id)

    def outlay(self, ledger: Ledger, amount: str, subject: str, subject_id: str) -> bool:
        """Record spending of display $amount in $ledger.

        Balance and withdrawal checks belong to the ledger.

        Raises:
            InvalidAmountFormatError: If $amount is not a valid display amount.
        """
        amount_minor = self._require_minor_unit(amount)
        logger.info(f"Spending {amount} {self.id} ({amount_minor} minor units) on subject '{subject}' #{subject_id}")
        return ledger.record_outlay(self, amount_minor, subject, subject_id)

    def exchange(self, ledger: Ledger, currency: Currency, amount: str, discount: float = 1.0) -> str | None:
        """Exchange display $amount of this currency into $currency through $ledger.

        The ledger computes the credited amount from the base exchange amount and applies
        $discount to it.

        Args:
            ledger: Ledger that books both legs of the exchange.
            currency: Target currency.
            amount: Display amount of this currency to exchange.
            discount: Multiplier applied by the ledger to the exchanged amount (1.0 = none).

        Returns:
            Credited minor units of $currency as reported by the ledger, or None when the
            exchange is not permitted.

        Raises:
            InvalidAmountFormatError: If $amount is not a valid display amount.
            ValueError: If $discount is not a positive finite number.
        """
        # Raise: discount scales the credited amount, so it must be a positive finite factor
        if isinstance(discount, bool) or not isinstance(discount, (int, float, Decimal)) or not math.isfinite(discount) or discount <= 0:
            raise ValueError(f"Cannot call `exchange` because $discount ({discount}) is not a positive finite number")

        amount_minor = self._require_minor_unit(amount)

        if not self.can_exchange_to(currency):
            logger.warning(f"Refusing exchange of {amount} {self.id} into {currency.id}: rates or permission missing")
            return None

        logger.info(f"Exchanging {amount} {self.id} ({amount_minor} minor units) into {currency.id} with discount {discount}")
        return ledger.record_exchange(self, currency, amount_minor, discount)

    def _require_minor_unit(self, amount: str) -> int:
        amount_minor = self.to_minor_unit(amount)
        # Raise: money movement must not proceed with an unreadable amount
        if amount_minor is None:
            raise InvalidAmountFormatError(amount, self.id)
        return int(amount_minor)

    # endregion

    # region Magic

    def __eq__(self, other) -> bool:
        """Check equality by configuration."""
        if not isinstance(other, Currency):
            return False
        return self._config == other._config

    def __hash__(self) -> int:
        """Hash based on currency code."""
        return hash(self.id)

    def __str__(self) -> str:
        """Return the currency code."""
        return self.id

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"{self.__class__.__name__}('{self.id}', decimals={self.decimals}, scale={self.scale}, rate={self.rate})"

    # endregion
