#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Schema Validator

validate_methods() is a gate run before generation: every method name must
be non-empty and unique. validate_numeric_value() checks a JSON number
against the numeric target kinds used by the generated code.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Iterable, Set, Union

from .errors import DuplicateNameError, EmptyNameError, NumericValueError
from .schema import Method

log = logging.getLogger("rpc-codegen.validator")

MAX_MONEY = Decimal("21000000")
AMOUNT_DECIMALS = 8

Number = Union[int, float, Decimal]


def validate_methods(methods: Iterable[Method]) -> None:
    """Raise EmptyNameError or DuplicateNameError (first repeat, in input order)."""
    seen: Set[str] = set()
    count = 0
    for method in methods:
        if not method.name:
            raise EmptyNameError()
        if method.name in seen:
            raise DuplicateNameError(method.name)
        seen.add(method.name)
        count += 1
    log.debug(f"Validated {count} methods")


def validate_numeric_value(value: Number, expected: str) -> None:
    """Check `value` against `int`, `float` or `amount`; raise NumericValueError otherwise."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise NumericValueError(value, expected, "not a number")

    if expected == "int":
        if isinstance(value, float) and not value.is_integer():
            raise NumericValueError(value, expected, "has a fractional part")
        if isinstance(value, Decimal) and value != value.to_integral_value():
            raise NumericValueError(value, expected, "has a fractional part")
        if value < 0:
            raise NumericValueError(value, expected, "is negative")
    elif expected == "float":
        if isinstance(value, float) and not math.isfinite(value):
            raise NumericValueError(value, expected, "is not finite")
    elif expected == "amount":
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise NumericValueError(value, expected, "is not a decimal") from e
        if not amount.is_finite():
            raise NumericValueError(value, expected, "is not finite")
        if amount < 0 or amount > MAX_MONEY:
            raise NumericValueError(value, expected, f"is outside 0..{MAX_MONEY}")
        if amount.as_tuple().exponent < -AMOUNT_DECIMALS and amount != amount.quantize(Decimal(1).scaleb(-AMOUNT_DECIMALS)):
            raise NumericValueError(value, expected, f"has more than {AMOUNT_DECIMALS} decimal places")
    else:
        raise NumericValueError(value, expected, "unknown numeric kind")
