"""Helpers for composing SQL fragments from trusted templates."""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Tuple

from configurable_list.common.exceptions import configuration_error, options_error

# printf conversion: flags, width, precision, conversion character
_DIRECTIVE = re.compile(r"%([-+ #0]*\d*(?:\.\d+)?)(.?)", re.DOTALL)

_TEXT_CONVERSIONS = frozenset("sra")
_INTEGER_CONVERSIONS = frozenset("diuoxX")
_FLOAT_CONVERSIONS = frozenset("eEfFgG")


def is_blank(value: Any) -> bool:
    """Return True for None, empty or whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def template_conversions(template: str) -> Tuple[str, ...]:
    """Return the conversion characters of the placeholders in ``template``.

    ``%%`` is a literal percent sign and is not reported.

    Raises:
        ListError: CONFIG_INVALID for a directive other than text, integer
            or float conversions
    """
    conversions = []
    for match in _DIRECTIVE.finditer(template):
        spec, conversion = match.groups()
        if conversion == "%" and not spec:
            continue
        if conversion not in _TEXT_CONVERSIONS | _INTEGER_CONVERSIONS | _FLOAT_CONVERSIONS:
            raise configuration_error(
                f"Unsupported placeholder '{match.group(0)}' in SQL template: {template}",
                details={"template": template},
            )
        conversions.append(conversion)
    return tuple(conversions)


def _numeric_argument(escaped: str, conversion: str, template: str) -> Any:
    try:
        number = Decimal(escaped.strip())
    except InvalidOperation:
        number = None
    if number is None or not number.is_finite():
        raise options_error(
            f"Filter value '{escaped}' is not numeric, as required by SQL template: {template}",
            details={"value": escaped, "template": template},
        )
    if conversion in _INTEGER_CONVERSIONS:
        return int(number)
    return float(number)


def interpolate_sql_template(template: str, value: Any, escape: Callable[[Any], str]) -> str:
    """Substitute an escaped value into a printf-style SQL template.

    Every placeholder receives the escaped value and ``%%`` renders a
    literal percent sign, so ``"ILIKE '%%%s%%'"`` with ``abc`` renders
    ``ILIKE '%abc%'``. Integer and float placeholders (``%d``, ``%.2f``, ...)
    receive the escaped value as a number. The raw value is never
    interpolated.

    Args:
        template: Trusted SQL template
        value: Untrusted value, converted with ``str`` before escaping
        escape: Escaping collaborator returning a SQL-safe literal body

    Raises:
        ListError: CONFIG_INVALID for an unsupported placeholder,
            INVALID_OPTIONS when a numeric placeholder gets a non-numeric value
    """
    conversions = template_conversions(template)
    if not conversions:
        return template % ()
    escaped = escape("" if value is None else str(value))
    arguments = tuple(
        escaped if conversion in _TEXT_CONVERSIONS else _numeric_argument(escaped, conversion, template)
        for conversion in conversions
    )
    return template % arguments
