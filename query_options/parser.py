"""Parse raw query-string parameters into OData query options."""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from query_options.capabilities import (
    COUNT,
    EXPAND,
    FILTER,
    ORDERBY,
    SELECT,
    SKIP,
    SUPPORTED_OPTIONS,
    TOP,
)
from query_options.errors import QueryValidationError

logger = logging.getLogger(__name__)

# Edm.Int32 upper bound; larger $top/$skip values cannot be bound as LIMIT/OFFSET
MAX_INT32 = 2147483647


@dataclass
class OrderByItem:
    property: str
    descending: bool = False


@dataclass
class ODataQueryOptions:
    """Syntactically valid query options; semantic checks happen in the translator."""

    filter: Optional[str] = None
    orderby: List[OrderByItem] = field(default_factory=list)
    select: List[str] = field(default_factory=list)
    expand: List[str] = field(default_factory=list)
    count: bool = False
    top: Optional[int] = None
    skip: Optional[int] = None
    present: List[str] = field(default_factory=list)

    def has(self, option: str) -> bool:
        return option in self.present


def _split_list(option: str, value: str) -> List[str]:
    items = [item.strip() for item in value.split(",")]
    if any(not item for item in items):
        raise QueryValidationError(option, f"The query option '{option}' contains an empty item.")
    return items


def _parse_non_negative_int(option: str, value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise QueryValidationError(option, f"Invalid value '{value}' for {option} query option found. "
                                           f"The {option} query option requires a non-negative integer value.")
    if number < 0:
        raise QueryValidationError(option, f"Invalid value '{value}' for {option} query option found. "
                                           f"The {option} query option requires a non-negative integer value.")
    if number > MAX_INT32:
        raise QueryValidationError(option, f"Invalid value '{value}' for {option} query option found. "
                                           f"The {option} query option must not exceed {MAX_INT32}.")
    return number


def _parse_bool(option: str, value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise QueryValidationError(option, f"'{value}' is not a valid count option; use 'true' or 'false'.")


def _parse_orderby(value: str) -> List[OrderByItem]:
    items = []
    for clause in _split_list(ORDERBY, value):
        parts = clause.split()
        if len(parts) > 2:
            raise QueryValidationError(ORDERBY, f"Syntax error in $orderby clause '{clause}'.")
        descending = False
        if len(parts) == 2:
            direction = parts[1].lower()
            if direction not in ("asc", "desc"):
                raise QueryValidationError(ORDERBY, f"Unknown sort direction '{parts[1]}' in $orderby; "
                                                    f"use 'asc' or 'desc'.")
            descending = direction == "desc"
        items.append(OrderByItem(property=parts[0], descending=descending))
    return items


def parse_query_options(params: Iterable[Tuple[str, str]]) -> ODataQueryOptions:
    """
    Parse (name, value) pairs from a query string.

    Parameters without a leading '$' are custom query options and are ignored.
    Unknown '$' options, repeated options and empty values are rejected.

    Raises:
        QueryValidationError: if any system query option is malformed.
    """
    options = ODataQueryOptions()

    for raw_name, raw_value in params:
        name = raw_name.strip().lower()
        if not name.startswith("$"):
            continue
        if name not in SUPPORTED_OPTIONS:
            raise QueryValidationError(raw_name, f"The query parameter '{raw_name}' is not supported.")
        if options.has(name):
            raise QueryValidationError(name, f"Query option '{name}' was specified more than once, "
                                             f"but it must be specified at most once.")
        value = raw_value.strip()
        if not value:
            raise QueryValidationError(name, f"The value for OData query '{name}' cannot be empty.")

        if name == FILTER:
            options.filter = value
        elif name == ORDERBY:
            options.orderby = _parse_orderby(value)
        elif name == SELECT:
            options.select = _split_list(SELECT, value)
        elif name == EXPAND:
            options.expand = _split_list(EXPAND, value)
        elif name == COUNT:
            options.count = _parse_bool(COUNT, value)
        elif name == TOP:
            options.top = _parse_non_negative_int(TOP, value)
        elif name == SKIP:
            options.skip = _parse_non_negative_int(SKIP, value)
        options.present.append(name)

    logger.debug(f"Parsed query options: {options.present}")
    return options
