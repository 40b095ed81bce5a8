"""Translate parsed OData query options into SQLAlchemy statements."""
import logging
from dataclasses import dataclass
from typing import Optional

from odata_query.exceptions import ODataException
from odata_query.sqlalchemy import apply_odata_query
from sqlalchemy import Select, func, select

from query_options.capabilities import (
    EXPAND,
    FILTER,
    ORDERBY,
    SELECT,
    SKIP,
    TOP,
    QueryCapabilities,
)
from query_options.errors import QueryValidationError
from query_options.filter_check import check_filter
from query_options.parser import ODataQueryOptions
from query_options.schema import EntitySchema

logger = logging.getLogger(__name__)


@dataclass
class TranslatedQuery:
    """A composed, not yet executed query and, when $count=true, its count query."""

    statement: Select
    count_statement: Optional[Select] = None


def _check_allowed(options: ODataQueryOptions, capabilities: QueryCapabilities, schema: EntitySchema) -> None:
    for option in options.present:
        if not capabilities.allows(option):
            raise QueryValidationError(
                option,
                f"Query option '{option}' is not allowed on the '{schema.entity_set}' entity set.",
            )


def _check_expand(options: ODataQueryOptions, schema: EntitySchema) -> None:
    for item in options.expand:
        if item == "*":
            continue
        if item not in schema.navigation_properties:
            raise QueryValidationError(
                EXPAND,
                f"Property '{item}' on type '{schema.qualified_type}' is not a navigation property "
                f"or complex property. Only navigation properties can be expanded.",
            )


def _check_select(options: ODataQueryOptions, schema: EntitySchema) -> None:
    for item in options.select:
        if schema.get_property(item) is None:
            raise QueryValidationError(
                SELECT, f"Could not find a property named '{item}' on type '{schema.qualified_type}'."
            )


def _apply_filter(statement: Select, expression: str, schema: EntitySchema) -> Select:
    check_filter(expression, schema)
    try:
        return apply_odata_query(statement, expression)
    except ODataException as e:
        raise QueryValidationError(FILTER, f"Invalid $filter expression '{expression}': {e}") from e


def _apply_orderby(statement: Select, options: ODataQueryOptions, schema: EntitySchema) -> Select:
    for item in options.orderby:
        if schema.get_property(item.property) is None:
            raise QueryValidationError(
                ORDERBY, f"Could not find a property named '{item.property}' on type '{schema.qualified_type}'."
            )
        column = getattr(schema.model, item.property)
        statement = statement.order_by(column.desc() if item.descending else column.asc())
    return statement


def translate(options: ODataQueryOptions, capabilities: QueryCapabilities, schema: EntitySchema,
              query: Select) -> TranslatedQuery:
    """
    Compose `query` with the given options after validating them.

    The returned statements are not executed. When $top or $skip is used
    without $orderby the result is ordered by key so pages are stable.

    Raises:
        QueryValidationError: if an option is not allowed, refers to an unknown
            property, or carries an invalid expression.
    """
    _check_allowed(options, capabilities, schema)
    _check_select(options, schema)
    _check_expand(options, schema)

    if (capabilities.max_top is not None and options.top is not None
            and options.top > capabilities.max_top):
        raise QueryValidationError(
            TOP, f"The limit of '{capabilities.max_top}' for Top query has been exceeded. "
                 f"The value from the incoming request is '{options.top}'."
        )

    statement = query
    if options.filter is not None:
        statement = _apply_filter(statement, options.filter, schema)

    count_statement = None
    if options.count:
        count_statement = select(func.count()).select_from(statement.subquery())

    if options.orderby:
        statement = _apply_orderby(statement, options, schema)
    elif options.has(TOP) or options.has(SKIP):
        statement = statement.order_by(*(getattr(schema.model, key).asc() for key in schema.key))

    if options.skip is not None:
        statement = statement.offset(options.skip)
    if options.top is not None:
        statement = statement.limit(options.top)

    logger.debug(f"Translated {schema.entity_set} query with options {options.present}")
    return TranslatedQuery(statement=statement, count_statement=count_statement)
