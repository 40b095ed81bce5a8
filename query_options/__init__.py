"""
OData query-option handling.

Parses system query options from a request, validates them against a declared
capability set and an entity schema, and composes them onto a SQLAlchemy
SELECT. The $filter grammar is handled by the odata-query library.
"""
from query_options.capabilities import QueryCapabilities
from query_options.errors import QueryValidationError
from query_options.parser import ODataQueryOptions, OrderByItem, parse_query_options
from query_options.schema import EntitySchema, PropertyDescriptor
from query_options.translator import TranslatedQuery, translate

__all__ = [
    "EntitySchema",
    "ODataQueryOptions",
    "OrderByItem",
    "PropertyDescriptor",
    "QueryCapabilities",
    "QueryValidationError",
    "TranslatedQuery",
    "parse_query_options",
    "translate",
]
