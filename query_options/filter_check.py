"""Type checks for $filter expressions, run before they are compiled to SQL."""
from typing import Optional

from odata_query import ast
from odata_query.exceptions import ODataException
from odata_query.grammar import ODataLexer, ODataParser

from query_options.capabilities import FILTER
from query_options.errors import QueryValidationError
from query_options.schema import EntitySchema

BOOLEAN = "Edm.Boolean"
NUMBER = "number"
STRING = "Edm.String"
TEMPORAL = "temporal"

_PROPERTY_KINDS = {
    "Edm.Boolean": BOOLEAN,
    "Edm.String": STRING,
    "Edm.Int16": NUMBER,
    "Edm.Int32": NUMBER,
    "Edm.Int64": NUMBER,
    "Edm.Double": NUMBER,
    "Edm.Decimal": NUMBER,
    "Edm.Date": TEMPORAL,
    "Edm.DateTimeOffset": TEMPORAL,
}

_LITERAL_KINDS = {
    ast.String: STRING,
    ast.Integer: NUMBER,
    ast.Float: NUMBER,
    ast.Boolean: BOOLEAN,
    ast.Date: TEMPORAL,
    ast.DateTime: TEMPORAL,
}

# Canonical functions: argument kind (None = not checked) and result kind
_FUNCTIONS = {
    "contains": (STRING, BOOLEAN),
    "startswith": (STRING, BOOLEAN),
    "endswith": (STRING, BOOLEAN),
    "tolower": (STRING, STRING),
    "toupper": (STRING, STRING),
    "trim": (STRING, STRING),
    "concat": (STRING, STRING),
    "length": (STRING, NUMBER),
    "indexof": (STRING, NUMBER),
    "substring": (None, STRING),
    "round": (NUMBER, NUMBER),
    "floor": (NUMBER, NUMBER),
    "ceiling": (NUMBER, NUMBER),
    "year": (TEMPORAL, NUMBER),
    "month": (TEMPORAL, NUMBER),
    "day": (TEMPORAL, NUMBER),
    "hour": (TEMPORAL, NUMBER),
    "minute": (TEMPORAL, NUMBER),
    "second": (TEMPORAL, NUMBER),
}


def _describe(kind: str) -> str:
    if kind == NUMBER:
        return "numeric"
    if kind == TEMPORAL:
        return "date/time"
    return kind


class _FilterChecker:
    def __init__(self, schema: EntitySchema, expression: str):
        self.schema = schema
        self.expression = expression

    def fail(self, message: str) -> QueryValidationError:
        return QueryValidationError(FILTER, f"Invalid $filter expression '{self.expression}': {message}")

    def require(self, node, kind: str, context: str) -> None:
        actual = self.kind_of(node)
        if actual is not None and actual != kind:
            raise self.fail(f"{context} expects a {_describe(kind)} operand, got {_describe(actual)}.")

    def kind_of(self, node) -> Optional[str]:
        """Infer the result kind of `node`; None when unknown or null."""
        literal_kind = _LITERAL_KINDS.get(type(node))
        if literal_kind is not None:
            return literal_kind
        if isinstance(node, ast.Identifier):
            prop = self.schema.get_property(node.name)
            if prop is None:
                raise self.fail(
                    f"Could not find a property named '{node.name}' on type '{self.schema.qualified_type}'."
                )
            return _PROPERTY_KINDS.get(prop.edm_type)
        if isinstance(node, ast.Compare):
            self.check_compare(node)
            return BOOLEAN
        if isinstance(node, ast.BoolOp):
            operator = type(node.op).__name__.lower()
            self.require(node.left, BOOLEAN, f"'{operator}'")
            self.require(node.right, BOOLEAN, f"'{operator}'")
            return BOOLEAN
        if isinstance(node, ast.UnaryOp):
            if isinstance(node.op, ast.Not):
                self.require(node.operand, BOOLEAN, "'not'")
                return BOOLEAN
            self.require(node.operand, NUMBER, "Negation")
            return NUMBER
        if isinstance(node, ast.BinOp):
            operator = type(node.op).__name__.lower()
            self.require(node.left, NUMBER, f"'{operator}'")
            self.require(node.right, NUMBER, f"'{operator}'")
            return NUMBER
        if isinstance(node, ast.Call):
            return self.check_call(node)
        return None

    def check_compare(self, node: ast.Compare) -> None:
        operator = type(node.comparator).__name__.lower()
        left = self.kind_of(node.left)
        rights = node.right.val if isinstance(node.right, ast.List) else [node.right]
        for operand in rights:
            right = self.kind_of(operand)
            if left is not None and right is not None and left != right:
                raise self.fail(
                    f"Cannot compare a {_describe(left)} operand with a {_describe(right)} operand "
                    f"using '{operator}'."
                )

    def check_call(self, node: ast.Call) -> Optional[str]:
        name = node.func.name.lower()
        if name not in _FUNCTIONS:
            return None
        argument_kind, result_kind = _FUNCTIONS[name]
        if argument_kind is not None:
            for argument in node.args:
                self.require(argument, argument_kind, f"Function '{name}'")
        else:
            for argument in node.args:
                self.kind_of(argument)
        return result_kind


def check_filter(expression: str, schema: EntitySchema) -> None:
    """
    Reject $filter expressions that parse but cannot mean a row predicate.

    The expression must evaluate to a boolean, and literals compared with
    properties must match the property's type (so `name eq 1` or a bare
    `name` are client errors rather than empty or unfiltered results).

    Raises:
        QueryValidationError: for a syntax error, an unknown property, a type
            mismatch, or a non-boolean expression.
    """
    try:
        tree = ODataParser().parse(ODataLexer().tokenize(expression))
    except ODataException as e:
        raise QueryValidationError(FILTER, f"Invalid $filter expression '{expression}': {e}") from e

    checker = _FilterChecker(schema, expression)
    kind = checker.kind_of(tree)
    if kind != BOOLEAN:
        raise checker.fail("The expression must evaluate to a boolean value.")
