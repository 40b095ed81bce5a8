"""Errors raised while validating and translating OData query options."""


class QueryValidationError(Exception):
    """
    A query option was malformed, unknown, or not allowed on the entity set.

    Attributes:
        option: the offending query option, e.g. "$select"
        message: human readable reason, returned to the client
    """

    def __init__(self, option: str, message: str):
        super().__init__(message)
        self.option = option
        self.message = message
