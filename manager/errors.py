"""
Error taxonomy for message board operations.

A missing message is not an error here: the service returns None and
the request layer decides the status code. Exceptions cover input the
service cannot act on.
"""


class MessageBoardError(Exception):
    """Base exception for message board operations."""
    pass


class InvalidInputError(MessageBoardError, ValueError):
    """Required input is missing or malformed."""
    pass
