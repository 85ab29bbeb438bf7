"""
Client input errors raised while parsing and validating a submission
"""


class ClientInputError(Exception):
    """Base class for bad submissions. ``message`` is returned to the caller verbatim."""

    message = "Invalid request"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidJSONBodyError(ClientInputError):
    message = "Invalid JSON body"


class MissingFieldsError(ClientInputError):
    message = "name, email, and message are required"
