# forecourt/errors.py
"""Errors raised by the listing service and rendered by the HTTP layer."""


class ListingError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(ListingError):
    status_code = 400

    _MESSAGES = {
        "name": "Missing name",
        "garageId": "Missing garageId",
        "year": "Year must be integer",
        "price": "Price must be > 0",
        "photos": "At least 1 photo required",
        "body": "Bad JSON",
    }

    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or self._MESSAGES.get(field, f"Invalid {field}"))


class DuplicateListing(InvalidInput):
    status_code = 409

    def __init__(self, name):
        super().__init__("name", f"A car named {name!r} already exists")


class Forbidden(ListingError):
    status_code = 403
    message = "Forbidden"

    def __init__(self):
        super().__init__()


class NotFound(ListingError):
    status_code = 404
    message = "Car not found"


class StoreError(ListingError):
    """Backend failure. The public message never carries the cause."""
    status_code = 500
    message = "Database error"

    def __init__(self, action):
        self.action = action
        super().__init__()
