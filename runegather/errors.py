# runegather/errors.py
"""
Exceptions raised inside the gathering core.

Rejected user operations raise ValidationError internally; the public method that
ran the guard turns it into a 'notice' event and returns False, so none of these
ever reach the UI layer as an exception.
"""


class GatheringError(Exception):
    """Base class for every error raised by the gathering core."""
    pass


class ValidationError(GatheringError):
    """A user operation was rejected (cap reached, wrong mode, unknown id...)."""
    pass


class DiscoveryFailure(GatheringError):
    """The discovery gateway refused the discovery or could not be reached."""

    def __init__(self, message: str, resource_id: str = ""):
        super().__init__(message)
        self.resource_id = resource_id


class CatalogUnavailable(GatheringError):
    """The catalog provider could not supply elements or resources."""
    pass
