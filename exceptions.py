"""Error taxonomy shared by the storage, service and API layers."""


class UniversityServiceError(Exception):
    """Base class for errors raised while serving directory requests."""

    status_code = 500


class ValidationError(UniversityServiceError):
    """A required parameter is missing or invalid."""

    status_code = 400


class NotFoundError(UniversityServiceError):
    """No record matched the request."""

    status_code = 404


class StoreError(UniversityServiceError):
    """The record store is unavailable or a query failed."""

    status_code = 500


class DatasetError(Exception):
    """The university dataset could not be read or downloaded."""
