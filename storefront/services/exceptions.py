class ServiceError(Exception):
    """Base exception for service-level errors."""


class NotFoundError(ServiceError):
    pass


class ValidationFailure(ServiceError):
    pass


class PersistenceError(ServiceError):
    """The database rejected the operation or could not be reached."""


class StorageUnavailable(ServiceError):
    """The upload directory could not be created or written."""


class AuthenticationError(ServiceError):
    pass
