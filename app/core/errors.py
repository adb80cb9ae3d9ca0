class GarageError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GarageError):
    status_code = 400


class NotFoundError(GarageError):
    status_code = 404


class ConflictError(GarageError):
    status_code = 409


class ImmutableStateError(GarageError):
    status_code = 409


class StorageError(GarageError):
    status_code = 500

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)
