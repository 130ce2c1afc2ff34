"""Custom exceptions for the mongo_scoop package."""


class MongoScoopError(Exception):
    """Base exception for mongo_scoop errors."""

    pass


class InvalidArgumentError(MongoScoopError, ValueError):
    """Raised when a condition builder call has a malformed shape."""

    pass


class ConfigurationError(MongoScoopError):
    """Raised when settings or collection resolution are invalid."""

    pass


class DatabaseError(MongoScoopError):
    """Raised when a database operation fails."""

    pass


class TransactionError(DatabaseError):
    """Raised when a transaction cannot be started, committed or aborted."""

    pass


class DocumentNotFoundError(MongoScoopError):
    """Raised when a single-document lookup matches nothing."""

    pass
