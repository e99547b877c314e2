"""Error taxonomy for kschema.

Every failure raised by the core belongs to exactly one of the kinds below,
so callers can branch on the exception type instead of matching messages.
The originating exception is always chained (``raise ... from exc``).
"""


class KSchemaError(RuntimeError):
    """Base class for all kschema errors."""


class InvalidFilterError(KSchemaError):
    """Raised for a malformed name pattern or filter combination. Not retried."""


class QueryError(KSchemaError):
    """Raised when cluster metadata cannot be read. The caller may retry."""


class TargetLookupError(KSchemaError):
    """Raised when the external target lookup service fails."""


class StorageError(KSchemaError):
    """Raised when a schema definition cannot be persisted."""


class BuildError(KSchemaError):
    """Raised when an execution configuration cannot be generated."""


class ExecutionError(KSchemaError):
    """Raised when the schema apply engine reports a failure."""


class ClusterUriError(KSchemaError, ValueError):
    """Raised for a cluster URI that is not of the form https://<name>.<rest>."""


class AuthError(KSchemaError):
    """Raised when a Kusto client cannot be created."""


class RegistryError(KSchemaError):
    """Raised when the schema registry cannot be read."""
