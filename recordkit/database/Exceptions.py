class ActiveRecordException(Exception):
    """Base class for every error raised by the record layer."""
    default_message = "Active record error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class ConfigurationError(ActiveRecordException):
    # Missing connection, empty table name or empty class name
    default_message = "Mapped type is not configured"


class RecordNotFound(ActiveRecordException):
    default_message = "Record not found"


class NotLoaded(ActiveRecordException):
    default_message = "Instance not loaded"


class TypeMismatch(ActiveRecordException):
    default_message = "Attribute holds a different kind of value"


class AbsentValue(TypeMismatch):
    default_message = "Attribute has no value"


class UnsupportedColumnType(ActiveRecordException):
    default_message = "Unhandled data type"


class UnknownTable(ActiveRecordException):
    default_message = "No table registered for type"
