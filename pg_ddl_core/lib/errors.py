"""
Error types raised by the comparison and planning engine.
"""


class PgDdlError(Exception):
    """Base class for all pg-ddl-core errors."""


class DirectoryNotFoundError(PgDdlError, FileNotFoundError):
    """An environment directory given to the comparator does not exist."""

    def __init__(self, path: str, label: str = "Directory"):
        self.path = str(path)
        self.label = label
        super().__init__(f"{label} not found: {self.path}")

    def __str__(self) -> str:
        return f"{self.label} not found: {self.path}"


class ConfigError(PgDdlError):
    """A configuration file could not be read or validated."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Error reading config file {self.path}: {reason}")


class MigrationAborted(PgDdlError):
    """The reviewer aborted an interactive migration review."""


class SqlFileError(PgDdlError):
    """A captured .sql file could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")
