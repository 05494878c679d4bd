"""Exception types raised by repoctl."""


class RepoctlError(Exception):
    """Base class for all repoctl errors."""

    pass


class ConfigError(RepoctlError):
    """Configuration file could not be loaded."""

    pass


class MalformedFilename(RepoctlError):
    """A filename does not follow the package filename format."""

    def __init__(self, filename: str, reason: str = "not a package filename"):
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


class IndexUnreadable(RepoctlError):
    """The repository database is missing or cannot be parsed."""

    def __init__(self, path, reason: str, missing: bool = False):
        super().__init__(f"cannot read database {path}: {reason}")
        self.path = path
        self.missing = missing


class DatabaseError(RepoctlError):
    """repo-add or repo-remove failed."""

    pass


class RegistryError(RepoctlError):
    """Error from the AUR."""

    pass


class InvalidCriterion(RepoctlError):
    """An unknown filter criterion was given."""

    pass


class MutationFailed(RepoctlError):
    """A single planned mutation failed."""

    def __init__(self, name: str, cause: Exception | str):
        super().__init__(f"{name}: {cause}")
        self.name = name
        self.cause = cause
