"""
Custom exceptions for the terminal application.
"""


class BaseAppError(Exception):
    """Base exception class for application errors."""

    pass


class FileRepositoryError(BaseAppError):
    """Exception raised for file repository (storage collaborator) errors."""

    pass


class EntryNotFoundError(FileRepositoryError):
    """Raised when a path or its parent does not resolve to an existing entry."""

    pass


class EntryExistsError(FileRepositoryError):
    """Raised when creating or renaming would collide with an existing entry."""

    pass


class NotATextFileError(FileRepositoryError):
    """Raised when a file cannot be read as text."""

    pass


class ConfigurationError(BaseAppError):
    """Exception raised for configuration errors."""

    pass


class ShellError(BaseAppError):
    """Base class for errors reported by the command interpreter."""

    pass


class ArgumentError(ShellError):
    """Wrong or missing command arguments."""

    pass


class NotFoundError(ShellError):
    """Named entry absent from the current directory listing."""

    pass


class UnknownCommandError(ShellError):
    """Command name missing from the dispatch table."""

    def __init__(self, name: str):
        super().__init__(f"Command '{name}' not recognized")
        self.name = name


class PathResolutionError(ShellError):
    """Raised when a navigation target cannot be resolved."""

    pass


class EmptyTargetError(PathResolutionError):
    pass


class AbsolutePathNotAllowedError(PathResolutionError):
    pass


class ScriptError(ShellError):
    """Exception raised for script loading or execution errors."""

    pass


class ScriptNotFoundError(ScriptError):
    pass


class ScriptNestingError(ScriptError):
    pass


class SessionBusyError(ShellError):
    """Raised when a submission arrives while another command is running."""

    pass


class SessionLimitError(ShellError):
    """Raised when no session can be opened because every open one is busy."""

    pass
