"""locsync – Error taxonomy.

Every failure the engine raises on purpose derives from ``I18nError`` so the
CLI and the synchronizer can tell catalog problems apart from bugs.
"""


class I18nError(Exception):
    """Base class for catalog errors."""
    pass


class FormatError(I18nError):
    """Raised when a translation key string is malformed."""
    pass


class NotFoundError(I18nError):
    """Raised when an expected key, path, block or property is absent."""
    pass


class DuplicateKeyError(I18nError):
    """Raised when an add targets a key that already exists."""
    pass


class ParseError(I18nError):
    """Raised when a constants block cannot be located or destructured."""
    pass


class BlockNotFoundError(NotFoundError, ParseError):
    """Raised when a named constant block is missing from a strings file."""

    def __init__(self, constant_name: str, file_path: str) -> None:
        self.constant_name = constant_name
        self.file_path = file_path
        super().__init__(f"Constant {constant_name} not found in {file_path}")


class LocaleFileNotFoundError(I18nError, FileNotFoundError):
    """Raised when a locale or constants file for a known domain is missing."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"File not found: {file_path}")


class WorkspaceViolation(I18nError):
    """Raised when a path escapes the project root."""
    pass
