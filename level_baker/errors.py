"""Exception types.

``BakeError`` and its subclasses are per-document failures: the job that
raised them logs the message and skips the affected output, other documents
are unaffected. ``ConfigError`` is a setup failure that stops the run before
any document is touched.
"""

from pathlib import Path


class ConfigError(ValueError):
    """``levels.toml`` is missing, unparsable or holds invalid values."""


class BakeError(Exception):
    """Base class for failures scoped to a single document."""


class MissingLevelConfigError(BakeError, LookupError):
    def __init__(self, level_name: str) -> None:
        super().__init__(f"No level info for {level_name!r}")
        self.level_name = level_name


class DocumentReadError(BakeError):
    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"Error reading {str(path)!r}: {cause}")
        self.path = path
        self.cause = cause


class MissingGroupError(BakeError, LookupError):
    def __init__(self, role: str, position: int, found: int) -> None:
        super().__init__(
            f"No {role} group at position {position} ({found} groups in document)"
        )
        self.role = role
        self.position = position


class LayerShapeError(BakeError, ValueError):
    def __init__(self, name: str, shape: tuple, expected: tuple) -> None:
        super().__init__(
            f"Layer {name!r} has pixel shape {shape}, expected {expected}"
        )


class UnknownAreaTypeError(BakeError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown area type {name!r}")
        self.name = name


class TooManyAreaLayersError(BakeError, ValueError):
    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Too many layers in area group ({count} > {limit})")
        self.count = count
        self.limit = limit


class OutputWriteError(BakeError):
    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"Error saving {str(path)!r}: {cause}")
        self.path = path
        self.cause = cause
