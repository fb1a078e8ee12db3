"""Exceptions raised while talking to the CI host or extracting artifacts."""


class RunCatalogError(RuntimeError):
    """Base error for failed calls to the CI host."""


class RunCommandError(RunCatalogError):
    """A cancel or rerun command was rejected by the CI host."""


class ArtifactUnavailableError(RunCatalogError):
    """An artifact could not be downloaded (not uploaded yet, expired...)."""


class UnsafeArchiveEntryError(ValueError):
    """An archive entry resolves outside of the destination directory."""


class ArchiveExtractionError(OSError):
    """An archive entry could not be written to disk."""
