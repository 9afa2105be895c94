"""Error taxonomy for patch config generation.

Every failure is fatal: it aborts the operation that detected it and
propagates unchanged up to the caller of ``generate_config``.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Failure categories reported by the generator."""

    SOURCE_NOT_DIRECTORY = "SourceNotDirectory"
    TARGET_ALREADY_EXISTS = "TargetAlreadyExists"
    READ_SOURCE_DIRECTORY_FAILED = "ReadSourceDirectoryFailed"
    READ_SOURCE_DIRECTORY_ENTRY_FAILED = "ReadSourceDirectoryEntryFailed"
    SOURCE_FILE_NAME_INVALID = "SourceFileNameInvalid"
    CREATE_TARGET_DIRECTORY_FAILED = "CreateTargetDirectoryFailed"
    READ_SOURCE_FILE_FAILED = "ReadSourceFileFailed"
    WRITE_TARGET_FILE_FAILED = "WriteTargetFileFailed"
    NO_ARCHIVE_FILE = "NoArchiveFile"
    OPEN_ARCHIVE_FAILED = "OpenArchiveFailed"
    READ_ARCHIVE_FAILED = "ReadArchiveFailed"
    METADATA_FAILED = "MetadataFailed"
    METADATA_DIRECTORY_FAILED = "MetadataDirectoryFailed"
    WRITE_METADATA_FAILED = "WriteMetadataFailed"
    READ_METADATA_FAILED = "ReadMetadataFailed"
    ARCHIVE_CONTAINS_DIRECTORY = "ArchiveContainsDirectory"


class PatchConfigErrorData(BaseModel):
    """Structured data for generation failures.

    Args:
        kind: Failure category
        message: Human-readable reason
        path: Filesystem path the failure relates to (if any)
        cause: Original exception that caused this error
    """

    model_config = {"arbitrary_types_allowed": True}

    kind: ErrorKind
    message: str
    path: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class PatchConfigError(Exception):
    """Base exception for all generation failures.

    Subclasses fix ``kind``; callers usually only need ``str(error)``.

    Attributes:
        data: Structured error data (PatchConfigErrorData)
        kind: Failure category
        message: Human-readable reason
        path: Related filesystem path
        cause: Original exception that caused this error
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = PatchConfigErrorData(
            kind=self.kind,
            message=message,
            path=str(path) if path is not None else None,
            cause=cause,
        )
        self.message = self.data.message
        self.path = self.data.path
        self.cause = self.data.cause

        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class SourceNotDirectoryError(PatchConfigError):
    """Source path does not exist or is not a directory."""

    kind = ErrorKind.SOURCE_NOT_DIRECTORY


class TargetAlreadyExistsError(PatchConfigError):
    """Target path already exists; every run is a full rebuild."""

    kind = ErrorKind.TARGET_ALREADY_EXISTS


class ReadSourceDirectoryError(PatchConfigError):
    """Source directory could not be listed."""

    kind = ErrorKind.READ_SOURCE_DIRECTORY_FAILED


class ReadSourceDirectoryEntryError(PatchConfigError):
    """A directory entry could not be inspected."""

    kind = ErrorKind.READ_SOURCE_DIRECTORY_ENTRY_FAILED


class SourceFileNameInvalidError(PatchConfigError):
    """A filesystem entry name is not valid text."""

    kind = ErrorKind.SOURCE_FILE_NAME_INVALID


class CreateTargetDirectoryError(PatchConfigError):
    """A target directory could not be created."""

    kind = ErrorKind.CREATE_TARGET_DIRECTORY_FAILED


class ReadSourceFileError(PatchConfigError):
    """A source file could not be read."""

    kind = ErrorKind.READ_SOURCE_FILE_FAILED


class WriteTargetFileError(PatchConfigError):
    """A target file could not be written."""

    kind = ErrorKind.WRITE_TARGET_FILE_FAILED


class ArchiveComponentMissingError(PatchConfigError):
    """The header or payload half of an archive pair is missing."""

    kind = ErrorKind.NO_ARCHIVE_FILE


class OpenArchiveError(PatchConfigError):
    """The archive backend could not open a header/payload pair."""

    kind = ErrorKind.OPEN_ARCHIVE_FAILED


class ReadArchiveError(PatchConfigError):
    """A named member could not be read from an opened archive."""

    kind = ErrorKind.READ_ARCHIVE_FAILED


class MetadataSerializationError(PatchConfigError):
    """The manifest or status could not be encoded."""

    kind = ErrorKind.METADATA_FAILED


class MetadataDirectoryError(PatchConfigError):
    """The metadata directory could not be created."""

    kind = ErrorKind.METADATA_DIRECTORY_FAILED


class WriteMetadataError(PatchConfigError):
    """A metadata file could not be written."""

    kind = ErrorKind.WRITE_METADATA_FAILED


class ReadMetadataError(PatchConfigError):
    """A metadata file could not be read or decoded."""

    kind = ErrorKind.READ_METADATA_FAILED


class ArchiveContainsDirectoryError(PatchConfigError):
    """A pre-unpacked archive directory holds something other than files."""

    kind = ErrorKind.ARCHIVE_CONTAINS_DIRECTORY
