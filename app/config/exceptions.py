"""Custom exceptions for the photo classifier."""


class PipelineError(Exception):
    """Base exception for pipeline errors. Raise this instead of sys.exit(1)."""
    pass


class ConfigError(PipelineError):
    """Missing or invalid configuration; aborts the run before any file is processed."""
    pass


# -------------------- Model client -------------------- #
class ModelClientError(PipelineError):
    pass


class ModelClientInitError(ModelClientError):
    """The model client could not be constructed."""
    pass


class ModelGenerationError(ModelClientError):
    """The generate-content call failed."""
    pass


class EmptyModelResponseError(ModelClientError):
    """The model answered without any text."""
    pass


# -------------------- Remote store -------------------- #
class UploadError(PipelineError):
    """Create-file request rejected by the remote store."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UploadTransportError(UploadError):
    pass


class FileAlreadyExistsError(UploadError):
    """A file already exists at the destination path; updating is not supported."""
    pass


# -------------------- Retrieval -------------------- #
class ManifestError(PipelineError):
    """The image manifest could not be fetched or has the wrong shape."""
    pass


class CategoryNotFoundError(PipelineError):
    def __init__(self, category: str, available: list[str]):
        super().__init__(
            f"Category '{category}' not found. Available categories: {', '.join(available)}"
        )
        self.category = category
        self.available = available


class ToolCallError(PipelineError):
    """A tool call produced an error result; the message is the text shown to the client."""
    pass
