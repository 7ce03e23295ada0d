"""Exceptions raised by the reconciliation pipeline."""


class ReconcileError(Exception):
    """Base class for failures that stop a pipeline run."""


class SourceDownloadError(ReconcileError):
    """A source feed could not be downloaded."""

    def __init__(self, url, cause=None):
        self.url = url
        self.cause = cause
        message = f"Unable to download {url}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class MissingInputError(ReconcileError):
    """A required local input file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Missing required input file: {path}")
