class GlacierUpError(Exception):
    """
    Base class for everything this package raises on purpose.
    """


class ServiceError(GlacierUpError):
    """
    The archival service answered with an error (job not ready, no such
    vault, throttled...).
    """

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class ClientConfigError(GlacierUpError):
    """
    The request never made it to the service: bad credentials, invalid
    parameters, unreachable endpoint.
    """


class ExportError(GlacierUpError):
    """
    Writing an inventory, a retrieved archive or an exported log failed.
    """


class JobFailedError(GlacierUpError):
    """
    A retrieval job could not be driven to completion.
    """


class LogWriteError(GlacierUpError):
    """
    The upload log could not be written. Without it there is no record of
    which archive holds which file, so callers treat this as fatal.
    """


class ConfigDirectoryError(GlacierUpError):
    """
    No directory is available to hold properties and logs.
    """
