"""Error types raised while resolving and synthesizing API documents."""


class ApiDocError(Exception):
    """Base class for all API document processing errors."""


class UnsupportedReferenceFormatError(ApiDocError):
    """A $ref that is not an internal pointer (does not start with '#/')."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Unsupported reference format: {ref}")


class UnresolvedReferenceError(ApiDocError):
    """A pointer segment that does not exist in the document."""

    def __init__(self, segment: str, ref: str):
        self.segment = segment
        self.ref = ref
        super().__init__(f"Unable to resolve reference: {ref}, segment: {segment}")


class UnsupportedDocumentFormatError(ApiDocError):
    def __init__(self, message: str = "Unsupported document format. Only Swagger 2.0 and OpenAPI 3.0 are supported."):
        super().__init__(message)


class PathNotFoundError(ApiDocError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Path not found: "{path}"')


class MethodNotFoundError(ApiDocError):
    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f'Method "{method}" not found for path "{path}"')


class StatusCodeNotFoundError(ApiDocError):
    def __init__(self, status_code: str):
        self.status_code = status_code
        super().__init__(f'Status code not found: "{status_code}"')


class BundleError(ApiDocError):
    """An external reference could not be loaded while bundling."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        super().__init__(f"Unable to bundle reference {ref}: {reason}")


class DocumentFetchError(ApiDocError):
    """The API document could not be downloaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to fetch API document from {url}: {reason}")
