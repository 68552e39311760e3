from __future__ import annotations


class ServiceError(Exception):
    pass


class ModelConfigurationError(ServiceError):
    pass


class ModelServiceError(ServiceError):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RateLimitedError(ModelServiceError):
    def __init__(self, message: str = "Model rate limit reached. Please wait a minute and try again."):
        super().__init__(message, status_code=429)


class ExtractionError(ServiceError):
    pass


class JsonExtractionError(ExtractionError):
    pass


class ExtractionShapeError(ExtractionError):
    pass


class FileValidationError(ServiceError):
    pass


class UnsupportedFileTypeError(FileValidationError):
    def __init__(self, media_type: str):
        super().__init__(f"Unsupported file type: {media_type}")
        self.media_type = media_type


class OversizedFilesError(FileValidationError):
    def __init__(self, names: list[str], max_bytes: int):
        max_mb = max_bytes // 1_000_000
        super().__init__(
            f"Some files are still too large after compression (max {max_mb}MB): {', '.join(names)}"
        )
        self.names = names
        self.max_bytes = max_bytes


class ImageProcessingError(FileValidationError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"Error processing images: {name}: {reason}")
        self.name = name
        self.reason = reason
