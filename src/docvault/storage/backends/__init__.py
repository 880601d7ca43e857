from .local import LocalBackend
from .memory import MemoryBackend
from .s3 import S3Backend

__all__ = ["LocalBackend", "MemoryBackend", "S3Backend"]
