"""S3 client management and configuration."""

from .s3_client import S3ClientConfig, S3ClientManager, translate_client_error

__all__ = ["S3ClientConfig", "S3ClientManager", "translate_client_error"]
