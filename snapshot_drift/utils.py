"""
Utility functions for the Snapshot Drift Detector.
"""

import functools
import logging
import os
from typing import Callable, Optional, Tuple, TypeVar, cast
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import FatalInputError


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """
    Sets up logging configuration for the drift detector.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR). When omitted
            the current level is kept (INFO on first use).

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("snapshot_drift")
    if log_level:
        logger.setLevel(getattr(logging, log_level.upper()))
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)

    # Prevent duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


F = TypeVar("F", bound=Callable[..., str])


def loader_error_handler(func: F) -> F:
    """
    Decorator for consistent error handling and logging in snapshot loaders.
    Catches AWS ClientError and BotoCoreError, logs them, and raises
    FatalInputError: a snapshot that cannot be fetched cannot be compared.
    """

    @functools.wraps(func)
    def wrapper(*args: object, **kwargs: object) -> str:
        logger = setup_logging()
        try:
            return func(*args, **kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "")
            logger.error(f"AWS ClientError in {func.__name__}: {e}")
            if code in ("NoSuchBucket", "AccessDenied"):
                raise FatalInputError(f"Snapshot location is inaccessible ({code}): {e}")
            raise FatalInputError(f"Failed to fetch snapshot: {e}")
        except BotoCoreError as e:
            logger.error(f"AWS error in {func.__name__}: {e}")
            raise FatalInputError(f"Failed to fetch snapshot: {e}")

    return cast(F, wrapper)


def parse_s3_uri(s3_path: str) -> Tuple[str, str]:
    """
    Split an S3 path of the form 's3://bucket/prefix' into bucket and prefix.

    Raises:
        ValueError: If the path has no bucket
    """
    parsed = urlparse(s3_path)
    if parsed.scheme != "s3" or not parsed.netloc:
        raise ValueError(f"Invalid S3 path: {s3_path}")
    return parsed.netloc, parsed.path.lstrip("/")


@loader_error_handler
def download_s3_snapshot(
    s3_path: str, destination: str, region_name: Optional[str] = None
) -> str:
    """
    Downloads every object under an S3 prefix into a local directory.

    The key layout below the prefix is preserved, so category subfolders
    such as 'vms/' survive the download.

    Args:
        s3_path: S3 path in format 's3://bucket/prefix'
        destination: Existing local directory to download into
        region_name: AWS region for the S3 client

    Returns:
        The destination directory

    Raises:
        FatalInputError: If the prefix holds no objects or cannot be read
    """
    logger = setup_logging()
    bucket, prefix = parse_s3_uri(s3_path)
    if prefix and not prefix.endswith("/"):
        prefix += "/"

    logger.info(f"Downloading S3 snapshot: {s3_path}")
    s3_client = boto3.client("s3", region_name=region_name)
    paginator = s3_client.get_paginator("list_objects_v2")
    root = os.path.realpath(destination)
    downloaded = 0
    for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
        for obj in page.get("Contents", []):
            key = obj["Key"]
            relative = key[len(prefix):]
            if not relative or key.endswith("/"):
                continue
            local_path = os.path.realpath(os.path.join(root, relative))
            if os.path.commonpath([root, local_path]) != root:
                logger.warning(f"Skipping S3 key outside snapshot prefix: {key}")
                continue
            os.makedirs(os.path.dirname(local_path), exist_ok=True)
            response = s3_client.get_object(Bucket=bucket, Key=key)
            with open(local_path, "wb") as f:
                f.write(response["Body"].read())
            downloaded += 1

    if not downloaded:
        raise FatalInputError(f"No snapshot documents found at {s3_path}")
    logger.info(f"Successfully downloaded {downloaded} objects from {s3_path}")
    return destination


def read_document_text(path: str) -> str:
    """Reads a snapshot document as text, dropping a UTF-8 byte order mark."""
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()
