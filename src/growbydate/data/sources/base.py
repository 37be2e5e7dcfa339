"""
Base classes for the published planner datasets.
Provides unified fetching, in-flight deduplication, and session caching.
"""
from abc import ABC
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional
from pathlib import Path
import asyncio
import json
import logging

import requests

from growbydate.core.config import DataConfig, get_config
from growbydate.core.exceptions import (
    DataSourceError, ConfigurationError, ErrorContext, handle_exception
)
from growbydate.core.types import JsonFetcher


class LocalSiteFetcher:
    """Reads datasets from a built site directory on disk."""

    def __init__(self, site_root: Path):
        self.site_root = Path(site_root)
        self.logger = logging.getLogger("growbydate.data.fetch.local")

    def resolve(self, path: str) -> Path:
        return self.site_root / path.lstrip("/")

    def _read(self, file_path: Path) -> Any:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    async def fetch_json(self, path: str) -> Any:
        file_path = self.resolve(path)
        self.logger.debug(f"Reading {file_path}")
        try:
            return await asyncio.to_thread(self._read, file_path)
        except FileNotFoundError as e:
            raise DataSourceError(f"Dataset not found: {path}",
                                  ErrorContext(operation="fetch_json")) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Failed to read dataset {path}: {e}",
                                  ErrorContext(operation="fetch_json")) from e
        except OSError as e:
            raise handle_exception(
                e, ErrorContext(operation="fetch_json", details={"path": str(file_path)})
            ) from e


class HttpSiteFetcher:
    """Fetches datasets from the published site over HTTP."""

    def __init__(self, base_url: str, timeout_seconds: int = 30,
                 user_agent: str = "GrowByDate-Planner/1.0",
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})
        self.logger = logging.getLogger("growbydate.data.fetch.http")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get(self, url: str) -> Any:
        response = self.session.get(url, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.json()

    async def fetch_json(self, path: str) -> Any:
        url = self.url_for(path)
        self.logger.info(f"Fetching {url}")
        try:
            return await asyncio.to_thread(self._get, url)
        except (requests.exceptions.JSONDecodeError, json.JSONDecodeError) as e:
            raise DataSourceError(f"Invalid JSON from {url}: {e}",
                                  ErrorContext(operation="fetch_json")) from e
        except requests.exceptions.RequestException as e:
            # Connection, timeout and status errors are all OSError subclasses
            raise handle_exception(
                e, ErrorContext(operation="fetch_json", details={"url": url})
            ) from e
        except ValueError as e:
            raise DataSourceError(f"Invalid response from {url}: {e}",
                                  ErrorContext(operation="fetch_json")) from e

    def close(self):
        self.session.close()


def create_fetcher(config: Optional[DataConfig] = None) -> JsonFetcher:
    """Build the fetcher the configuration points at (HTTP wins over local)."""
    config = config or get_config().data
    if config.base_url:
        return HttpSiteFetcher(config.base_url, config.timeout_seconds, config.user_agent)
    if config.site_root is not None:
        return LocalSiteFetcher(config.site_root)
    raise ConfigurationError(
        "No dataset location configured: set data.base_url or data.site_root",
        ErrorContext(component="data", operation="create_fetcher"),
    )


class PendingRequestCache:
    """
    Session cache for immutable resources with in-flight deduplication.

    A key is either resolved (value stored for the cache's lifetime) or
    pending (one task loading it). Callers asking for a pending key await
    the same task. Awaiters are shielded: cancelling a caller does not
    cancel the load, which still completes and fills the cache.
    """

    def __init__(self, name: str = "cache"):
        self.name = name
        self._resolved: Dict[str, Any] = {}
        self._pending: Dict[str, asyncio.Task] = {}
        self.logger = logging.getLogger(f"growbydate.data.cache.{name}")

    def __contains__(self, key: str) -> bool:
        return key in self._resolved

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def peek(self, key: str, default: Any = None) -> Any:
        return self._resolved.get(key, default)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._resolved:
            self.logger.debug(f"Cache hit for {key}")
            return self._resolved[key]

        task = self._pending.get(key)
        if task is None:
            task = asyncio.create_task(self._load(key, loader))
            task.add_done_callback(lambda t: self._log_outcome(key, t))
            self._pending[key] = task
        else:
            self.logger.debug(f"Joining in-flight load for {key}")

        return await asyncio.shield(task)

    def _log_outcome(self, key: str, task: asyncio.Task):
        """Retrieve the load's outcome even when every awaiter was cancelled."""
        if task.cancelled():
            self.logger.debug(f"Load for {key} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            self.logger.warning(f"Load for {key} failed: {exc}")

    async def _load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await loader()
            self._resolved[key] = value
            return value
        finally:
            self._pending.pop(key, None)


class DatasetSource(ABC):
    """
    Abstract base class for the planner's dataset accessors.
    Implements common patterns: path resolution, caching, logging.
    """

    def __init__(self, name: str, fetcher: JsonFetcher,
                 cache: Optional[PendingRequestCache] = None):
        self.name = name
        self.fetcher = fetcher
        self.cache = cache or PendingRequestCache(name)
        self.logger = logging.getLogger(f"growbydate.data.{name}")

    async def _fetch_payload(self, path: str) -> Any:
        """Fetch one document, logging timing. Raises DataSourceError."""
        start_time = datetime.now()
        payload = await self.fetcher.fetch_json(path)
        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
        self.logger.info(f"Loaded {path} in {elapsed_ms:.1f} ms")
        return payload

    def get_metadata(self) -> Dict[str, Any]:
        """Get source metadata"""
        return {
            "name": self.name,
            "type": self.__class__.__name__,
            "fetcher": self.fetcher.__class__.__name__,
        }
