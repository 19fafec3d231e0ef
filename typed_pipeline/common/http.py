"""HTTP client with retries and timeouts for remote sources."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from typed_pipeline.common.constants import USER_AGENT
from typed_pipeline.common.errors import SourceUnavailableError

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    read: float = 120.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 5
    multiplier: float = 1.0
    max_wait: float = 30.0


class HttpRequestError(SourceUnavailableError):
    error_code = "HTTP_ERROR"


class RetryableHttpError(HttpRequestError):
    pass


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _raise_for_status_or_retry(self, response: requests.Response) -> None:
        status = response.status_code
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableHttpError(f"Retryable HTTP status: {status}")
        if status >= 400:
            raise HttpRequestError(f"HTTP status: {status}")

    def _get_bytes(self, url: str, headers: dict[str, str] | None) -> bytes:
        request_headers = {"User-Agent": USER_AGENT}
        if headers:
            request_headers.update(headers)
        try:
            response = self.session.request(
                method="GET",
                url=url,
                headers=request_headers,
                timeout=(self.timeout.connect, self.timeout.read),
            )
        except requests.Timeout as exc:
            raise RetryableHttpError(f"Timed out fetching {url}") from exc
        except requests.RequestException as exc:
            raise HttpRequestError(f"Cannot fetch {url}: {exc}") from exc

        with response:
            self._raise_for_status_or_retry(response)
            return response.content

    def get_bytes(self, url: str, *, headers: dict[str, str] | None = None) -> bytes:
        @retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )
        def _wrapped() -> bytes:
            return self._get_bytes(url, headers)

        return _wrapped()
