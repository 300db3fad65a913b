# PURPOSE: HTTP client for the todo API (list endpoint).

import logging

import httpx

from .models import PagedResult, Task

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Api-Key"


class ApiClient:
    """Blocking client: one request per call, errors propagate as httpx.HTTPError."""

    def __init__(self, api_key: str, host_name: str, *, transport: httpx.BaseTransport | None = None,
                 timeout: float = 10.0):
        self.api_key = api_key
        self.host_name = host_name.rstrip("/")
        self.http_client = httpx.Client(
            base_url=self.host_name,
            headers={API_KEY_HEADER: api_key},
            timeout=timeout,
            transport=transport,
        )

    def list(self, page_num: int = 0) -> PagedResult[Task]:
        logger.debug("GET %s/v1/todos?page=%s", self.host_name, page_num)
        response = self.http_client.get("/v1/todos", params={"page": page_num})
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            logger.error(
                "Remote API at %s returned response with status %s",
                response.request.url,
                response.status_code,
            )
            raise
        return PagedResult[Task].model_validate(response.json())

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
