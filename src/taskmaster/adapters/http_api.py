"""HTTP adapter for the Task and Category services."""

import logging
from datetime import date

import requests

from taskmaster.config import Config, load_config
from taskmaster.core.tasks import Category, Result, task_from_api
from taskmaster.ports.session import Session
from taskmaster.ports.task_service import TaskListing

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Raised when a service call fails."""

    pass


class NetworkError(ServiceError):
    """Raised when the service is unreachable or answers non-2xx."""

    pass


class AuthenticationError(ServiceError):
    """Raised when there is no credential or the service rejects it."""

    pass


class _ApiClient:
    """
    Authenticated JSON client shared by the service adapters.

    Reads the token from the injected session on every call and clears the
    session on HTTP 401. Failures are not retried.
    """

    def __init__(self, session: Session, config: Config | None = None):
        self.config = config or load_config()
        self.session = session
        self._http = requests.Session()

    def _headers(self) -> dict[str, str]:
        token = self.session.get_token()
        if not token:
            raise AuthenticationError("Not signed in. Run 'taskmaster login' first.")
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def request(self, method: str, endpoint: str, payload: dict | None = None) -> dict:
        """Make an authenticated API request and return the JSON envelope."""
        url = f"{self.config.api_base_url}{endpoint}"
        try:
            resp = self._http.request(
                method,
                url,
                headers=self._headers(),
                json=payload,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {endpoint} failed: {e}") from e

        if resp.status_code == 401:
            logger.warning(f"{method} {endpoint} unauthorized, clearing session")
            self.session.clear()
            raise AuthenticationError("Session expired. Run 'taskmaster login' again.")

        if not 200 <= resp.status_code < 300:
            raise NetworkError(f"{method} {endpoint} returned {resp.status_code}: {resp.text}")

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(f"{method} {endpoint} returned invalid JSON") from e


class HttpTaskService:
    """
    Task service over HTTP.

    Implements TaskService protocol. No business logic - just I/O.
    """

    def __init__(self, session: Session, config: Config | None = None):
        self.config = config or load_config()
        self._client = _ApiClient(session, self.config)

    def _result(self, body: dict) -> Result:
        if body.get("status") is False:
            return Result(success=False, error=body.get("message") or "Request rejected")
        data = body.get("data")
        task = task_from_api(data, self.config.tz) if isinstance(data, dict) and data else None
        return Result(success=True, task=task)

    def list(self) -> TaskListing:
        body = self._client.request("GET", "/api/tasks")
        data = body.get("data") or {}
        tz = self.config.tz
        listing = TaskListing()
        for key, kind, bucket in (
            ("regularTasks", "regular", listing.regular),
            ("recurringTasks", "recurring", listing.recurring),
        ):
            for raw in data.get(key) or []:
                try:
                    bucket.append(task_from_api({**raw, "type": kind}, tz))
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed {kind} task {raw!r}: {e}")
        logger.debug(f"Fetched {len(listing.regular)} regular, {len(listing.recurring)} recurring tasks")
        return listing

    def create(self, data: dict) -> Result:
        return self._result(self._client.request("POST", "/api/tasks", data))

    def update(self, uuid: str, data: dict) -> Result:
        return self._result(self._client.request("PUT", f"/api/tasks/{uuid}", data))

    def remove(self, uuid: str) -> Result:
        body = self._client.request("DELETE", f"/api/tasks/{uuid}")
        if body.get("status") is False:
            return Result(success=False, error=body.get("message") or "Request rejected")
        return Result(success=True)

    def set_completed(self, uuid: str, is_recurring: bool, day: date | None = None) -> Result:
        payload: dict = {"recurring": is_recurring}
        if day is not None:
            payload["date"] = day.isoformat()
        return self._result(self._client.request("POST", f"/api/tasks/{uuid}/complete", payload))

    def undo_completed(self, uuid: str, day: date | None = None) -> Result:
        payload = {"date": day.isoformat()} if day is not None else {}
        return self._result(self._client.request("POST", f"/api/tasks/{uuid}/undo", payload))

    def set_archived(self, uuid: str, archived: bool) -> Result:
        return self._result(
            self._client.request("PUT", f"/api/tasks/{uuid}/archive", {"archived": archived})
        )


class HttpCategoryService:
    """
    Category service over HTTP.

    Implements CategoryService protocol. Read-only.
    """

    def __init__(self, session: Session, config: Config | None = None):
        self.config = config or load_config()
        self._client = _ApiClient(session, self.config)

    def list(self) -> list[Category]:
        body = self._client.request("GET", "/api/categories")
        return [Category.from_api(c) for c in body.get("data") or []]
