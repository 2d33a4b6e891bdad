"""
Python client for the Task Manager API.

`ClientSession` keeps the signed-in user and token (optionally persisted to a
JSON file so a later process picks it up). `ApiClient` attaches the token to
every call, clears the session on any 401 and turns failures into `ApiError`
carrying the server's message.
"""
import json
import logging
from pathlib import Path
import requests

from taskmanager.utils import password_requirement_errors

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001/api"
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."


class ApiError(Exception):
    def __init__(self, message: str, status: int | None = None):
        self.message = message
        self.status = status
        super().__init__(message)


# -------------------------
# SESSION
# -------------------------
class ClientSession:
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self.token: str | None = None
        self.user: dict | None = None
        self._load()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str, user: dict) -> None:
        self.token = token
        self.user = user
        self._save()

    def logout(self) -> None:
        self.token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()

    def resolve_route(self, path: str) -> str:
        """Where a navigation to `path` actually lands."""
        if path == "/":
            return "/dashboard" if self.is_authenticated else "/login"
        if path in ("/login", "/register") and self.is_authenticated:
            return "/dashboard"
        if path == "/dashboard" and not self.is_authenticated:
            return "/login"
        return path

    def _load(self) -> None:
        if not self.path or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError):
            logger.warning(f"Ignoring unreadable session file {self.path}")
            return
        # both or nothing, like a half-written browser storage
        if isinstance(data, dict) and data.get("token") and data.get("user"):
            self.token = data["token"]
            self.user = data["user"]

    def _save(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": self.token, "user": self.user}))


# -------------------------
# API
# -------------------------
class ApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: ClientSession | None = None,
        http=None,
        timeout: float | None = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or ClientSession()
        # anything with requests' request(method, url, json=, headers=) works,
        # e.g. a requests.Session or FastAPI's TestClient
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, fallback: str, payload=None):
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        kwargs = {"headers": headers}
        if payload is not None:
            kwargs["json"] = payload
        if self.timeout is not None and isinstance(self.http, requests.Session):
            kwargs["timeout"] = self.timeout

        try:
            response = self.http.request(method, f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as e:
            logger.error(f"API error: {method} {path} failed: {e}")
            raise ApiError(NETWORK_ERROR_MESSAGE, status=0) from e

        if response.status_code == 401:
            self.session.logout()

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("message") if isinstance(body, dict) else None
            logger.error(f"API error: {method} {path} -> {response.status_code}")
            raise ApiError(message or fallback, status=response.status_code)

        return response.json()

    # -------------------------
    # AUTH
    # -------------------------
    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "/auth/signin", "Login failed",
                             {"email": email, "password": password})
        self.session.login(data["token"], data["user"])
        return data

    def register(self, email: str, full_name: str, password: str,
                 confirm_password: str | None = None) -> dict:
        if password_requirement_errors(password):
            raise ApiError("Please fix password requirements")
        if confirm_password is not None and password != confirm_password:
            raise ApiError("Passwords do not match")

        data = self._request("POST", "/auth/signup", "Registration failed",
                             {"email": email, "fullName": full_name, "password": password})
        self.session.login(data["token"], data["user"])
        return data

    def logout(self) -> None:
        self.session.logout()

    # -------------------------
    # TASKS
    # -------------------------
    def get_tasks(self) -> list[dict]:
        return self._request("GET", "/tasks", "Failed to load tasks")

    def create_task(self, title: str, description: str = "",
                    due_date: str | None = None, priority: str | None = None) -> dict:
        payload = {"title": title, "description": description,
                   "dueDate": due_date, "priority": priority}
        return self._request("POST", "/tasks", "Failed to create task", payload)

    def update_task(self, task_id: int, **fields) -> dict:
        """Keyword names follow the wire format: completed=True, dueDate=None, ..."""
        return self._request("PUT", f"/tasks/{task_id}", "Failed to update task", fields)

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}", "Failed to delete task")
