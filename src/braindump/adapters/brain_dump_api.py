"""Brain-dump API adapter - HTTP client for extraction, task commits and dump history."""

import logging
import time

import requests

from braindump.config import Config, Tokens, load_config
from braindump.core.history import BrainDump
from braindump.core.preferences import SchedulePreferences
from braindump.core.tasks import (
    ExtractionResult,
    build_extraction_request,
    parse_extraction_response,
)
from braindump.errors import CommitFailed, ExtractionFailed, HistoryFailed

logger = logging.getLogger(__name__)

EXTRACT_ENDPOINT = "/process-brain-dump"
COMMIT_ENDPOINT = "/save-brain-dump-tasks"
DUMPS_TABLE = "/brain_dumps"


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    pass


def _error_message(resp: requests.Response) -> str | None:
    """Server-provided error text, if the body carries one."""
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


class BrainDumpAPIAdapter:
    """
    Brain-dump API adapter.

    Implements ExtractionService, TaskCommitter and DumpHistory protocols.
    Handles token refresh and API calls. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, tokens: Tokens | None = None):
        self.config = config or load_config()
        self.tokens = tokens or Tokens.load()
        self._session = requests.Session()

    @property
    def identity(self) -> str | None:
        """Signed-in user id, if any."""
        return self.tokens.user_id or None

    def _ensure_valid_token(self) -> None:
        """Refresh token if expired or expiring soon."""
        if not self.tokens.access_token:
            raise AuthenticationError("Not signed in. Run 'braindump login' first.")

        # Refresh if expiring within 5 minutes
        if self.tokens.expires_at and time.time() >= self.tokens.expires_at - 300:
            self._refresh_token()

    def _refresh_token(self) -> None:
        """Refresh the access token."""
        if not self.tokens.refresh_token:
            raise AuthenticationError("Session expired. Run 'braindump login' again.")

        resp = self._session.post(
            f"{self.config.auth_url}/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": self.tokens.refresh_token},
            headers=self._key_header(),
        )

        if resp.status_code != 200:
            raise AuthenticationError(f"Token refresh failed: {resp.text}")

        data = resp.json()
        self.tokens.access_token = data["access_token"]
        if "refresh_token" in data:
            self.tokens.refresh_token = data["refresh_token"]
        self.tokens.expires_at = int(time.time()) + data.get("expires_in", 3600)
        self.tokens.save()

    def _key_header(self) -> dict:
        return {"apikey": self.config.api_key} if self.config.api_key else {}

    def auth_headers(self) -> dict:
        """Headers for an authenticated request, refreshing the token first if needed."""
        self._ensure_valid_token()
        return {
            "Authorization": f"Bearer {self.tokens.access_token}",
            **self._key_header(),
        }

    def _post(self, endpoint: str, body: dict) -> requests.Response:
        """Make authenticated API request."""
        return self._session.post(
            f"{self.config.api_base_url}{endpoint}",
            json=body,
            headers=self.auth_headers(),
        )

    def extract(self, content: str, preferences: SchedulePreferences) -> ExtractionResult:
        """Send content for extraction and normalize the response."""
        body = build_extraction_request(content, preferences.to_api())
        try:
            resp = self._post(EXTRACT_ENDPOINT, body)
        except AuthenticationError as e:
            raise ExtractionFailed(str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Extraction request failed: {e}")
            raise ExtractionFailed() from e

        if not resp.ok:
            logger.error(f"Extraction failed with status {resp.status_code}")
            raise ExtractionFailed(_error_message(resp))

        try:
            payload = resp.json()
        except ValueError as e:
            raise ExtractionFailed("The server returned an unreadable response.") from e
        if not isinstance(payload, dict):
            raise ExtractionFailed("The server returned an unreadable response.")

        result = parse_extraction_response(payload)
        logger.info(f"Extracted {len(result.tasks)} tasks")
        return result

    def commit(
        self,
        tasks: list[dict],
        daily_schedule: dict | None,
        identity: str,
        original_content: str,
    ) -> bool:
        """Persist the approved tasks in a single request."""
        body = {
            "tasks": tasks,
            "dailySchedule": daily_schedule,
            "userId": identity,
            "originalContent": original_content,
        }
        try:
            resp = self._post(COMMIT_ENDPOINT, body)
        except AuthenticationError as e:
            raise CommitFailed(str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Commit request failed: {e}")
            raise CommitFailed() from e

        if not resp.ok:
            logger.error(f"Commit failed with status {resp.status_code}")
            raise CommitFailed(_error_message(resp))

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if isinstance(payload, dict) and payload.get("success") is False:
            raise CommitFailed(_error_message(resp))

        logger.info(f"Committed {len(tasks)} tasks")
        return True

    def _dumps_request(
        self, method: str, params: dict, body: dict | None = None, prefer: str | None = None
    ) -> requests.Response:
        """Make authenticated request against the stored dumps table."""
        try:
            headers = self.auth_headers()
            if prefer:
                headers["Prefer"] = prefer
            resp = self._session.request(
                method,
                f"{self.config.rest_url}{DUMPS_TABLE}",
                params=params,
                json=body,
                headers=headers,
            )
        except AuthenticationError as e:
            raise HistoryFailed(str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Brain dump {method} failed: {e}")
            raise HistoryFailed() from e

        if not resp.ok:
            logger.error(f"Brain dump {method} failed with status {resp.status_code}")
            raise HistoryFailed(_error_message(resp))
        return resp

    def list_dumps(self) -> list[BrainDump]:
        """The signed-in user's dumps, newest first."""
        if not self.identity:
            raise HistoryFailed("Not signed in. Run 'braindump login' first.")

        resp = self._dumps_request(
            "GET",
            {"select": "*", "user_id": f"eq.{self.identity}", "order": "created_at.desc"},
        )
        try:
            rows = resp.json()
        except ValueError as e:
            raise HistoryFailed("The server returned an unreadable response.") from e
        return [BrainDump.from_api(row) for row in rows or []]

    def update_dump(self, dump_id: str, raw_content: str) -> BrainDump:
        """Replace a dump's text and return the stored row."""
        resp = self._dumps_request(
            "PATCH",
            {"id": f"eq.{dump_id}"},
            body={"raw_content": raw_content},
            prefer="return=representation",
        )
        try:
            rows = resp.json()
        except ValueError:
            rows = []
        if not rows:
            raise HistoryFailed("That brain dump no longer exists.")
        logger.info(f"Updated brain dump {dump_id}")
        return BrainDump.from_api(rows[0])

    def delete_dump(self, dump_id: str) -> None:
        """Delete a stored dump."""
        self._dumps_request("DELETE", {"id": f"eq.{dump_id}"})
        logger.info(f"Deleted brain dump {dump_id}")


def login(email: str, password: str, config: Config | None = None) -> Tokens:
    """Exchange email and password for session tokens and save them."""
    config = config or load_config()

    if not email or not password:
        raise AuthenticationError("Email and password are required")

    headers = {"apikey": config.api_key} if config.api_key else {}
    try:
        resp = requests.post(
            f"{config.auth_url}/token",
            params={"grant_type": "password"},
            json={"email": email.strip().lower(), "password": password},
            headers=headers,
        )
    except requests.RequestException as e:
        raise AuthenticationError(f"Could not reach auth server: {e}") from e

    if resp.status_code != 200:
        raise AuthenticationError(_error_message(resp) or "Invalid email or password")

    data = resp.json()
    tokens = Tokens(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token", ""),
        expires_at=int(time.time()) + data.get("expires_in", 3600),
        user_id=(data.get("user") or {}).get("id", ""),
    )
    tokens.save()
    return tokens
