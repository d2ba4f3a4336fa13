from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from .errors import BookmarkApiError, MalformedResponse, NetworkError, RemoteRejection
from .run_log import RunContext

MAX_TITLE_LENGTH = 255
ELLIPSIS = "..."
ERROR_EXCERPT_LENGTH = 200


def truncate_title(title: str, limit: int = MAX_TITLE_LENGTH) -> str:
    """Shorten a title to ``limit`` characters, ending in an ellipsis when there is room for one."""

    if len(title) <= limit:
        return title
    if limit >= len(ELLIPSIS):
        return title[: limit - len(ELLIPSIS)] + ELLIPSIS
    return title[:limit]


def build_bookmark_payload(title: str, text: str, source_name: Optional[str] = None) -> Dict[str, Any]:
    """Assemble the JSON body for a root-level text bookmark.

    The note names the file the text came from; without ``source_name`` it is
    rebuilt from the title.
    """

    return {
        "title": truncate_title(title)
        ,"text": text
        ,"type": "text"
        ,"archived": False
        ,"favourited": False
        ,"note": f"Imported from Markdown file: {source_name or title + '.md'}"
        ,"summary": ""
    }


class KarakeepClient:
    def __init__(
        self
        ,base_url: str
        ,api_key: str
        ,*
        ,context: Optional[RunContext] = None
        ,timeout: Optional[float] = None
        ,debug_logger: Optional[logging.Logger] = None
        ,session: Optional[requests.Session] = None
    ) -> None:
        """Initialize a session configured with the API key."""

        self.base_url = base_url
        self.context = context if context is not None else RunContext()
        self.timeout = timeout
        self.debug_logger = debug_logger
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}"
                ,"Content-Type": "application/json"
                ,"Accept": "application/json"
            }
        )

    def _request(self, method: str, url: str, body: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """Send one request and return the decoded JSON body, or None for a contentless reply.

        Raises RemoteRejection for non-2xx statuses and NetworkError for transport
        or decoding failures. Both are logged here with the method and URL.
        """

        self.context.log(f"API Request: {method} {url}")
        if self.debug_logger and body is not None:
            self.debug_logger.info("Sending %s %s:\n%s", method, url, json.dumps(body, indent=2))

        try:
            response = self.session.request(
                method
                ,url
                ,data=json.dumps(body) if body is not None else None
                ,timeout=self.timeout
            )

            if self.debug_logger:
                self.debug_logger.info("Response %s for %s %s:\n%s", response.status_code, method, url, response.text)

            if not 200 <= response.status_code < 300:
                self.context.error(f"API Response Error: {method} {url} -> Status {response.status_code}")
                raise RemoteRejection(
                    response.status_code
                    ,response.reason or ""
                    ,response.text[:ERROR_EXCERPT_LENGTH]
                )

            if response.status_code == 204 or response.headers.get("Content-Length") == "0" or not response.content:
                self.context.log(f"API Response OK: {method} {url} -> Status {response.status_code} (No Content)")
                return None

            data = response.json()
            self.context.log(f"API Response OK: {method} {url} -> Status {response.status_code}")
            return data

        except RemoteRejection as err:
            self.context.error(f"Fetch Error for {method} {url}: {err}")
            raise
        except (requests.RequestException, ValueError) as err:
            self.context.error(f"Fetch Error for {method} {url}: {err}")
            raise NetworkError(str(err)) from err

    def create_text_bookmark(self, title: str, text: str, source_name: Optional[str] = None) -> bool:
        """Create a root-level text bookmark. Returns True only when the API confirms an id."""

        payload = build_bookmark_payload(title, text, source_name)
        self.context.log(f'Attempting CREATE: Create global bookmark for "{title}"...')
        create_url = f"{self.base_url}/bookmarks"

        try:
            data = self._request("POST", create_url, payload)
            raw_id = data.get("id") if isinstance(data, dict) else None
            if raw_id is None or raw_id == "":
                excerpt = json.dumps(data)[:ERROR_EXCERPT_LENGTH]
                raise MalformedResponse(
                    f"Could not extract 'id' from POST /bookmarks response for \"{title}\". Response: {excerpt}..."
                )
            bookmark_id = str(raw_id)
        except MalformedResponse as err:
            self.context.error(f"ERROR: {err}")
            return False
        except BookmarkApiError as err:
            self.context.error(f'An unexpected error occurred during CREATE for "{title}": {err}')
            return False

        self.context.log(f'Successfully CREATED Bookmark ID {bookmark_id} for "{title}"')
        return True


def create_text_bookmark(
    base_url: str
    ,api_key: str
    ,title: str
    ,text: str
    ,*
    ,source_name: Optional[str] = None
    ,context: Optional[RunContext] = None
) -> bool:
    """One-shot helper: build a client for a single bookmark and close its session afterwards."""

    client = KarakeepClient(base_url, api_key, context=context)
    try:
        return client.create_text_bookmark(title, text, source_name)
    finally:
        client.session.close()
