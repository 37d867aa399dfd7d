"""Async Slack Web API client.

Every request goes through a ``RequestExecutor`` and declares whether it is
idempotent: reads retry on network and 5xx failures, writes
(``chat.postMessage``, ``reactions.add``, ``canvases.*``) retry only on
rate limits.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import httpx

from slack_mcp.client.models import CanvasChange, TokenType
from slack_mcp.core.errors import SlackNetworkError, SlackRateLimitError
from slack_mcp.core.resilience import (
    Idempotency,
    RequestExecutor,
    RetryConfig,
    SleepFunc,
    raise_for_slack_status,
)
from slack_mcp.core.resilience.classify import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_RATE_LIMIT_MESSAGE,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://slack.com/api"

MAX_CHANNEL_PAGE = 200
MAX_HISTORY_PAGE = 200
MAX_REPLIES_PAGE = 200
MAX_USERS_PAGE = 200
MAX_SEARCH_COUNT = 100
MAX_CANVAS_PAGE = 100

CANVAS_DOWNLOAD_ERROR = "Failed to download canvas: {status}"
CANVAS_DOWNLOAD_RATE_LIMITED = "Slack file download rate limited"

JsonDict = Dict[str, Any]


def _only_rate_limits(error: Exception, attempt: int) -> bool:
    return isinstance(error, SlackRateLimitError)


class SlackClient:
    """Thin async wrapper over the Slack Web API methods the tools need.

    Args:
        token: Bot (``xoxb-``) or user (``xoxp-``) token.
        token_type: Which kind of token *token* is.
        team_id: Workspace id sent with ``conversations.list`` and
            ``users.list``.
        channel_ids: Optional allow-list; when set, channel listing only
            returns these channels.
        retry_config: Client-level retry defaults.
        timeout: Per-request timeout in seconds.
        base_url: Slack Web API root.
        sleep_func: Injectable sleep for tests.
    """

    def __init__(
        self,
        token: str,
        token_type: TokenType = TokenType.BOT,
        *,
        team_id: Optional[str] = None,
        channel_ids: Iterable[str] = (),
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 30.0,
        base_url: str = DEFAULT_BASE_URL,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self.token_type = TokenType(token_type)
        self.team_id = team_id
        self.channel_ids: List[str] = [c.strip() for c in channel_ids if c and c.strip()]
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._executor = RequestExecutor(retry_config, sleep_func=sleep_func)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    @property
    def retry_config(self) -> RetryConfig:
        return self._executor.defaults

    def is_user_mode(self) -> bool:
        """Messages appear as the user rather than the bot app."""
        return self.token_type is TokenType.USER

    def _url(self, method: str) -> str:
        return f"{self.base_url}/{method}"

    async def _send(
        self,
        http_method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        error_message: str = DEFAULT_ERROR_MESSAGE,
        rate_limit_message: str = DEFAULT_RATE_LIMIT_MESSAGE,
    ) -> httpx.Response:
        """Perform one HTTP exchange and classify its outcome."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if http_method == "GET":
                    response = await client.get(url, params=params, headers=headers or self.headers)
                else:
                    response = await client.post(url, json=json, headers=headers or self.headers)
        except httpx.RequestError as e:
            raise SlackNetworkError(
                f"Slack API request failed: {type(e).__name__}: {e}",
                details={"url": url, "method": http_method},
                original_error=e,
            ) from e

        raise_for_slack_status(
            response,
            url,
            error_message=error_message,
            rate_limit_message=rate_limit_message,
            method=http_method,
        )
        return response

    async def _request_json(
        self,
        http_method: str,
        api_method: str,
        idempotency: Idempotency,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
    ) -> JsonDict:
        url = self._url(api_method)

        async def attempt(_attempt: int) -> JsonDict:
            response = await self._send(http_method, url, params=params, json=json)
            return response.json()

        return await self._executor.execute(attempt, idempotency)

    async def _get(self, api_method: str, params: Mapping[str, Any]) -> JsonDict:
        return await self._request_json(
            "GET", api_method, Idempotency.IDEMPOTENT, params=_clean_params(params)
        )

    async def _post(self, api_method: str, body: Mapping[str, Any]) -> JsonDict:
        return await self._request_json(
            "POST", api_method, Idempotency.NON_IDEMPOTENT, json=body
        )

    # Channels

    async def get_channels(self, limit: int = 100, cursor: Optional[str] = None) -> JsonDict:
        """List channels, or only the allow-listed ones when configured."""
        if not self.channel_ids:
            return await self._get(
                "conversations.list",
                {
                    "types": "public_channel,private_channel",
                    "exclude_archived": "true",
                    "limit": min(limit, MAX_CHANNEL_PAGE),
                    "team_id": self.team_id,
                    "cursor": cursor,
                },
            )

        channels: List[JsonDict] = []
        for channel_id in self.channel_ids:
            data = await self._get("conversations.info", {"channel": channel_id})
            channel = data.get("channel")
            if data.get("ok") and channel and not channel.get("is_archived"):
                channels.append(channel)
            else:
                logger.debug(
                    "Skipping channel from allow-list",
                    extra={"channel_id": channel_id, "slack_error": data.get("error")},
                )

        return {"ok": True, "channels": channels, "response_metadata": {"next_cursor": ""}}

    async def get_channel_history(
        self,
        channel_id: str,
        limit: int = 10,
        oldest: Optional[str] = None,
        latest: Optional[str] = None,
        cursor: Optional[str] = None,
        inclusive: Optional[bool] = None,
    ) -> JsonDict:
        return await self._get(
            "conversations.history",
            {
                "channel": channel_id,
                "limit": min(limit, MAX_HISTORY_PAGE),
                "oldest": oldest,
                "latest": latest,
                "cursor": cursor,
                "inclusive": inclusive,
            },
        )

    async def get_thread_replies(
        self,
        channel_id: str,
        thread_ts: str,
        cursor: Optional[str] = None,
        limit: int = 100,
    ) -> JsonDict:
        return await self._get(
            "conversations.replies",
            {
                "channel": channel_id,
                "ts": thread_ts,
                "limit": min(limit, MAX_REPLIES_PAGE),
                "cursor": cursor,
            },
        )

    # Messages

    async def post_message(self, channel_id: str, text: str) -> JsonDict:
        return await self._post("chat.postMessage", {"channel": channel_id, "text": text})

    async def post_reply(self, channel_id: str, thread_ts: str, text: str) -> JsonDict:
        return await self._post(
            "chat.postMessage",
            {"channel": channel_id, "thread_ts": thread_ts, "text": text},
        )

    async def add_reaction(self, channel_id: str, timestamp: str, reaction: str) -> JsonDict:
        return await self._post(
            "reactions.add",
            {"channel": channel_id, "timestamp": timestamp, "name": reaction},
        )

    async def search_messages(
        self,
        query: str,
        count: int = 20,
        cursor: Optional[str] = None,
        sort: str = "timestamp",
        sort_dir: str = "desc",
    ) -> JsonDict:
        """``search.messages``; Slack only allows this with a user token."""
        return await self._get(
            "search.messages",
            {
                "query": query,
                "count": min(count, MAX_SEARCH_COUNT),
                "sort": sort,
                "sort_dir": sort_dir,
                "cursor": cursor,
            },
        )

    # Users

    async def get_users(self, limit: int = 100, cursor: Optional[str] = None) -> JsonDict:
        return await self._get(
            "users.list",
            {"limit": min(limit, MAX_USERS_PAGE), "team_id": self.team_id, "cursor": cursor},
        )

    async def get_user_profile(self, user_id: str) -> JsonDict:
        return await self._get("users.profile.get", {"user": user_id, "include_labels": "true"})

    # Canvases

    async def list_canvases(self, limit: int = 100, cursor: Optional[str] = None) -> JsonDict:
        return await self._get(
            "files.list",
            {"types": "canvas", "count": min(limit, MAX_CANVAS_PAGE), "cursor": cursor},
        )

    async def get_canvas_info(self, canvas_id: str) -> JsonDict:
        return await self._get("files.info", {"file": canvas_id})

    async def download_canvas_content(self, url_private: str) -> str:
        """Fetch a canvas body (HTML) from its private download URL.

        Single attempt. Failures are classified like any other request but
        carry download-specific messages.
        """
        response = await self._send(
            "GET",
            url_private,
            headers={"Authorization": f"Bearer {self._token}"},
            error_message=CANVAS_DOWNLOAD_ERROR,
            rate_limit_message=CANVAS_DOWNLOAD_RATE_LIMITED,
        )
        return response.text

    async def read_canvas(self, canvas_id: str) -> JsonDict:
        """Fetch canvas metadata and download its content.

        The download is retried on rate limits only. Download failures are
        reported in the payload rather than raised.
        """
        file_info = await self.get_canvas_info(canvas_id)
        if not file_info.get("ok"):
            return file_info

        file: JsonDict = file_info.get("file") or {}
        url_private = file.get("url_private")
        if not url_private:
            return {
                "ok": False,
                "error": "no_url_private",
                "message": "Canvas file does not have a downloadable URL",
            }

        async def download(_attempt: int) -> str:
            return await self.download_canvas_content(url_private)

        try:
            content_html = await self._executor.execute(
                download,
                Idempotency.IDEMPOTENT,
                overrides={"should_retry": _only_rate_limits},
            )
        except Exception as e:
            logger.warning(
                "Canvas download failed",
                extra={"canvas_id": canvas_id, "error_type": type(e).__name__},
            )
            return {
                "ok": False,
                "error": "download_failed",
                "message": str(e),
                "file_info": file,
            }

        return {
            "ok": True,
            "canvas_id": canvas_id,
            "title": file.get("title"),
            "created": file.get("created"),
            "updated": file.get("updated"),
            "user": file.get("user"),
            "permalink": file.get("permalink"),
            "content_html": content_html,
            "_file_info": {
                "id": file.get("id"),
                "name": file.get("name"),
                "filetype": file.get("filetype"),
                "size": file.get("size"),
            },
        }

    async def edit_canvas(
        self,
        canvas_id: str,
        changes: Sequence[Union[CanvasChange, Mapping[str, Any]]],
    ) -> JsonDict:
        payload = [
            CanvasChange.model_validate(change).model_dump(mode="json", exclude_none=True)
            for change in changes
        ]
        return await self._post("canvases.edit", {"canvas_id": canvas_id, "changes": payload})

    async def create_canvas(self, title: str, markdown: Optional[str] = None) -> JsonDict:
        body: JsonDict = {"title": title}
        if markdown:
            body["document_content"] = {"type": "markdown", "markdown": markdown}
        return await self._post("canvases.create", body)


def _clean_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Drop unset query parameters and render booleans the way Slack expects."""
    cleaned: Dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned
