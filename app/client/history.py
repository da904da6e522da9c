"""HTTP client for the conversation history endpoint."""

import logging

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.schemas.base import ErrorSchema
from app.schemas.conversation import ConversationCreate, ConversationResponse


logger = logging.getLogger(__name__)

CONVERSATIONS_PATH = "/api/conversations"

_conversation_list = TypeAdapter(list[ConversationResponse])


class HistoryClientError(Exception):
    """Raised when the history endpoint rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.field = field


class HistoryClient:
    """Reads and writes conversation records over REST."""

    def __init__(self, base_url: str = "", client: httpx.AsyncClient | None = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url)

    async def __aenter__(self) -> "HistoryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_conversations(self) -> list[ConversationResponse]:
        try:
            response = await self._client.get(CONVERSATIONS_PATH)
        except httpx.HTTPError as e:
            raise HistoryClientError(f"Failed to fetch conversations: {str(e)}") from e

        if response.is_error:
            raise HistoryClientError("Failed to fetch conversations", response.status_code)

        try:
            return _conversation_list.validate_python(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise HistoryClientError(f"Malformed conversation history: {str(e)}") from e

    async def create_conversation(self, data: ConversationCreate) -> ConversationResponse:
        try:
            response = await self._client.post(
                CONVERSATIONS_PATH, json=data.model_dump(by_alias=True)
            )
        except httpx.HTTPError as e:
            raise HistoryClientError(f"Failed to create conversation log: {str(e)}") from e

        if response.status_code == 400:
            error = ErrorSchema.model_validate(response.json())
            raise HistoryClientError(error.message, 400, error.field)
        if response.is_error:
            raise HistoryClientError("Failed to create conversation log", response.status_code)

        return ConversationResponse.model_validate(response.json())
