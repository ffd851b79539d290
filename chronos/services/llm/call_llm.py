from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence, Type, TypeVar, Union, cast

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import BaseModel

from chronos.config import GEMINI_MODEL, GOOGLE_API_KEY

T = TypeVar('T', bound=BaseModel)

MessageLike = Union[BaseMessage, Dict[str, str]]


def to_lc_messages(messages: Sequence[MessageLike]) -> List[BaseMessage]:
    """Convert role/content dicts to LangChain messages; LangChain messages pass through"""
    lc_messages: List[BaseMessage] = []
    for msg in messages:
        if isinstance(msg, BaseMessage):
            lc_messages.append(msg)
        elif msg["role"] == "system":
            lc_messages.append(SystemMessage(content=msg["content"]))
        elif msg["role"] == "user":
            lc_messages.append(HumanMessage(content=msg["content"]))
        else:
            lc_messages.append(AIMessage(content=msg["content"]))
    return lc_messages


def content_text(content: Any) -> str:
    """Flatten message content that may arrive as a list of parts"""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content) if content is not None else ""


class LLMService:
    def __init__(
        self,
        model: str = GEMINI_MODEL,
        temperature: float = 0.7,
        api_key: Optional[str] = None,
    ):
        self.llm = ChatGoogleGenerativeAI(
            model=model,
            temperature=temperature,
            google_api_key=api_key or GOOGLE_API_KEY,
        )

    async def invoke(self, messages: Sequence[MessageLike], **kwargs) -> str:
        response = await self.llm.ainvoke(to_lc_messages(messages), **kwargs)
        return content_text(response.content)

    async def stream_invoke(self, messages: Sequence[MessageLike], **kwargs) -> AsyncGenerator[str, None]:
        """
        Invoke the LLM with a streaming response.

        Args:
            messages: LangChain messages or dictionaries with 'role' and 'content' keys
            **kwargs: Additional arguments to pass to the LLM

        Yields:
            Text chunks of the response as they arrive (SSE framing is left to the caller)
        """
        async for chunk in self.llm.astream(to_lc_messages(messages), **kwargs):
            text = content_text(chunk.content)
            if text:
                yield text

    async def structured_invoke(self, messages: Sequence[MessageLike], schema: Type[T], **kwargs) -> T:
        """
        Invoke the LLM with structured output parsing.

        Args:
            messages: LangChain messages or dictionaries with 'role' and 'content' keys
            schema: Pydantic model class to parse the response into
            **kwargs: Additional arguments to pass to the LLM

        Returns:
            Instance of the provided Pydantic model with parsed response
        """
        structured_llm = self.llm.with_structured_output(schema)
        response = await structured_llm.ainvoke(to_lc_messages(messages), **kwargs)
        return cast(T, response)
