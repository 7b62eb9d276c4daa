"""Article payloads exchanged with the content backend."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class Article(BaseModel):
    """A generated article about one topic."""

    name: str
    category: str
    content: str


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    text: str


class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"
    data: Article


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


StreamEvent = Annotated[
    Union[ChunkEvent, CompleteEvent, ErrorEvent],
    Field(discriminator="type"),
]

stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)
