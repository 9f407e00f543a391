from pydantic import BaseModel, ConfigDict, Field
import uuid


def new_event_id() -> str:
    return str(uuid.uuid4())


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Store-assigned unique identifier")
    body: str = Field(..., description="Event text, stored verbatim")
