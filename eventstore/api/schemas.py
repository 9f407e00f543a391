from pydantic import BaseModel, Field

class EventResponse(BaseModel):
    id: str
    body: str

class CreateEventRequest(BaseModel):
    body: str = Field(..., description="Event text, stored verbatim")

class CreateEventResponse(BaseModel):
    id: str

class ErrorResponse(BaseModel):
    error: str
    message: str
    correlation_id: str | None = None
