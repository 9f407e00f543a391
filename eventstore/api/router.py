from fastapi import APIRouter, HTTPException, Request, Depends
from fastapi.responses import JSONResponse
import orjson
from .schemas import EventResponse, CreateEventRequest, CreateEventResponse, ErrorResponse
from ..services.event_store import EventStore
from ..middleware.correlation import get_correlation_id

router = APIRouter(tags=["events"])


def get_event_store(request: Request) -> EventStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(503, detail="Event store not ready")
    return store


async def read_event_body(request: Request) -> str:
    """
    Extract the event body from a create request.

    A JSON object with a string "body" field yields that field; any
    other payload is taken verbatim as UTF-8 text.
    """
    raw = await request.body()
    if raw and request.headers.get("content-type", "").lower().startswith("application/json"):
        doc = orjson.loads(raw)
        if isinstance(doc, dict) and isinstance(doc.get("body"), str):
            return CreateEventRequest(**doc).body
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(400, detail="Event body must be UTF-8 text")


@router.get(
    "/event/{event_id}",
    response_model=EventResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def get_event(event_id: str, store: EventStore = Depends(get_event_store)):
    event = await store.get(event_id)
    if event is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": "EventNotFound",
                "message": f"No event with id {event_id}",
                "correlation_id": get_correlation_id(),
            },
        )
    return EventResponse(id=event.id, body=event.body)


@router.post("/event", response_model=CreateEventResponse, responses={503: {"model": ErrorResponse}})
@router.post("/event/", response_model=CreateEventResponse, include_in_schema=False)
async def create_event(
    body: str = Depends(read_event_body),
    store: EventStore = Depends(get_event_store),
):
    event_id = await store.put(body)
    return CreateEventResponse(id=event_id)
