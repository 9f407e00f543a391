"""Prometheus metrics endpoint."""
from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
async def get_metrics(request: Request):
    """
    Expose the app's Prometheus registry in text exposition format.

    Served directly at /metrics so scrapers are not redirected.
    """
    metrics = request.app.state.metrics
    metrics.update_system_metrics()
    return Response(content=generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)
