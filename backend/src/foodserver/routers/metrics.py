from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/metrics")
def metrics(request: Request):
    """Request counters and latency histograms since startup."""
    return request.app.state.metrics.snapshot()
