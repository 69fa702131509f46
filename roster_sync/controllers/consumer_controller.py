# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Connected consumers.
Scheduled sweeps only run while at least one consumer is connected.
"""

from fastapi import APIRouter, Depends, Path

from roster_sync.core.dependencies import get_consumer_registry
from roster_sync.repositories.consumer_registry import ConsumerRegistry
from roster_sync.schemas.sync import ConsumerChangeResponse, ConsumerListResponse

router = APIRouter(prefix="/api/v1", tags=["Consumers"])


@router.get("/consumers", response_model=ConsumerListResponse)
def list_consumers(consumers: ConsumerRegistry = Depends(get_consumer_registry)):
    connected = consumers.get_all()
    return {"connected": connected, "count": len(connected)}


@router.put("/consumers/{consumer_id}", response_model=ConsumerChangeResponse)
def connect_consumer(
    consumer_id: str = Path(..., min_length=1, max_length=255),
    consumers: ConsumerRegistry = Depends(get_consumer_registry),
):
    changed = consumers.connect(consumer_id)
    return {
        "consumer_id": consumer_id,
        "changed": changed,
        "connected_count": consumers.connected_count(),
    }


@router.delete("/consumers/{consumer_id}", response_model=ConsumerChangeResponse)
def disconnect_consumer(
    consumer_id: str,
    consumers: ConsumerRegistry = Depends(get_consumer_registry),
):
    changed = consumers.disconnect(consumer_id)
    return {
        "consumer_id": consumer_id,
        "changed": changed,
        "connected_count": consumers.connected_count(),
    }
