"""
Alert Subscription Endpoint.

POST /api/v1/subscribe — add an e-mail address to the alert list
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from stormwatch.api.deps import get_subscriber_store
from stormwatch.schemas.subscriber import SubscribeRequest, SubscribeResponse
from stormwatch.services.subscribers import SubscriberStore

router = APIRouter(prefix="/api/v1", tags=["subscribers"])


@router.post(
    "/subscribe",
    response_model=SubscribeResponse,
    responses={409: {"description": "Already subscribed"}},
)
async def subscribe(
    body: SubscribeRequest,
    store: SubscriberStore = Depends(get_subscriber_store),
):
    if not await store.asubscribe(str(body.email)):
        return JSONResponse(status_code=409, content={"error": "Already subscribed"})
    return SubscribeResponse()
