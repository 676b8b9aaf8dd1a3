from typing import List

from fastapi import APIRouter, Depends, Response

from vidshare.api.deps import require_user_id
from vidshare.api.schemas import ChannelCreate, ChannelOut, ChannelUpdate, SubscriptionOut
from vidshare.features.catalog.service.api import catalog

router = APIRouter(prefix="/api/channels", tags=["channels"])


@router.get("", response_model=List[ChannelOut])
def list_channels():
    return catalog.list_channels()


@router.get("/featured", response_model=List[ChannelOut])
def list_featured_channels():
    return catalog.list_featured_channels()


@router.get("/{channel_id}", response_model=ChannelOut)
def get_channel(channel_id: str):
    return catalog.get_channel(channel_id)


@router.post("", response_model=ChannelOut, status_code=201)
def create_channel(body: ChannelCreate, user_id: str = Depends(require_user_id)):
    return catalog.create_channel(user_id, body.model_dump(exclude_none=True))


@router.patch("/{channel_id}", response_model=ChannelOut)
def update_channel(channel_id: str, body: ChannelUpdate, user_id: str = Depends(require_user_id)):
    return catalog.update_channel(user_id, channel_id, body.model_dump(exclude_unset=True))


@router.delete("/{channel_id}", status_code=204)
def delete_channel(channel_id: str, user_id: str = Depends(require_user_id)):
    catalog.delete_channel(user_id, channel_id)
    return Response(status_code=204)


@router.post("/{channel_id}/subscribe", response_model=SubscriptionOut)
def subscribe(channel_id: str, user_id: str = Depends(require_user_id)):
    catalog.subscribe(user_id, channel_id)
    return SubscriptionOut(channel_id=channel_id, subscribed=True)


@router.delete("/{channel_id}/subscribe", response_model=SubscriptionOut)
def unsubscribe(channel_id: str, user_id: str = Depends(require_user_id)):
    catalog.unsubscribe(user_id, channel_id)
    return SubscriptionOut(channel_id=channel_id, subscribed=False)
