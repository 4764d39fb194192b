"""Request/response models for alert subscriptions and access checks."""

from pydantic import BaseModel, EmailStr


class SubscribeRequest(BaseModel):
    email: EmailStr


class SubscribeResponse(BaseModel):
    success: bool = True
    message: str = "Subscribed successfully"


class AccessCodeRequest(BaseModel):
    code: str = ""
