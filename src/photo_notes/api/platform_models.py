"""Pydantic models for platform webhook and device event payloads."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class WebhookRequest(BaseModel):
    """Session lifecycle request sent by the platform."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    session_id: str = Field(alias="sessionId")
    user_id: str = Field(alias="userId")
    reason: str | None = None
    timestamp: str | None = None


class DeviceEvent(BaseModel):
    """Event forwarded from a connected headset."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["button_press", "transcription", "disconnected"]
    user_id: str = Field(alias="userId")
    session_id: str | None = Field(default=None, alias="sessionId")
    button_id: str | None = Field(default=None, alias="buttonId")
    press_type: str | None = Field(default=None, alias="pressType")
    text: str | None = None
    is_final: bool = Field(default=False, alias="isFinal")
