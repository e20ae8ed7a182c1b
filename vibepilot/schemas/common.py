"""Shared response models for endpoints that return simple JSON dicts."""

from pydantic import BaseModel


class StatusMessageResponse(BaseModel):
    status: str
    message: str
