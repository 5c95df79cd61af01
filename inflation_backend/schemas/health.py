"""Pydantic schemas for the health-check and service info endpoints."""

from typing import Dict

from pydantic import BaseModel


class PingResponse(BaseModel):
    message: str
    database: bool


class InfoResponse(BaseModel):
    name: str
    version: str
    description: str
    endpoints: Dict[str, str]
