"""Schemas for the TREA rate catalogue endpoints."""

from typing import Literal, Optional

from pydantic import BaseModel


class InstitutionQuery(BaseModel):
    kind: Optional[Literal["banks", "financial"]] = None


class TreaQuery(BaseModel):
    account_type: str
    institution_id: str


class TreaResponse(BaseModel):
    account_type: str
    institution_id: str
    trea_rate: float
