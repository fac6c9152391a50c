from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from .rules import Number


class SumRequest(BaseModel):
    numbers: str = Field(default="", examples=["//;\n1;2"])


class EncodingReport(BaseModel):
    detected: Optional[str] = None
    decode_used: str
    decode_fallback: bool = False


class SumReport(BaseModel):
    total: Number
    delimiters: List[str]
    custom_delimiter: Optional[str] = None
    tokens: List[str] = Field(default_factory=list)
    values: List[Number] = Field(default_factory=list)
    dropped: List[str] = Field(default_factory=list)
    encoding: Optional[EncodingReport] = None


class SumResponse(BaseModel):
    total: Number
    report: SumReport


class NegativesResponse(BaseModel):
    detail: str = Field(examples=["Negatives not allowed: -2, -5"])
    negatives: List[Number] = Field(default_factory=list)

class HealthResponse(BaseModel):
    ok: bool = True
