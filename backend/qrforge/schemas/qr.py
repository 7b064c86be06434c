from pydantic import BaseModel
from typing import List, Optional


class GenerateResponse(BaseModel):
    success: bool = True
    image_url: str
    data: str


class HistoryItem(BaseModel):
    id: int
    data: str
    image_url: str
    created_at: Optional[str] = None


class HistoryResponse(BaseModel):
    history: List[HistoryItem]


class ErrorResponse(BaseModel):
    error: str
