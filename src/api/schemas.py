from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..common.dtos import AssetRecord, IngestionResult


class AssetModel(BaseModel):
    id: str
    name: str
    price: float = Field(ge=0.0)
    category: str
    description: str = ""
    thumbnail: str = ""
    images: List[str] = []
    glb: str
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: AssetRecord) -> "AssetModel":
        return cls(**record.to_row())


class UploadUrls(BaseModel):
    glb: str
    thumbnail: str = ""
    images: List[str] = []


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    model: AssetModel
    urls: UploadUrls

    @classmethod
    def from_result(cls, result: IngestionResult) -> "UploadResponse":
        return cls(
            message=result.message,
            model=AssetModel.from_record(result.record),
            urls=UploadUrls(
                glb=result.urls.glb,
                thumbnail=result.urls.thumbnail,
                images=list(result.urls.images),
            ),
        )


class ErrorResponse(BaseModel):
    error: str
    kind: Optional[str] = None
    details: Optional[str] = None
    field: Optional[str] = None
