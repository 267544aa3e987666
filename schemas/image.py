from typing import List, Optional, Union

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    message: str
    fileUrl: str = Field(..., description="Public URL of the stored file")


class ImageRecordRead(BaseModel):
    file_url: str

    class Config:
        from_attributes = True


class ImagesResponse(BaseModel):
    images: List[ImageRecordRead]


class DeleteImageRequest(BaseModel):
    # Optional here so a missing value answers 400, not 422
    fileUrl: Optional[str] = None
    profileId: Optional[Union[int, str]] = None
    name: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class GalleryRead(BaseModel):
    profile_id: int
    images: List[str] = Field(..., description="Public image URLs in display order")
