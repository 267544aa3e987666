from pydantic import BaseModel, Field


class ImportFromStorageRequest(BaseModel):
    password: str = Field(..., description="Password that unlocks the folder import")
    folder: str = Field("actors", description="Bucket prefix holding one folder per profile")


class ImportFromStorageResponse(BaseModel):
    folder: str
    imported: int
