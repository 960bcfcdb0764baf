from typing import List, Optional

from pydantic import BaseModel


class DriveEntry(BaseModel):
    id: str
    name: str


class DriveFile(DriveEntry):
    mimeType: str = ""


class Item(BaseModel):
    title: str = ""
    subtitle: str = ""
    description: str = ""
    code: str = ""
    imageUrls: List[str] = []
    videoUrls: Optional[List[str]] = None


class CatalogResponse(BaseModel):
    items: List[Item] = []


class ErrorResponse(BaseModel):
    error: str
