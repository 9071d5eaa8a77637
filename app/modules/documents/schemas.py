from pydantic import BaseModel


class DocumentResponse(BaseModel):
    path: str
    content_type: str
    size: int
    linked_to_profile: bool


class DocumentUrlResponse(BaseModel):
    path: str
    url: str
    expires_in: int
