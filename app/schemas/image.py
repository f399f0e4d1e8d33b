from pydantic import BaseModel


class PresignedURLResponse(BaseModel):
    signed_url: str
