from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr


class UserLogin(BaseModel):
    mail_address: EmailStr
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    mail_address: EmailStr
    created_at: datetime
    last_logged_in_at: datetime | None = None


class Token(BaseModel):
    access_token: str
    token_type: str


class MessageResponse(BaseModel):
    message: str
