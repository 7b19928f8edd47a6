# garage/schemas/auth.py
from pydantic import BaseModel, Field


class Credentials(BaseModel):
    email: str
    password: str


class MessageOut(BaseModel):
    message: str


class TokenOut(BaseModel):
    message: str
    token: str


class UserOut(BaseModel):
    id: int = Field(alias="_id")
    email: str

    class Config:
        from_attributes = True
        populate_by_name = True
