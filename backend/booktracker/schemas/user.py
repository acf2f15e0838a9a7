from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class CurrentUser(BaseModel):
    """Minimal identity restored from the session for each request"""
    id: int
    email: str

    model_config = ConfigDict(from_attributes=True)
