import uuid
from pydantic import BaseModel, EmailStr

class UserCreateIn(BaseModel):
    email: EmailStr
    display_name: str | None = None

class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    display_name: str | None
