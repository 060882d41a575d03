from pydantic import BaseModel


# Missing keys decode to empty strings and are rejected by the registration flow
class UserCreate(BaseModel):
    email: str = ""
    password: str = ""


class UserLogin(BaseModel):
    email: str = ""
    password: str = ""


class Token(BaseModel):
    token: str
    token_type: str = "bearer"


class RegistrationResponse(BaseModel):
    id: int
    message: str


class UserResponse(BaseModel):
    id: int
    email: str

    class Config:
        from_attributes = True
