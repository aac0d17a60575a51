from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token_type: str = "Bearer"
    type_user: str
    access_token: str
