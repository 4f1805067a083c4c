from pydantic import BaseModel
from auth import Role

class LoginRequest(BaseModel):
    password: str

class LoginResponse(BaseModel):
    role: Role
