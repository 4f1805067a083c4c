from fastapi import APIRouter, Depends, HTTPException
from auth import authenticate, get_settings
from config import Settings
from schemas.auth import LoginRequest, LoginResponse

router = APIRouter()

@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, config: Settings = Depends(get_settings)):
    context = authenticate(credentials.password, config)
    if context is None:
        raise HTTPException(status_code=401, detail="Incorrect password")
    return {"role": context.role}
