from fastapi import APIRouter, Depends, HTTPException, status, Response, Request

from .schemas.session import LoginRequest, SessionResponse
from ..services.auth_service import AuthService, AuthenticationError
from .dependencies import get_auth_service
from .utilities.limiter import limiter


router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)


# --- Dependency for protected routers ---
async def require_session(service: AuthService = Depends(get_auth_service)) -> None:
    """
    Lets the request through only while the dashboard is logged in.
    """
    if not await service.is_authenticated():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required.")


@router.post("/login", response_model=SessionResponse)
@limiter.limit("20/minute")
async def login(request: Request, login_request: LoginRequest, service: AuthService = Depends(get_auth_service)):
    try:
        await service.login(login_request.email, login_request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return SessionResponse(authenticated=True)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(service: AuthService = Depends(get_auth_service)):
    await service.logout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/session", response_model=SessionResponse)
async def get_session(service: AuthService = Depends(get_auth_service)):
    return SessionResponse(authenticated=await service.is_authenticated())
