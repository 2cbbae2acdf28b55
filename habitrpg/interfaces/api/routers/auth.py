"""
Auth API router.

Endpoints:
- POST /api/auth/register - Create an account and get a token
- POST /api/auth/login - Exchange credentials for a token
"""

from fastapi import APIRouter, HTTPException, status

from habitrpg.core.errors import ErrorCategory
from habitrpg.core.use_cases.authenticate_user import AuthenticateUserUseCase
from habitrpg.core.use_cases.register_user import AuthResult, RegisterUserUseCase
from habitrpg.interfaces.api.schemas import AuthResponse, LoginRequest, RegisterRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=result.message,
        token=result.token,
        user_id=result.user.id,
        username=result.user.username,
    )


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register(request: RegisterRequest) -> AuthResponse:
    """Register a new user. Returns an access token right away."""
    result = await RegisterUserUseCase().execute(
        username=request.username, email=request.email, password=request.password
    )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.message,
        )
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest) -> AuthResponse:
    """
    Log in with email (or username) and password.

    Wrong credentials are 401, missing fields 400.
    """
    result = await AuthenticateUserUseCase().execute(request.email, request.password)
    if not result.success:
        if result.error_category == ErrorCategory.VALIDATION:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=result.message,
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _auth_response(result)
