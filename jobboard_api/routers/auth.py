from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..deps import get_current_user, get_db
from ..models import UserORM
from ..schemas import AuthResponse, LoginRequest, MessageResponse, RegisterRequest, UserEnvelope, UserOut
from ..security import create_access_token
from ..services import accounts

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user: UserORM) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id, user.role.value),
        user=UserOut.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    return _auth_response(accounts.register(db, req))


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    return _auth_response(accounts.authenticate(db, req.email, req.password))


@router.get("/users/{user_id}", response_model=UserOut)
def get_user_profile(user_id: int, db: Session = Depends(get_db)):
    return UserOut.model_validate(accounts.fetch(db, user_id))


@router.get("/me", response_model=UserEnvelope)
def me(user: UserORM = Depends(get_current_user)):
    return UserEnvelope(data=UserOut.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(user: UserORM = Depends(get_current_user)):
    # tokens are stateless; the client drops its copy
    return MessageResponse(message="Logged out successfully")
