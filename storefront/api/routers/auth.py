# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_auth_session, require_identity
from storefront.domain.schemas import ActionResult, SignInIn, UserRead
from storefront.services.identity_service import AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=UserRead)
def me(identity: UserRead = Depends(require_identity)):
    return identity


@router.post("/signin", response_model=UserRead)
def signin(payload: SignInIn, session: AuthSession = Depends(get_auth_session)):
    identity = session.sign_in(payload.credential)
    if identity is None:
        raise HTTPException(status_code=401, detail="Invalid credential")
    return identity


@router.post("/restore", response_model=UserRead)
def restore(session: AuthSession = Depends(get_auth_session)):
    """Odtworzenie sesji urzadzenia z zapisanego tokena (X-Device-Id)."""
    identity = session.restore()
    if identity is None:
        raise HTTPException(status_code=401, detail="User not logged in")
    return identity


@router.post("/signout", response_model=ActionResult)
def signout(session: AuthSession = Depends(get_auth_session)):
    session.sign_out()
    return ActionResult(success=True, message="Signed out")
