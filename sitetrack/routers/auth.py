from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from sitetrack.database import commit_or_500, get_db
from sitetrack.models.profile import Profile
from sitetrack.schemas.auth import Profile as ProfileSchema
from sitetrack.schemas.auth import ProfileCreate, ProfileLogin, ProfileUpdate, Token
from sitetrack.core.security import hash_password, verify_password, create_access_token, get_current_user
from sitetrack.utils import storage

router = APIRouter(tags=["Authentication"])


@router.post("/signup", response_model=Token)
def signup(user: ProfileCreate, db: Session = Depends(get_db)):
    email = user.email.lower()
    # Check if email already exists
    existing = db.query(Profile).filter(Profile.email == email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = Profile(
        email=email,
        full_name=user.full_name or email.split("@")[0],
        hashed_password=hash_password(user.password)
    )

    db.add(new_user)
    commit_or_500(db, "create profile")
    db.refresh(new_user)

    token = create_access_token({"sub": new_user.email})
    return {"access_token": token, "token_type": "bearer"}


@router.post("/signin", response_model=Token)
def signin(data: ProfileLogin, db: Session = Depends(get_db)):
    user = db.query(Profile).filter(Profile.email == data.email.lower()).first()

    if not user or not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email})
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=ProfileSchema)
def read_me(current_user: Profile = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=ProfileSchema)
def update_me(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    if data.full_name is not None:
        current_user.full_name = data.full_name
    if data.avatar_url is not None:
        current_user.avatar_url = data.avatar_url

    commit_or_500(db, "update profile")
    db.refresh(current_user)
    return current_user


@router.post("/me/avatar", response_model=ProfileSchema)
def upload_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    """Store a new avatar image and point the profile at it."""
    previous = current_user.avatar_url
    url = storage.upload(file, f"avatars/{current_user.id}")
    current_user.avatar_url = url
    try:
        commit_or_500(db, "update avatar")
    except HTTPException:
        storage.delete(url)
        raise
    storage.delete(previous)
    db.refresh(current_user)
    return current_user
