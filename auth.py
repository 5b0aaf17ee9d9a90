# auth.py

from fastapi import APIRouter, Depends
from pymongo.database import Database

import crud
from config import Settings, get_settings
from db import get_db, public_user
from errors import Unauthenticated
from models import UserLogin, LoginResponse
from utils.auth_utils import create_access_token, verify_password

auth_router = APIRouter(tags=["auth"])


@auth_router.post("/login", response_model=LoginResponse)
def login(
    user: UserLogin,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    db_user = crud.find_user(db, user.username)
    if not db_user or not verify_password(user.password, db_user["password"]):
        raise Unauthenticated("Invalid credentials")
    token = create_access_token(
        db_user["username"],
        settings.secret_key,
        settings.access_token_expire_minutes,
    )
    return {"user": public_user(db_user), "token": token}
