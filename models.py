# models.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class Genre(BaseModel):
    name: str
    description: str = ""


class Director(BaseModel):
    name: str
    bio: str = ""
    birth: Optional[int] = None
    death: Optional[int] = None


class MovieCreate(BaseModel):
    title: str
    description: str = ""
    genre: Genre
    director: Director
    actors: List[str] = []
    image_data: str
    featured: bool = False


# Fields are optional here so that validation.validate_user can report
# every problem at once instead of pydantic stopping at missing keys.
class UserIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[date] = None


class UserLogin(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user: dict
    token: str
