# db.py
from datetime import date, datetime, time, timezone

from bson import ObjectId
from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database

from config import Settings

MOVIES = "movies"
USERS = "users"


def connect(settings: Settings) -> MongoClient:
    return MongoClient(settings.mongo_uri, tz_aware=True)


def get_db(request: Request) -> Database:
    """Database handle opened at startup and kept on the app state."""
    return request.app.state.db


def to_bson_date(value):
    # BSON has no pure date type
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def to_json_doc(doc):
    """Make a stored document safe to return, turning ObjectIds into strings."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            value = str(value)
        elif isinstance(value, list):
            value = [str(v) if isinstance(v, ObjectId) else v for v in value]
        out[key] = value
    return out


def public_user(doc):
    """User document without the password digest."""
    user = to_json_doc(doc)
    if user is not None:
        user.pop("password", None)
    return user
