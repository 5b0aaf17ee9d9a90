# crud.py
import logging
from typing import Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from db import MOVIES, USERS, to_bson_date
from errors import Conflict, NotFound, UpstreamFailure

logger = logging.getLogger(__name__)


def _store_error(err: PyMongoError) -> UpstreamFailure:
    logger.error("Store operation failed: %s", err)
    return UpstreamFailure(f"Error: {err}")


def ensure_indexes(db: Database):
    db[USERS].create_index([("username", ASCENDING)], unique=True)


# ---------------------------
# Movies
# ---------------------------

def find_all_movies(db: Database) -> list:
    try:
        return list(db[MOVIES].find())
    except PyMongoError as e:
        raise _store_error(e)


def find_movie_by_title(db: Database, title: str) -> Optional[dict]:
    try:
        return db[MOVIES].find_one({"title": title})
    except PyMongoError as e:
        raise _store_error(e)


def find_genre(db: Database, name: str) -> dict:
    try:
        movie = db[MOVIES].find_one({"genre.name": name})
    except PyMongoError as e:
        raise _store_error(e)
    if not movie:
        raise NotFound(f"{name} was not found")
    return movie["genre"]


def find_director(db: Database, name: str) -> dict:
    try:
        movie = db[MOVIES].find_one({"director.name": name})
    except PyMongoError as e:
        raise _store_error(e)
    if not movie:
        raise NotFound(f"{name} was not found")
    return movie["director"]


def create_movie(db: Database, fields: dict) -> dict:
    doc = dict(fields)
    try:
        result = db[MOVIES].insert_one(doc)
    except PyMongoError as e:
        raise _store_error(e)
    doc["_id"] = result.inserted_id
    return doc


# ---------------------------
# Users
# ---------------------------

def find_all_users(db: Database) -> list:
    try:
        return list(db[USERS].find())
    except PyMongoError as e:
        raise _store_error(e)


def find_user(db: Database, username: str) -> Optional[dict]:
    try:
        return db[USERS].find_one({"username": username})
    except PyMongoError as e:
        raise _store_error(e)


def create_user(db: Database, username: str, password_hash: str, email: str, birthday=None) -> dict:
    """
    Inserts a new user after checking the username is free.
    The check and the insert are separate round-trips; the unique index
    created by ensure_indexes rejects whichever insert loses a race.
    """
    if find_user(db, username):
        raise Conflict(f"{username} already exists")

    doc = {
        "username": username,
        "password": password_hash,
        "email": email,
        "birthday": to_bson_date(birthday),
        "favorite_movies": [],
    }
    try:
        result = db[USERS].insert_one(doc)
    except DuplicateKeyError:
        raise Conflict(f"{username} already exists")
    except PyMongoError as e:
        raise _store_error(e)
    doc["_id"] = result.inserted_id
    return doc


def _update_user(db: Database, username: str, update: dict) -> dict:
    try:
        user = db[USERS].find_one_and_update(
            {"username": username},
            update,
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        raise Conflict(f"{update.get('$set', {}).get('username')} already exists")
    except PyMongoError as e:
        raise _store_error(e)
    if not user:
        raise NotFound(f"No user named {username} was found")
    return user


def update_user(db: Database, username: str, patch: dict) -> dict:
    if not find_user(db, username):
        raise NotFound(f"No user named {username} was found")
    new_username = patch.get("username")
    if new_username and new_username != username and find_user(db, new_username):
        raise Conflict(f"{new_username} already exists")
    fields = {key: to_bson_date(value) for key, value in patch.items()}
    return _update_user(db, username, {"$set": fields})


def add_favorite(db: Database, username: str, movie_id: str) -> dict:
    # $push keeps duplicates; movie ids are not checked against the movies collection
    return _update_user(db, username, {"$push": {"favorite_movies": movie_id}})


def remove_favorite(db: Database, username: str, movie_id: str) -> dict:
    # $pull drops every occurrence
    return _update_user(db, username, {"$pull": {"favorite_movies": movie_id}})


def delete_user(db: Database, username: str) -> dict:
    try:
        user = db[USERS].find_one_and_delete({"username": username})
    except PyMongoError as e:
        raise _store_error(e)
    if not user:
        raise NotFound(f"{username} was not found")
    return user
