import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from pymongo.database import Database

import crud
from auth import auth_router
from blob_storage import BlobStore, S3BlobStore, decode_image_data, get_blob_store, new_object_key
from config import get_settings
from db import connect, get_db, public_user, to_json_doc
from errors import ValidationFailed, register_exception_handlers
from models import MovieCreate, UserIn
from utils.auth_utils import get_current_user, hash_password
from validation import validate_user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client = connect(settings)
    app.state.db = client[settings.mongo_db_name]
    app.state.blob_store = S3BlobStore(settings.s3_bucket, settings.aws_region)
    crud.ensure_indexes(app.state.db)
    logger.info("Connected to MongoDB database %s", settings.mongo_db_name)
    try:
        yield
    finally:
        client.close()
        logger.info("MongoDB connection closed")


app = FastAPI(
    title="🎬 Movie API",
    description="Movies, directors and genres, plus user accounts with favorite movies",
    version="1.0.0",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(auth_router)


@app.get("/")
def root():
    return {"message": "Welcome to the movies. This page is working"}

# -------------------------------
# Movie Routes
# -------------------------------

@app.get("/movies")
def get_all_movies(db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    return [to_json_doc(m) for m in crud.find_all_movies(db)]


# Registered before /movies/{title} so these paths are not read as titles
@app.get("/movies/genre_description/{genre}")
def get_genre_description(genre: str, db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    return crud.find_genre(db, genre).get("description")


@app.get("/movies/director_description/{director}")
def get_director(director: str, db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    return crud.find_director(db, director)


@app.get("/movies/{title}")
def get_movie(title: str, db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    return to_json_doc(crud.find_movie_by_title(db, title))


@app.post("/movies", status_code=201)
def create_movie(
    movie: MovieCreate,
    db: Database = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    _: str = Depends(get_current_user),
):
    image = decode_image_data(movie.image_data)
    image_url = blob_store.put(new_object_key(), image, "image/png")
    fields = movie.model_dump(exclude={"image_data"})
    fields["image_path"] = image_url
    created = crud.create_movie(db, fields)
    logger.info("Added movie %r with image %s", movie.title, image_url)
    return to_json_doc(created)

# -------------------------------
# User Routes
# -------------------------------

@app.post("/users", status_code=201)
def register(user: UserIn, db: Database = Depends(get_db)):
    errors = validate_user(user.model_dump())
    if errors:
        raise ValidationFailed(errors)
    created = crud.create_user(
        db,
        username=user.username,
        password_hash=hash_password(user.password),
        email=user.email,
        birthday=user.birthday,
    )
    logger.info("Registered user %s", user.username)
    return public_user(created)


@app.get("/users")
def get_all_users(db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    return [public_user(u) for u in crud.find_all_users(db)]


@app.get("/users/{username}")
def get_user(username: str, db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    return public_user(crud.find_user(db, username))


@app.put("/users/{username}")
def update_user(
    username: str,
    user: UserIn,
    db: Database = Depends(get_db),
    _: str = Depends(get_current_user),
):
    errors = validate_user(user.model_dump())
    if errors:
        raise ValidationFailed(errors)
    patch = {
        "username": user.username,
        "password": hash_password(user.password),
        "email": user.email,
    }
    if user.birthday is not None:
        patch["birthday"] = user.birthday
    return public_user(crud.update_user(db, username, patch))


@app.post("/users/{username}/movies/{movie_id}")
def add_favorite_movie(
    username: str,
    movie_id: str,
    db: Database = Depends(get_db),
    _: str = Depends(get_current_user),
):
    return public_user(crud.add_favorite(db, username, movie_id))


@app.delete("/users/{username}/movies/{movie_id}")
def remove_favorite_movie(
    username: str,
    movie_id: str,
    db: Database = Depends(get_db),
    _: str = Depends(get_current_user),
):
    return public_user(crud.remove_favorite(db, username, movie_id))


@app.delete("/users/{username}")
def deregister(username: str, db: Database = Depends(get_db), _: str = Depends(get_current_user)):
    crud.delete_user(db, username)
    logger.info("Deleted user %s", username)
    return {"message": f"{username} was deleted"}
