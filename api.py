import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

import catalog
from catalog.analytics import build_dashboard
from catalog.library import Library
from catalog.services.supabase_service import SupabaseClient, SupabaseError, SupabaseRequestError
from catalog.views import FETCH_ERROR_MESSAGE, FETCH_EXCEPTION_MESSAGE
from config import settings, setup_logging

setup_logging()
logger = logging.getLogger(__name__)

STATIC_DIR = Path(catalog.__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing SUPABASE_URL / key raises here and aborts startup
    client = SupabaseClient.from_settings(settings)
    app.state.library = Library(client.table(settings.supabase_table))
    logger.info("Connected to Supabase table '%s' at %s", settings.supabase_table, client.url)
    try:
        yield
    finally:
        await client.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# --- Middleware ---
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_library(request: Request) -> Library:
    return request.app.state.library


# --- Models ---
class BookModel(BaseModel):
    id: int | str
    title: str
    author: str
    genre: str
    status: str
    created_at: str | None = None


class BookFormModel(BaseModel):
    # Empty defaults so incomplete forms reach the form validator, not a 422
    title: str = ""
    author: str = ""
    genre: str = ""
    status: str = ""


class StatsModel(BaseModel):
    total_books: int
    unique_authors: int
    unique_genres: int
    status_counts: Dict[str, int]


# --- Health check ---
@app.get("/health")
async def health(library: Library = Depends(get_library)):
    """Lightweight health endpoint; also reports whether the backend answers."""
    backend_ok = await library.table.ping()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": backend_ok,
    }


# --- Books ---
@app.get("/books", response_model=List[BookModel])
async def list_books(library: Library = Depends(get_library)):
    """All books in the catalog, fresh from the backend."""
    try:
        books = await library.list_books()
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail=FETCH_ERROR_MESSAGE)
    return [BookModel(**b.to_dict()) for b in books]


@app.get("/books/{book_id}", response_model=BookModel)
async def get_book(book_id: str, library: Library = Depends(get_library)):
    try:
        book = await library.get_book(book_id)
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail="Could not fetch the book!")
    if not book:
        raise HTTPException(status_code=404, detail="Book not found.")
    return BookModel(**book.to_dict())


@app.post("/books", response_model=BookModel)
async def add_book(payload: BookFormModel, library: Library = Depends(get_library)):
    try:
        book = await library.add_book(payload.title, payload.author, payload.genre, payload.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail="Error while adding the book. Please try again.")
    return BookModel(**book.to_dict())


@app.put("/books/{book_id}", response_model=BookModel)
async def update_book(book_id: str, payload: BookFormModel, library: Library = Depends(get_library)):
    """Overwrite every editable field of a book."""
    try:
        book = await library.update_book(book_id, payload.title, payload.author, payload.genre, payload.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail="Error while updating the book. Please try again.")
    if not book:
        raise HTTPException(status_code=404, detail="Book not found.")
    return BookModel(**book.to_dict())


@app.delete("/books/{book_id}")
async def delete_book(book_id: str, library: Library = Depends(get_library)):
    try:
        deleted = await library.remove_book(book_id)
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail="Error while deleting the book. Please try again.")
    if not deleted:
        raise HTTPException(status_code=404, detail="Book not found.")
    return {"message": "Book deleted."}


# --- Dashboard ---
@app.get("/stats", response_model=StatsModel)
async def get_stats(library: Library = Depends(get_library)):
    try:
        stats = await library.get_statistics()
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail=FETCH_ERROR_MESSAGE)
    return StatsModel(**stats)


@app.get("/stats/charts")
async def get_charts(library: Library = Depends(get_library)) -> Dict[str, Any]:
    """Chart.js payloads for the dashboard screen."""
    try:
        books = await library.list_books()
    except SupabaseRequestError:
        raise HTTPException(status_code=503, detail=FETCH_EXCEPTION_MESSAGE)
    except SupabaseError:
        raise HTTPException(status_code=502, detail=FETCH_ERROR_MESSAGE)
    return build_dashboard(books)


# --- Front end ---
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/", include_in_schema=False)
async def read_index():
    return FileResponse(STATIC_DIR / "index.html")
