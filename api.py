"""
FastAPI server exposing the movie catalog API.
Endpoints (prefix /api/v1):
- POST   /movies           create a movie (409 if an equivalent one exists)
- GET    /movies           list with title/actor/search filters, sort and pagination
- GET    /movies/{id}      fetch one movie with its actors
- PATCH  /movies/{id}      partial update; a non-empty actor list replaces the cast
- DELETE /movies/{id}      delete a movie (actors are kept)
- POST   /movies/import    bulk import from a .txt file (multipart field "movies")
- GET    /health           basic health check

Errors are returned as {"error": code, "message": ..., "paramMap": {...}}.
"""

# Import standard libraries for timing
import time  # measure startup latency
from typing import Annotated, List, Literal, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import APIRouter, Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, StringConstraints
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import our internal modules
from movie_catalog.config import Settings, configure_logging
from movie_catalog.constants import (
	ACTOR_NAME_MAX_LENGTH,
	ACTOR_NAME_REGEX,
	ALLOWED_EXTENSIONS,
	ALLOWED_MIME_TYPES,
	DEFAULT_LIMIT,
	DEFAULT_OFFSET,
	MAX_LIMIT,
	MAX_YEAR,
	MIN_YEAR,
	SEARCH_TERM_MAX_LENGTH,
	TITLE_MAX_LENGTH,
	MovieFormat,
)
from movie_catalog.errors import (
	CatalogError,
	FileSizeExceeded,
	InvalidFileType,
	InvalidInputData,
	MoviesFileEmpty,
	MoviesFileMissing,
	NotFound,
)
from movie_catalog.models import ListQuery, MovieRecord, MovieUpdate, MovieWithActors
from movie_catalog.service import MovieService, build_service

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

TitleStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
ActorName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=ACTOR_NAME_MAX_LENGTH)]


def _check_actor_names(actors: Optional[List[str]]) -> Optional[List[str]]:
	for name in actors or []:
		if not ACTOR_NAME_REGEX.match(name):
			raise ValueError(f"Actor name contains invalid characters: {name!r}")
	return actors


def _strip(value):
	return value.strip() if isinstance(value, str) else value


FormatIn = Annotated[MovieFormat, BeforeValidator(_strip)]
ActorList = Annotated[List[ActorName], AfterValidator(_check_actor_names)]


# Request bodies

class MovieCreateIn(BaseModel):
	title: TitleStr
	year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
	format: FormatIn
	actors: ActorList = Field(min_length=1)


class MovieUpdateIn(BaseModel):
	title: Optional[TitleStr] = None
	year: Optional[int] = Field(default=None, ge=MIN_YEAR, le=MAX_YEAR)
	format: Optional[FormatIn] = None
	actors: Optional[ActorList] = None  # empty list leaves the cast untouched


# Responses

class ActorOut(BaseModel):
	id: int
	name: str


class MovieOut(BaseModel):
	id: int
	title: str
	year: int
	format: str
	actors: List[ActorOut]


class MovieResponse(BaseModel):
	data: MovieOut
	status: int = 1


class ListMeta(BaseModel):
	total: int  # filtered count, independent of pagination
	pageSize: int


class MovieListResponse(BaseModel):
	data: List[MovieOut]
	meta: ListMeta
	status: int = 1


class ImportMeta(BaseModel):
	imported: int
	duplicates: int
	total: int


class ImportResponse(BaseModel):
	data: List[MovieOut]
	meta: ImportMeta
	status: int = 1


class StatusResponse(BaseModel):
	status: int = 1


def _movie_out(movie: MovieWithActors) -> MovieOut:
	return MovieOut(**movie.to_dict())


def _search_term(name: str, value: Optional[str]) -> Optional[str]:
	"""Trim an optional search term; present-but-blank is rejected."""
	if value is None:
		return None
	value = value.strip()
	if not value:
		raise InvalidInputData({"errors": [{"field": name, "message": f"{name.capitalize()} search term cannot be empty"}]})
	return value


def get_service(request: Request) -> MovieService:
	return request.app.state.service


def get_settings(request: Request) -> Settings:
	return request.app.state.settings


router = APIRouter(prefix="/api/v1")


@router.post("/movies", response_model=MovieResponse, status_code=201)
def create_movie(body: MovieCreateIn, service: MovieService = Depends(get_service)):
	"""Create one movie; 409 if the same title/year/format/cast is already stored."""
	record = MovieRecord(title=body.title, year=body.year, format=body.format.value, actors=body.actors)
	movie = service.create(record)
	return MovieResponse(data=_movie_out(movie))


@router.get("/movies", response_model=MovieListResponse)
def list_movies(
	limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
	offset: int = Query(DEFAULT_OFFSET, ge=0),
	sort: Literal["id", "title", "year"] = Query("id"),
	order: Literal["ASC", "DESC"] = Query("ASC"),
	title: Optional[str] = Query(None, max_length=SEARCH_TERM_MAX_LENGTH),
	actor: Optional[str] = Query(None, max_length=SEARCH_TERM_MAX_LENGTH),
	search: Optional[str] = Query(None, max_length=SEARCH_TERM_MAX_LENGTH),
	service: MovieService = Depends(get_service),
):
	"""List movies; `meta.total` counts every match regardless of pagination."""
	query = ListQuery(
		limit=limit,
		offset=offset,
		sort=sort,
		order=order,
		title=_search_term("title", title),
		actor=_search_term("actor", actor),
		search=_search_term("search", search),
	)
	result = service.list(query)
	return MovieListResponse(
		data=[_movie_out(m) for m in result.items],
		meta=ListMeta(total=result.total, pageSize=limit),
	)


@router.get("/movies/{movie_id}", response_model=MovieResponse)
def get_movie(movie_id: int, service: MovieService = Depends(get_service)):
	_check_movie_id(movie_id)
	return MovieResponse(data=_movie_out(service.get(movie_id)))


@router.patch("/movies/{movie_id}", response_model=MovieResponse)
def update_movie(movie_id: int, body: MovieUpdateIn, service: MovieService = Depends(get_service)):
	_check_movie_id(movie_id)
	changes = MovieUpdate(
		title=body.title,
		year=body.year,
		format=body.format.value if body.format else None,
		actors=body.actors,
	)
	return MovieResponse(data=_movie_out(service.update(movie_id, changes)))


@router.delete("/movies/{movie_id}", response_model=StatusResponse)
def delete_movie(movie_id: int, service: MovieService = Depends(get_service)):
	_check_movie_id(movie_id)
	service.delete(movie_id)
	return StatusResponse()


@router.post("/movies/import", response_model=ImportResponse)
async def import_movies(
	movies: Optional[UploadFile] = File(None),
	service: MovieService = Depends(get_service),
	settings: Settings = Depends(get_settings),
):
	"""Import a .txt file of movie blocks; duplicates are skipped and counted."""
	if movies is None:
		raise MoviesFileMissing()

	filename = movies.filename or ""
	mime_type = (movies.content_type or "").split(";")[0].strip()
	if mime_type not in ALLOWED_MIME_TYPES or not filename.lower().endswith(ALLOWED_EXTENSIONS):
		raise InvalidFileType({
			"fileName": filename,
			"mimeType": mime_type,
			"expectedMimeTypes": list(ALLOWED_MIME_TYPES),
			"expectedExtensions": list(ALLOWED_EXTENSIONS),
		})

	raw = await movies.read(settings.max_file_size + 1)  # one extra byte detects overflow
	if len(raw) > settings.max_file_size:
		raise FileSizeExceeded({"maxFileSize": settings.max_file_size})
	if not raw:
		raise MoviesFileEmpty()

	logger.info(f"[API] Import '{filename}' ({len(raw)} bytes)")
	result = await run_in_threadpool(service.import_movies, raw)
	return ImportResponse(
		data=[_movie_out(m) for m in result.items],
		meta=ImportMeta(imported=result.imported, duplicates=result.duplicates, total=result.total),
	)


def _check_movie_id(movie_id: int):
	if movie_id < 1:
		raise InvalidInputData({"errors": [{"field": "id", "message": "Movie ID must be a positive integer"}]})


# Error translation

async def catalog_error_handler(request: Request, exc: CatalogError):
	logger.debug(f"[API] {request.method} {request.url.path} -> {exc.status_code} {exc.code}")
	return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
	errors = [
		{"field": str(err["loc"][-1]) if err.get("loc") else None, "message": err.get("msg")}
		for err in exc.errors()
	]
	return await catalog_error_handler(request, InvalidInputData({"errors": errors}))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
	if exc.status_code == 404:
		return await catalog_error_handler(request, NotFound({"path": request.url.path, "method": request.method}))
	return JSONResponse(status_code=exc.status_code, content={"error": "httpError", "message": str(exc.detail), "paramMap": {}})


async def unexpected_error_handler(request: Request, exc: Exception):
	logger.exception(f"[API] Server error on {request.method} {request.url.path}: {exc}")
	return JSONResponse(
		status_code=500,
		content={"error": "internalServerError", "message": "Internal Server Error", "paramMap": {}},
	)


def create_app(service: Optional[MovieService] = None, settings: Optional[Settings] = None) -> FastAPI:
	"""
	Build the application. Without an injected service, one is wired from the
	settings at startup.
	"""
	settings = settings or Settings.from_env()
	app = FastAPI(title="Movie Catalog API", version="1.0.0")  # web app
	app.state.settings = settings
	app.state.service = service
	app.state.startup_seconds = 0.0

	app.include_router(router)
	app.add_exception_handler(CatalogError, catalog_error_handler)
	app.add_exception_handler(RequestValidationError, validation_error_handler)
	app.add_exception_handler(StarletteHTTPException, http_error_handler)
	app.add_exception_handler(Exception, unexpected_error_handler)

	@app.on_event("startup")
	async def startup_event():
		"""Wire the catalog components once and log how long it took."""
		if app.state.service is not None:
			return
		start = time.time()
		configure_logging(settings.log_level)
		logger.info("[API] Startup: connecting to the database and wiring the catalog...")
		app.state.service = build_service(settings)
		app.state.startup_seconds = time.time() - start
		logger.info(f"[API] Startup complete in {app.state.startup_seconds:.2f}s")

	@app.get("/health")
	async def health():
		"""Return minimal health info for liveness/readiness probes."""
		return {
			"status": "ok",
			"catalog_ready": app.state.service is not None,
			"startup_seconds": round(app.state.startup_seconds, 2),
		}

	return app


app = create_app()


if __name__ == "__main__":
	import uvicorn  # ASGI server for local runs

	uvicorn.run(app, host="0.0.0.0", port=app.state.settings.app_port)
