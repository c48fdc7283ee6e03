"""
Error taxonomy raised by the catalog core.
Each error carries a stable machine-readable code, an HTTP status hint and a
parameter map with the details the client needs to fix the request.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
	"""Base class for every error the core raises on purpose."""

	message = "Catalog error"
	code = "catalogError"
	status_code = 400

	def __init__(self, param_map: Optional[Dict[str, Any]] = None, message: Optional[str] = None):
		self.param_map = param_map or {}
		if message:
			self.message = message
		super().__init__(self.message)

	def to_dict(self) -> Dict[str, Any]:
		return {"error": self.code, "message": self.message, "paramMap": self.param_map}


class InvalidInputData(CatalogError):
	message = "Invalid input data"
	code = "invalidInputData"


class NotFound(CatalogError):
	message = "Resource not found"
	code = "notFound"
	status_code = 404


# Movie lifecycle

class MovieDoesNotExist(CatalogError):
	message = "Movie does not exist"
	code = "movieDoesNotExist"
	status_code = 404


class MovieAlreadyExists(CatalogError):
	message = "Movie with the same title, year, format and actors already exists"
	code = "movieAlreadyExists"
	status_code = 409


# Import

class MoviesFileMissing(CatalogError):
	message = "Movies file is missing"
	code = "moviesFileMissing"


class MoviesFileEmpty(CatalogError):
	message = "Movies file is empty"
	code = "moviesFileEmpty"


class InvalidFileType(CatalogError):
	message = "Invalid file type"
	code = "invalidFileType"


class FileSizeExceeded(CatalogError):
	message = "File size exceeded the maximum limit"
	code = "fileSizeExceeded"
	status_code = 413


class InvalidFileContent(CatalogError):
	message = "File contains invalid content"
	code = "invalidFileContent"


class MoviesMissingRequiredFields(CatalogError):
	message = "One or more movies have missing required fields"
	code = "moviesMissingRequiredFields"
