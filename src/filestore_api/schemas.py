####################################
# --- Request/response schemas --- #
####################################

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from filestore_api.storage.listing import ListingPage

DEFAULT_SEARCH_PAGE = 0
DEFAULT_SEARCH_PAGE_SIZE = 10

T = TypeVar("T")


class ResponseException(BaseModel):
    """One error reported in a response envelope."""
    error_code: str = Field(default="", description="Machine-readable error code.")
    exception_source: Optional[str] = Field(default=None, description="Where the error came from.")
    exception_message: Optional[str] = Field(default=None, description="Human-readable message.")


class BaseResponse(BaseModel, Generic[T]):
    """Standard envelope for every JSON endpoint."""
    data: Optional[T] = None
    exceptions: Optional[List[ResponseException]] = None


class FileDto(BaseModel):
    name: str = Field(
        description="The stored file name.",
        json_schema_extra={"example": "report.pdf"},
    )


class GetFilesResponse(BaseModel):
    """Payload of `GET /v1/files/search`."""
    files: List[FileDto]


class Pagination(BaseModel):
    total_matching: int = Field(description="Number of files matching the pattern across all shards.")
    page: int = Field(description="Zero-based page index that was requested.")
    size: int = Field(description="Page size that was requested.")


class Metadata(BaseModel):
    pagination: Pagination


class BaseResponseMetadata(BaseResponse[T], Generic[T]):
    """Envelope for paginated endpoints."""
    metadata: Optional[Metadata] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "data": {"files": [{"name": "a1.txt"}, {"name": "b2.txt"}]},
                "metadata": {"pagination": {"total_matching": 2, "page": 0, "size": 10}},
                "exceptions": None,
            }
        }
    )

    @classmethod
    def from_listing(cls, listing: ListingPage) -> "BaseResponseMetadata[GetFilesResponse]":
        return cls(
            data=GetFilesResponse(files=[FileDto(name=f.name) for f in listing.files]),
            metadata=Metadata(
                pagination=Pagination(
                    total_matching=listing.total_matching,
                    page=listing.page,
                    size=listing.size,
                )
            ),
        )


class SearchQueryParams(BaseModel):
    """Query parameters for `GET /v1/files/search`."""
    regex: str = Field(description="Pattern that must match the whole file name.")
    page: int = Field(DEFAULT_SEARCH_PAGE, description="Zero-based page index.")
    size: Optional[int] = Field(
        None,
        ge=0,
        description=f"Number of files per page. Defaults to the configured page size ({DEFAULT_SEARCH_PAGE_SIZE} unless overridden).",
    )
