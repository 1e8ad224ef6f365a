import logging

from fastapi import APIRouter, Depends, File, Path, UploadFile
from fastapi.responses import FileResponse

from filestore_api.config.settings import Settings
from filestore_api.dependencies import (
    get_app_settings,
    get_count_engine,
    get_listing_engine,
    get_storage_engine,
)
from filestore_api.errors import InvalidInputError
from filestore_api.schemas import (
    BaseResponse,
    BaseResponseMetadata,
    GetFilesResponse,
    SearchQueryParams,
)
from filestore_api.storage import CountEngine, RegexListingEngine, StorageEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files")

# Handlers are plain `def` so FastAPI runs each request on a worker thread;
# the storage engines do blocking filesystem I/O.


@router.post("/upload", response_model=BaseResponse[str])
def upload_file(
    file: UploadFile = File(..., description="The file to store"),
    storage: StorageEngine = Depends(get_storage_engine),
) -> BaseResponse[str]:
    """
    Store an uploaded file under its own name.

    If a file with the same name is already stored, the upload is discarded
    and the existing path is returned.

    Returns:
        BaseResponse[str]: The storage path, e.g. `data-storage/0c/a1.txt`
    """
    logger.info(f"upload_file: fileName={file.filename}")
    file_path = storage.save(file.filename or "", file.file)
    return BaseResponse[str](data=file_path)


@router.put("/update/{file_name}", response_model=BaseResponse[str])
def update_file(
    file_name: str = Path(..., description="Name of the stored file to replace"),
    file: UploadFile = File(..., description="The new content"),
    storage: StorageEngine = Depends(get_storage_engine),
) -> BaseResponse[str]:
    """
    Replace the content of an existing file.

    The uploaded part's file name, when sent, must equal `file_name`.
    """
    logger.info(f"update_file: fileName={file_name}")
    file_path = storage.update(file_name, file.file, uploaded_name=file.filename)
    return BaseResponse[str](data=file_path)


@router.get("/download/{file_name}")
def download_file(
    file_name: str = Path(..., description="Name of the stored file"),
    storage: StorageEngine = Depends(get_storage_engine),
) -> FileResponse:
    """Stream a stored file back as an attachment."""
    logger.info(f"download_file: fileName={file_name}")
    file_path = storage.retrieve(file_name)
    return FileResponse(
        file_path,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.delete("/delete/{file_name}", response_model=BaseResponse[str])
def delete_file(
    file_name: str = Path(..., description="Name of the stored file"),
    storage: StorageEngine = Depends(get_storage_engine),
) -> BaseResponse[str]:
    logger.info(f"delete_file: fileName={file_name}")
    storage.delete(file_name)
    return BaseResponse[str](data=f"File deleted: {file_name}")


@router.get("/search", response_model=BaseResponseMetadata[GetFilesResponse])
def search_files(
    query_params: SearchQueryParams = Depends(),
    listing: RegexListingEngine = Depends(get_listing_engine),
    settings: Settings = Depends(get_app_settings),
) -> BaseResponseMetadata[GetFilesResponse]:
    """
    List stored files whose whole name matches `regex`, one page at a time.

    Args:
        query_params: regex, zero-based page and page size

    Returns:
        BaseResponseMetadata[GetFilesResponse]: The page of files plus the
        total number of matches across all shards
    """
    size = settings.default_page_size if query_params.size is None else query_params.size
    if size > settings.max_page_size:
        raise InvalidInputError(
            f"Page size {size} exceeds the maximum of {settings.max_page_size}"
        )

    logger.info(
        f"search_files: regex={query_params.regex}, page={query_params.page}, size={size}"
    )
    page = listing.list(query_params.regex, query_params.page, size)
    return BaseResponseMetadata[GetFilesResponse].from_listing(page)


@router.get("/count", response_model=BaseResponse[int])
def count_files(counter: CountEngine = Depends(get_count_engine)) -> BaseResponse[int]:
    """Total number of stored files across all shards."""
    return BaseResponse[int](data=counter.count_all())
