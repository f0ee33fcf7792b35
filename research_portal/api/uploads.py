"""
Validation of uploaded documents.

Runs before any model call. Only PDF and plain text documents under the
per-file size limit are accepted.
"""
from pathlib import PurePath
from typing import List, Optional, Sequence

import structlog
from fastapi import UploadFile

from research_portal.config import get_settings
from research_portal.exceptions import FileTooLargeError, InvalidFileTypeError, NoFilesUploadedError
from research_portal.services.oracle import PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE, DocumentPart

logger = structlog.get_logger(__name__)

ALLOWED_CONTENT_TYPES = {PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE}
ALLOWED_EXTENSIONS = {"pdf", "txt"}


def validate_file_type(file: UploadFile) -> None:
    """
    Accept a file whose content type or extension is PDF or plain text.

    Raises:
        InvalidFileTypeError: Neither the content type nor the extension is allowed.
    """
    filename = file.filename or ""
    extension = PurePath(filename).suffix.lower().lstrip(".")
    content_type = (file.content_type or "").split(";")[0].strip()

    if content_type not in ALLOWED_CONTENT_TYPES and extension not in ALLOWED_EXTENSIONS:
        raise InvalidFileTypeError(filename=filename, extension=extension)


async def read_document(file: UploadFile, max_size: int) -> DocumentPart:
    """Validate one upload and read it into memory."""
    validate_file_type(file)
    data = await file.read()
    filename = file.filename or "document"

    if len(data) > max_size:
        raise FileTooLargeError(filename=filename, size=len(data), max_size=max_size)

    return DocumentPart(
        filename=filename,
        content_type=(file.content_type or "").split(";")[0].strip(),
        data=data,
    )


async def read_documents(files: Optional[Sequence[UploadFile]]) -> List[DocumentPart]:
    """
    Validate and read every upload of a request.

    Raises:
        NoFilesUploadedError: The request carried no files.
        InvalidFileTypeError: A file is not PDF or plain text.
        FileTooLargeError: A file exceeds the per-file limit.
    """
    if not files:
        raise NoFilesUploadedError()

    max_size = get_settings().max_upload_size_bytes
    # Types first, so a bad file is rejected before anything is read
    for file in files:
        validate_file_type(file)

    documents = [await read_document(file, max_size) for file in files]
    logger.info(
        "Documents received",
        count=len(documents),
        sizes=[d.size for d in documents],
    )
    return documents
