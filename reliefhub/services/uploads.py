"""Image upload handling.

Uploaded images are not written to disk or object storage. Each file
is read into memory, checked, and embedded in the resource record as a
``data:<mimetype>;base64,<payload>`` URL. All files are validated
before any of them is returned, so a single bad upload rejects the
whole request before anything is persisted.
"""
from __future__ import annotations

import base64
from typing import Iterable, List

from werkzeug.datastructures import FileStorage

from ..errors import ValidationError

MAX_IMAGE_COUNT = 5
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def to_data_url(mimetype: str, content: bytes) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mimetype};base64,{encoded}"


def encode_images(
    files: Iterable[FileStorage],
    max_count: int = MAX_IMAGE_COUNT,
    max_bytes: int = MAX_IMAGE_BYTES,
) -> List[str]:
    """Validate uploaded image files and return them as data URLs.

    Parameters
    ----------
    files: Iterable[FileStorage]
        The uploaded files. Empty file inputs (no filename) are ignored.
    max_count: int
        Maximum number of files accepted in one request.
    max_bytes: int
        Maximum size of a single file.

    Raises
    ------
    ValidationError
        If there are too many files, a file is not an image, or a file
        exceeds ``max_bytes``.
    """
    uploads = [f for f in files if f is not None and f.filename]
    if len(uploads) > max_count:
        raise ValidationError(
            "Too many images.",
            fields={"images": [f"At most {max_count} images may be uploaded."]},
        )

    urls = []
    for upload in uploads:
        mimetype = upload.mimetype or ""
        if not mimetype.startswith("image/"):
            raise ValidationError(
                "Only images are allowed.",
                fields={"images": [f"{upload.filename} is not an image."]},
            )
        content = upload.stream.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise ValidationError(
                "Image too large.",
                fields={"images": [f"{upload.filename} exceeds {max_bytes // (1024 * 1024)} MB."]},
            )
        urls.append(to_data_url(mimetype, content))
    return urls
