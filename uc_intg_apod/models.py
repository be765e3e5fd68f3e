"""
APOD response records and the tagged parse of response bodies.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class MediaType(str, Enum):
    """Media types published by the APOD service."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class PictureRecord:
    """A single Astronomy Picture of the Day entry."""

    date: str
    title: str
    url: str
    media_type: str
    explanation: str = ""
    copyright: Optional[str] = None
    hdurl: Optional[str] = None

    @property
    def is_image(self) -> bool:
        """True when the entry can be shown as a picture."""
        return self.media_type == MediaType.IMAGE


@dataclass(frozen=True)
class ServiceError:
    """An HTTP-level failure reported by the APOD service."""

    message: str
    status: int


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return None
    return str(value)


def parse_picture_record(data: Any) -> PictureRecord:
    """
    Decode a successful APOD body.

    :param data: decoded JSON body
    :return: the picture record
    :raises ValueError: if the body does not have the record's shape
    """
    if not isinstance(data, dict):
        raise ValueError("APOD body is not an object")

    for key in ("url", "title", "media_type"):
        if not isinstance(data.get(key), str):
            raise ValueError(f"APOD body has no '{key}' string")

    return PictureRecord(
        date=_optional_str(data, "date") or "",
        title=data["title"],
        url=data["url"],
        media_type=data["media_type"],
        explanation=_optional_str(data, "explanation") or "",
        copyright=_optional_str(data, "copyright"),
        hdurl=_optional_str(data, "hdurl"),
    )


def parse_service_error(data: Any, status: int) -> ServiceError:
    """
    Decode an APOD error body of the form ``{"error": {"message": ...}}``.

    :raises ValueError: if the body carries no error message
    """
    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if not isinstance(message, str):
        raise ValueError("APOD body has no error message")
    return ServiceError(message=message, status=status)
