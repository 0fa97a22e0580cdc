"""Значения заголовка Content-Type, которые используются чаще всего."""

from enum import Enum


class ContentType(str, Enum):
    """
    Content-Type для тела запроса.

    Example:
        >>> headers = {"Content-Type": ContentType.JSON.value}
    """
    JSON = "application/json;charset=UTF-8"
    TEXT = "text/plain;charset=UTF-8"
    FORM_URLENCODED = "application/x-www-form-urlencoded;charset=UTF-8"
    # multipart upload
    FORM_DATA = "multipart/form-data;charset=UTF-8"
