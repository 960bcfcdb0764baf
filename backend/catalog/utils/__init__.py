"""Utilities for classifying media files and deriving their public URLs."""

IMAGE_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
    }
)

VIDEO_MIME_TYPES = frozenset(
    {
        "video/mp4",
        "video/mpeg",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-ms-wmv",
        "video/webm",
        "video/ogg",
        "video/3gpp",
        "video/x-flv",
    }
)

IMAGE_URL_TEMPLATE = "https://drive.google.com/uc?export=view&id={file_id}"
VIDEO_URL_TEMPLATE = "https://drive.google.com/file/d/{file_id}/preview"


def is_image(mime_type: str) -> bool:
    """Check whether a MIME type is one of the recognized image types."""
    return mime_type in IMAGE_MIME_TYPES


def is_video(mime_type: str) -> bool:
    """Check whether a MIME type is one of the recognized video types."""
    return mime_type in VIDEO_MIME_TYPES


def get_image_url(file_id: str) -> str:
    """
    Build the public view link for an image file.

    The link is not checked for reachability; it only resolves for files
    shared publicly (or for viewers signed in with access).

    Args:
        file_id: The storage file id

    Returns:
        The image URL
    """
    return IMAGE_URL_TEMPLATE.format(file_id=file_id)


def get_video_url(file_id: str) -> str:
    """
    Build the embeddable preview-player link for a video file.

    Args:
        file_id: The storage file id

    Returns:
        The video URL
    """
    return VIDEO_URL_TEMPLATE.format(file_id=file_id)
