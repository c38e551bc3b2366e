"""
Media type detection for images referenced from quiz Markdown.

Authors embed audio and video the same way as pictures (`![video](url)`),
so the alt text (or URL) is the only hint about what the asset is.
"""

from __future__ import annotations

from .models import MediaType


def classify(hint: str | None) -> str:
    """
    Classify a referenced asset from a text hint.

    Case-insensitive substring match: "video" wins over "audio",
    anything else is an image.

    >>> classify("video-demo.mp4")
    'video'
    >>> classify("AUDIO-clip")
    'audio'
    >>> classify("scene.png")
    'image'
    """
    lowered = (hint or "").lower()
    if MediaType.VIDEO.value in lowered:
        return MediaType.VIDEO.value
    if MediaType.AUDIO.value in lowered:
        return MediaType.AUDIO.value
    return MediaType.IMAGE.value
