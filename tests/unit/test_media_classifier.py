"""
Unit tests for media type detection.
"""
import pytest

from src.quiz import classify


class TestClassify:
    """Alt text / URL hints map to image, audio or video."""

    @pytest.mark.parametrize("hint,expected", [
        ("video-demo.mp4", "video"),
        ("scene.png", "image"),
        ("AUDIO-clip", "audio"),
        ("My Video", "video"),
        ("podcast audio", "audio"),
    ])
    def test_keywords(self, hint, expected):
        assert classify(hint) == expected

    def test_video_wins_over_audio(self):
        assert classify("audio and video track") == "video"

    @pytest.mark.parametrize("hint", ["", None, "diagram", "https://cdn.example.com/x.gif"])
    def test_default_is_image(self, hint):
        assert classify(hint) == "image"
