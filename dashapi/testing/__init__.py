"""Demo yt-dlp output used by the test suite."""

from dashapi.testing.fixtures import DEMO_VIDEOS, get_demo_formats, get_demo_video

__all__ = ["DEMO_VIDEOS", "get_demo_formats", "get_demo_video"]
