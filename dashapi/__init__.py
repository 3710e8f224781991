"""yt-dlp DASH API - REST façade over yt-dlp with MPEG-DASH manifest generation."""

__version__ = "1.0.0"
