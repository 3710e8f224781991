"""Demo yt-dlp output for tests.

These fixtures mirror the shape of ``yt-dlp --dump-json`` for YouTube
videos: DASH video-only and audio-only formats with byte ranges, a muxed
progressive format, an HLS format, manual subtitles and automatic
captions.
"""

import copy
from typing import Any, Dict, List

CDN = "https://rr1---sn-demo.googlevideo.com/videoplayback"


def _video_format(
    format_id: str, height: int, tbr: float, vcodec: str = "avc1.640028", ext: str = "mp4"
) -> Dict[str, Any]:
    width = height * 16 // 9
    return {
        "format_id": format_id,
        "format_note": f"{height}p",
        "ext": ext,
        "protocol": "https",
        "url": f"{CDN}?itag={format_id}",
        "width": width,
        "height": height,
        "resolution": f"{width}x{height}",
        "fps": 30,
        "vcodec": vcodec,
        "acodec": "none",
        "tbr": tbr,
        "vbr": tbr,
        "streaming_options": {"init_range": "0-740", "index_range": "741-1048"},
    }


def _audio_format(
    format_id: str,
    abr: float,
    acodec: str = "mp4a.40.2",
    ext: str = "m4a",
    language: Any = "en",
) -> Dict[str, Any]:
    return {
        "format_id": format_id,
        "format_note": "medium",
        "ext": ext,
        "protocol": "https",
        "url": f"{CDN}?itag={format_id}",
        "vcodec": "none",
        "acodec": acodec,
        "abr": abr,
        "tbr": abr,
        "asr": 44100 if ext == "m4a" else 48000,
        "audio_channels": 2,
        "language": language,
        "streaming_options": {"init_range": "0-631", "index_range": "632-1179"},
    }


# Demo video: Rick Astley - Never Gonna Give You Up
RICK_ASTLEY_VIDEO: Dict[str, Any] = {
    "id": "dQw4w9WgXcQ",
    "title": "Rick Astley - Never Gonna Give You Up (Official Music Video)",
    "duration": 212,
    "duration_string": "3:32",
    "uploader": "Rick Astley",
    "uploader_id": "@RickAstleyYT",
    "channel": "Rick Astley",
    "channel_id": "UCuAXFkgsw1L7xaCfnd5JJOw",
    "channel_follower_count": 4100000,
    "upload_date": "20091025",
    "view_count": 1500000000,
    "like_count": 15000000,
    "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg",
    "description": (
        "The official music video for Never Gonna Give You Up by Rick Astley.\n\n"
        "The song was a worldwide number-one hit."
    ),
    "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "extractor": "youtube",
    "formats": [
        # Storyboard, not a media format
        {
            "format_id": "sb0",
            "ext": "mhtml",
            "protocol": "mhtml",
            "vcodec": "none",
            "acodec": "none",
            "url": f"{CDN}/sb",
        },
        _audio_format("139", 48.8),
        _audio_format("140", 129.5),
        _audio_format("251", 135.2, acodec="opus", ext="webm"),
        _video_format("160", 144, 110.0),
        _video_format("133", 240, 240.0),
        _video_format("134", 360, 640.0),
        _video_format("135", 480, 1150.0),
        _video_format("136", 720, 2300.0),
        _video_format("247", 720, 1800.0, vcodec="vp9", ext="webm"),
        _video_format("137", 1080, 4500.0),
        # Muxed progressive format
        {
            "format_id": "18",
            "ext": "mp4",
            "protocol": "https",
            "url": f"{CDN}?itag=18",
            "width": 640,
            "height": 360,
            "vcodec": "avc1.42001E",
            "acodec": "mp4a.40.2",
            "tbr": 596.0,
        },
        # HLS variant
        {
            "format_id": "96",
            "ext": "mp4",
            "protocol": "m3u8_native",
            "url": "https://manifest.googlevideo.com/api/manifest/hls_playlist/itag/96",
            "vcodec": "avc1.640028",
            "acodec": "mp4a.40.2",
            "tbr": 4600.0,
        },
    ],
    "subtitles": {
        "en": [
            {"ext": "vtt", "url": "https://www.youtube.com/api/timedtext?lang=en&fmt=vtt", "name": "English"},
            {"ext": "srv3", "url": "https://www.youtube.com/api/timedtext?lang=en&fmt=srv3", "name": "English"},
        ],
        "es": [
            {"ext": "vtt", "url": "https://www.youtube.com/api/timedtext?lang=es&fmt=vtt", "name": "Spanish"},
        ],
        "live_chat": [
            {"ext": "json", "url": "https://www.youtube.com/live_chat_replay", "name": "Live chat"},
        ],
    },
    "automatic_captions": {
        "en": [
            {"ext": "vtt", "url": "https://www.youtube.com/api/timedtext?lang=en&kind=asr&fmt=vtt", "name": "English (auto-generated)"},
        ],
        "de": [
            {"ext": "vtt", "url": "https://www.youtube.com/api/timedtext?lang=de&kind=asr&fmt=vtt", "name": "German (auto-generated)"},
        ],
    },
    "chapters": [
        {"start_time": 0.0, "end_time": 18.0, "title": "Intro"},
        {"start_time": 18.0, "end_time": 43.0, "title": "Verse 1"},
        {"start_time": 43.0, "end_time": 212.0, "title": "Chorus"},
    ],
}

# Demo video: Me at the zoo (first YouTube video), low qualities only
ME_AT_ZOO_VIDEO: Dict[str, Any] = {
    "id": "jNQXAC9IVRw",
    "title": "Me at the zoo",
    "duration": 19,
    "uploader": "jawed",
    "channel_id": "UC4QobU6STFB0P71PMvOGN5A",
    "upload_date": "20050424",
    "view_count": 300000000,
    "like_count": 15000000,
    "thumbnail": "https://i.ytimg.com/vi/jNQXAC9IVRw/maxresdefault.jpg",
    "description": "The first video on YouTube.",
    "formats": [
        _video_format("160", 144, 80.0),
        _video_format("133", 240, 150.0),
        _audio_format("140", 129.0, language=None),
    ],
    "subtitles": {},
    "automatic_captions": {},
    "chapters": None,
}

DEMO_VIDEOS: Dict[str, Dict[str, Any]] = {
    RICK_ASTLEY_VIDEO["id"]: RICK_ASTLEY_VIDEO,
    ME_AT_ZOO_VIDEO["id"]: ME_AT_ZOO_VIDEO,
}


def get_demo_video(video_id: str) -> Dict[str, Any]:
    """
    Get a deep copy of demo yt-dlp output for a video ID.

    Unknown IDs get the Rick Astley fixture with the ID substituted.
    """
    video = copy.deepcopy(DEMO_VIDEOS.get(video_id, RICK_ASTLEY_VIDEO))
    video["id"] = video_id
    return video


def get_demo_formats(video_id: str) -> List[Dict[str, Any]]:
    return get_demo_video(video_id)["formats"]
