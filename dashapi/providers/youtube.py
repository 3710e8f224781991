"""YouTube provider implementation."""

import asyncio
import json
import re
import subprocess  # nosec B404 - subprocess used for returning CompletedProcess
from typing import Any, Dict, List, Optional

import structlog

from dashapi.providers.base import VideoProvider
from dashapi.providers.exceptions import ExtractionError, InvalidURLError, VideoUnavailableError

logger = structlog.get_logger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class YouTubeProvider(VideoProvider):
    """YouTube video provider implementation."""

    # URL patterns for YouTube videos
    URL_PATTERNS = [
        r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=[\w-]+",
        r"(?:https?://)?(?:www\.)?youtube\.com/shorts/[\w-]+",
        r"(?:https?://)?(?:www\.)?youtube\.com/embed/[\w-]+",
        r"(?:https?://)?youtu\.be/[\w-]+",
        r"(?:https?://)?m\.youtube\.com/watch\?v=[\w-]+",
    ]

    # Pattern to extract video ID
    VIDEO_ID_PATTERN = r"(?:v=|shorts/|embed/|youtu\.be/)([\w-]+)"

    # Bare video IDs are 11 characters of [A-Za-z0-9_-]
    BARE_ID_PATTERN = r"^[\w-]{11}$"

    UNAVAILABLE_MARKERS = (
        "Video unavailable",
        "Private video",
        "This video has been removed",
        "members-only",
        "Sign in to confirm your age",
    )

    def __init__(self, config: dict):
        """
        Initialize YouTube provider.

        Args:
            config: Provider configuration dictionary
        """
        self.config = config
        self.binary: str = config.get("binary", "yt-dlp")
        self.player_client: str = config.get("player_client", "web")
        self.retry_attempts: int = config.get("retry_attempts", 3)
        self.retry_backoff: list = config.get("retry_backoff", [2, 4, 8])
        self.timeout: float = config.get("timeout", 30.0)

        logger.info(
            "YouTube provider initialized",
            binary=self.binary,
            player_client=self.player_client,
            retry_attempts=self.retry_attempts,
        )

    def validate_url(self, url: str) -> bool:
        """
        Validate if URL is a valid YouTube URL.

        Args:
            url: URL to validate

        Returns:
            True if URL is valid YouTube URL, False otherwise
        """
        if not url:
            return False

        for pattern in self.URL_PATTERNS:
            if re.match(pattern, url, re.IGNORECASE):
                logger.debug("URL validated", url=url, pattern=pattern)
                return True

        return False

    def build_url(self, video_id: str) -> str:
        """
        Build the watch URL for a bare video ID.

        Args:
            video_id: 11-character YouTube video ID

        Returns:
            Canonical watch URL

        Raises:
            InvalidURLError: If the ID is malformed
        """
        if not video_id or not re.match(self.BARE_ID_PATTERN, video_id):
            raise InvalidURLError(f"Invalid YouTube video ID: {video_id}")
        return WATCH_URL.format(video_id=video_id)

    def extract_video_id(self, url: str) -> Optional[str]:
        """
        Extract video ID from YouTube URL.

        Args:
            url: YouTube URL

        Returns:
            Video ID if found, None otherwise
        """
        match = re.search(self.VIDEO_ID_PATTERN, url)
        if match:
            video_id = match.group(1)
            logger.debug("Video ID extracted", url=url, video_id=video_id)
            return video_id

        logger.warning("Could not extract video ID", url=url)
        return None

    def _build_command(self, url: str) -> List[str]:
        return [
            self.binary,
            "--dump-json",
            "--skip-download",
            "--no-playlist",
            "--no-warnings",
            "--extractor-args",
            f"youtube:player_client={self.player_client}",
            url,
        ]

    async def get_stream_info(self, url: str) -> Dict[str, Any]:
        """
        Extract the full yt-dlp info dictionary for a video.

        Args:
            url: YouTube video URL

        Returns:
            yt-dlp info dictionary (formats, subtitles, automatic_captions,
            chapters and metadata)

        Raises:
            InvalidURLError: If URL is invalid
            VideoUnavailableError: If video is not accessible
            ExtractionError: If yt-dlp fails or its output cannot be parsed
        """
        if not self.validate_url(url):
            raise InvalidURLError(f"Invalid YouTube URL: {url}")

        video_id = self.extract_video_id(url)
        if not video_id:
            raise InvalidURLError(f"Could not extract video ID from URL: {url}")

        logger.info("Extracting stream info", url=url, video_id=video_id)

        cmd = self._build_command(url)
        logger.debug("Executing yt-dlp", command=cmd)

        try:
            result = await self._execute_with_retry(cmd, timeout=self.timeout)
            info = json.loads(result.stdout.decode())
        except ExtractionError as e:
            error_str = str(e)
            if any(marker in error_str for marker in self.UNAVAILABLE_MARKERS):
                raise VideoUnavailableError(f"Video is not accessible: {error_str}") from e
            raise
        except json.JSONDecodeError as e:
            logger.error("Failed to parse yt-dlp output", error=str(e))
            raise ExtractionError(f"Failed to parse stream info: {str(e)}") from e

        if not isinstance(info, dict):
            raise ExtractionError("Unexpected yt-dlp output: expected a JSON object")

        logger.info(
            "Stream info extracted successfully",
            video_id=video_id,
            formats=len(info.get("formats") or []),
            subtitle_languages=len(info.get("subtitles") or {}),
        )
        return info

    def _is_retriable_error(self, error_msg: str) -> bool:
        """
        Determine if a yt-dlp error should trigger a retry.

        Args:
            error_msg: Error message from yt-dlp stderr

        Returns:
            True if error is retriable, False otherwise
        """
        retriable_patterns = [
            "HTTP Error 5",  # Server errors (5xx)
            "Connection reset",
            "Timeout",
            "Too Many Requests",
            "HTTP Error 429",
            "Unable to connect",
        ]
        return any(pattern in error_msg for pattern in retriable_patterns)

    async def _execute_with_retry(  # noqa: C901
        self,
        cmd: List[str],
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        """
        Execute command with retry logic.

        Implements backoff with configurable retry attempts. Distinguishes
        between retriable errors (network, 5xx, timeouts) and non-retriable
        errors (private video, invalid URL).

        Args:
            cmd: Command to execute as list of strings
            timeout: Optional timeout in seconds for each attempt

        Returns:
            CompletedProcess with stdout and stderr

        Raises:
            ExtractionError: If all retry attempts fail or non-retriable error occurs
        """
        last_error: Optional[str] = None

        for attempt in range(self.retry_attempts):
            try:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )

                try:
                    if timeout:
                        stdout, stderr = await asyncio.wait_for(
                            process.communicate(), timeout=timeout
                        )
                    else:
                        stdout, stderr = await process.communicate()
                except asyncio.TimeoutError:
                    process.kill()
                    await process.wait()
                    raise

                if process.returncode == 0:
                    return subprocess.CompletedProcess(cmd, process.returncode, stdout, stderr)

                error_msg = stderr.decode() if stderr else "Unknown error"

                if not self._is_retriable_error(error_msg):
                    raise ExtractionError(error_msg)

                last_error = error_msg

                if attempt < self.retry_attempts - 1:
                    wait_time = self.retry_backoff[min(attempt, len(self.retry_backoff) - 1)]
                    logger.warning(
                        "Retrying after retriable error",
                        attempt=attempt + 1,
                        max_attempts=self.retry_attempts,
                        wait_seconds=wait_time,
                        error=error_msg[:200],
                    )
                    await asyncio.sleep(wait_time)

            except asyncio.TimeoutError:
                last_error = f"Timeout after {timeout}s"
                logger.warning(
                    "Timeout during command execution",
                    attempt=attempt + 1,
                    max_attempts=self.retry_attempts,
                    timeout=timeout,
                )
                if attempt < self.retry_attempts - 1:
                    wait_time = self.retry_backoff[min(attempt, len(self.retry_backoff) - 1)]
                    await asyncio.sleep(wait_time)

            except ExtractionError:
                raise

            except FileNotFoundError:
                logger.error("yt-dlp not found, ensure it is installed and in PATH")
                raise ExtractionError(f"{self.binary} is not installed or not in PATH")

            except Exception as e:
                last_error = str(e)
                if attempt == self.retry_attempts - 1:
                    raise ExtractionError(f"Unexpected error: {last_error}") from e

        raise ExtractionError(f"Failed after {self.retry_attempts} attempts: {last_error}")
