"""
Best-focus still images from survey video at fixed intervals.

At every interval the frames inside a short window are scored and the
sharpest one that is not too dark is saved as a PNG:

    - darkness: proportion of greyscale pixels (0-1 range) below 1e-4;
      frames at or above ``dark_max`` are skipped (a dark frame usually means
      the sled has lifted off the seabed or is pointing into open water)
    - focus: sample variance of the 4-neighbour Laplacian of the greyscale
      frame scaled by 1e5

Video decoding goes through the ``VideoSource`` protocol so the selection
logic can be driven by any frame provider; ``OpenCVVideoSource`` is the
implementation backed by ``cv2.VideoCapture``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

import cv2
import numpy as np

from towcam.config import DARK_PIXEL_THRESHOLD, FOCUS_SCALE, StillSettings
from towcam.types import Pixels

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoMetadata:
    """Basic properties of a video file."""

    duration: float
    """Duration in seconds"""

    frame_rate: float
    """Frames per second"""

    width: Pixels
    height: Pixels


@dataclass(frozen=True)
class StillRecord:
    """One extracted still.

    Attributes:
        time: Time code of the interval in seconds
        file: Path of the saved image (None when no frame could be read)
        focus: Focus score of the chosen frame, rounded
        dark_pct: Proportion of dark pixels in the chosen frame
    """

    time: float
    file: Optional[str]
    focus: int
    dark_pct: float


class VideoSource(Protocol):
    """Random-access frame provider."""

    path: str

    @property
    def metadata(self) -> VideoMetadata:
        ...

    def read_frame(self, time_s: float) -> Optional[np.ndarray]:
        """Decode the frame at ``time_s`` seconds, or None past the end."""
        ...


class OpenCVVideoSource:
    """Video file decoded with OpenCV."""

    def __init__(self, path: str):
        """
        Open a video file.

        Args:
            path: Path to the video file

        Raises:
            RuntimeError: If the file cannot be opened
        """
        self.path = str(path)
        self.cap = cv2.VideoCapture(self.path)

        if not self.cap.isOpened():
            raise RuntimeError(f"Could not open video file {self.path}")

        fps = float(self.cap.get(cv2.CAP_PROP_FPS))
        frame_count = float(self.cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self._metadata = VideoMetadata(
            duration=frame_count / fps if fps > 0 else 0.0,
            frame_rate=fps,
            width=Pixels(int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))),
            height=Pixels(int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))),
        )

        logger.info(
            f"Opened {self.path}: {self._metadata.width}x{self._metadata.height}, "
            f"{fps:.2f} fps, {self._metadata.duration:.1f} s"
        )

    @property
    def metadata(self) -> VideoMetadata:
        return self._metadata

    def read_frame(self, time_s: float) -> Optional[np.ndarray]:
        self.cap.set(cv2.CAP_PROP_POS_MSEC, time_s * 1000.0)
        ret, frame = self.cap.read()
        if not ret:
            return None
        return frame

    def close(self) -> None:
        self.cap.release()

    def __enter__(self) -> OpenCVVideoSource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def to_greyscale(frame: np.ndarray) -> np.ndarray:
    """Convert a BGR (or already single-channel) uint8 frame to greyscale in [0, 1]."""
    if frame.ndim == 3:
        frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    return frame.astype(np.float64) / 255.0


def dark_proportion(grey: np.ndarray, threshold: float = DARK_PIXEL_THRESHOLD) -> float:
    """Proportion of pixels darker than ``threshold``."""
    return float(np.count_nonzero(grey < threshold)) / grey.size


def focus_score(grey: np.ndarray) -> float:
    """Sample variance of the 4-neighbour Laplacian; higher is sharper."""
    # ksize=1 is the [[0, 1, 0], [1, -4, 1], [0, 1, 0]] kernel
    laplacian = cv2.Laplacian(grey * FOCUS_SCALE, cv2.CV_64F, ksize=1)
    return float(np.var(laplacian, ddof=1))


def select_best_frame(
    frames: Iterable[Optional[np.ndarray]], dark_max: float
) -> tuple[Optional[np.ndarray], float, float]:
    """
    Pick the sharpest acceptably bright frame.

    Args:
        frames: Candidate frames; None entries (decode failures) are skipped
        dark_max: Frames with at least this proportion of dark pixels are
            not scored

    Returns:
        Tuple of (frame, focus, dark proportion). When no frame qualifies
        the first decoded frame is returned with focus and darkness 0.
    """
    best_frame = None
    best_focus = 0.0
    best_dark = 0.0
    fallback = None

    for frame in frames:
        if frame is None:
            continue
        if fallback is None:
            fallback = frame

        grey = to_greyscale(frame)
        dark = dark_proportion(grey)
        if dark < dark_max:
            focus = focus_score(grey)
            if focus > best_focus:
                best_frame = frame
                best_focus = focus
                best_dark = dark

    if best_frame is None:
        return fallback, 0.0, 0.0
    return best_frame, best_focus, best_dark


def _write_png(path: Path, frame: np.ndarray) -> None:
    if not cv2.imwrite(str(path), frame):
        raise RuntimeError(f"Failed to write image {path}")


def fixed_interval_stills(
    source: VideoSource,
    outdir: Optional[str] = None,
    settings: Optional[StillSettings] = None,
    save_frame: Optional[Callable[[Path, np.ndarray], None]] = None,
) -> list[StillRecord]:
    """
    Save the best-focus still around every interval of a video.

    Args:
        source: Video to sample
        outdir: Output directory (default: the directory of the video)
        settings: Interval, window, darkness limit and start offset
        save_frame: Writer for the chosen frames (default: PNG via OpenCV)

    Returns:
        One StillRecord per interval, in time order

    Example:
        >>> with OpenCVVideoSource("myvideo.mp4") as video:
        ...     records = fixed_interval_stills(video, settings=StillSettings(window=0.5))
    """
    if settings is None:
        settings = StillSettings()
    if save_frame is None:
        save_frame = _write_png

    video_path = Path(source.path)
    output_dir = Path(outdir) if outdir is not None else video_path.parent
    station = video_path.stem

    meta = source.metadata
    frames = round(meta.frame_rate * settings.window)
    frame_interval = 1.0 / meta.frame_rate if meta.frame_rate > 0 else 0.0

    records: list[StillRecord] = []
    timecode = settings.time_offset

    while timecode < meta.duration:
        candidates = (source.read_frame(timecode + j * frame_interval) for j in range(frames + 1))
        frame, focus, dark = select_best_frame(candidates, settings.dark_max)

        if frame is None:
            logger.warning(f"{station}: no frame could be decoded at {timecode:g} s")
            records.append(StillRecord(time=timecode, file=None, focus=0, dark_pct=0.0))
        else:
            out_path = output_dir / f"{station}-{timecode:g}.png"
            save_frame(out_path, frame)
            records.append(StillRecord(time=timecode, file=str(out_path), focus=round(focus), dark_pct=dark))
            logger.info(
                f"{station}: {timecode:g}/{meta.duration:g} s -> {out_path.name} "
                f"(focus={focus:.0f}, dark={dark:.3f})"
            )

        timecode += settings.interval

    return records


def extract_stills(
    video_path: str,
    outdir: Optional[str] = None,
    settings: Optional[StillSettings] = None,
) -> list[StillRecord]:
    """Open a video file with OpenCV and run :func:`fixed_interval_stills`."""
    with OpenCVVideoSource(video_path) as source:
        return fixed_interval_stills(source, outdir=outdir, settings=settings)
