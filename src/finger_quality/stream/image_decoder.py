"""
Image Decoder
=============

Decoding, resizing and re-encoding of still captures with OpenCV.

Design Rules:
    - This is the ONLY place in the codebase that decodes or encodes images
    - Stills are held as RGB internally (OpenCV's BGR is converted here)
    - The scored copy is resized to a fixed width; thresholds are tuned to it
    - Fails fast on corrupt stills with InputError
"""

import logging

import cv2
import numpy as np

from finger_quality.errors import InputError
from finger_quality.stream.frame import StillImage


logger = logging.getLogger(__name__)


_INTERPOLATION = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "area": cv2.INTER_AREA,
}


def decode_still(data: bytes) -> StillImage:
    """
    Decode encoded still bytes (JPEG, PNG, ...) to an RGB StillImage.

    Args:
        data: Encoded image bytes as returned by the camera

    Returns:
        StillImage with an (H, W, 3) uint8 RGB raster

    Raises:
        InputError: If the buffer is empty or cannot be decoded
    """
    if not data:
        raise InputError("Still buffer is empty")

    nparr = np.frombuffer(data, np.uint8)
    bgr = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

    if bgr is None:
        raise InputError(f"Failed to decode still ({len(data)} bytes): cv2.imdecode returned None")

    if len(bgr.shape) != 3 or bgr.shape[2] != 3:
        raise InputError(f"Invalid still shape: {bgr.shape}")

    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    return StillImage(pixels=rgb)


def resize_to_width(rgb: np.ndarray, target_width: int, interpolation: str = "nearest") -> np.ndarray:
    """
    Aspect-preserving resize to a fixed width.

    Height is truncated: max(1, int(height * target_width / width)).

    Args:
        rgb: (H, W) or (H, W, C) image
        target_width: Output width in pixels
        interpolation: 'nearest', 'linear' or 'area'

    Returns:
        Resized image

    Raises:
        InputError: If the image is empty
        ValueError: If the interpolation name is unknown
    """
    height, width = rgb.shape[:2]
    if width == 0 or height == 0:
        raise InputError(f"Cannot resize empty image {width}x{height}")

    try:
        flag = _INTERPOLATION[interpolation]
    except KeyError:
        raise ValueError(f"Unknown interpolation: {interpolation}")

    target_height = max(1, int(height * target_width / width))
    return cv2.resize(rgb, (target_width, target_height), interpolation=flag)


def to_grayscale(rgb: np.ndarray) -> np.ndarray:
    """
    Single-channel luminance reduction of an RGB image.

    Uses the ITU-R 601 weights (0.299 R + 0.587 G + 0.114 B).
    """
    if rgb.ndim == 2:
        return rgb
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)


def encode_jpeg(rgb: np.ndarray, quality: int = 90) -> bytes:
    """
    Encode an RGB image as JPEG for preview display.

    Returns:
        JPEG bytes, empty for an empty image

    Raises:
        InputError: If OpenCV refuses to encode the image
    """
    if rgb.size == 0:
        return b""

    bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR) if rgb.ndim == 3 else rgb
    ok, buf = cv2.imencode(".jpg", bgr, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise InputError(f"JPEG encode failed for image of shape {rgb.shape}")
    return buf.tobytes()
