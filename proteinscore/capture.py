"""
Screen capture for live scanning.

Frames come from the screen that holds the cursor, so a label shown in any
window (a webcam preview, a product photo) can be scanned.
"""

import logging
import time

import pyautogui
from PIL import ImageGrab

logger = logging.getLogger(__name__)


def get_cursor_screen_bounds():
    """
    Get the bounds of the screen that contains the cursor.

    Returns:
        Tuple of (x, y, width, height), or None if it could not be determined
    """
    try:
        cursor_x, cursor_y = pyautogui.position()
        width, height = pyautogui.size()
    except Exception as e:
        print(f"❌ Error getting cursor position: {e}")
        return None

    if 0 <= cursor_x < width and 0 <= cursor_y < height:
        return (0, 0, width, height)
    # Cursor on a secondary display; grab everything and let the ROI crop
    return None


def capture_frame():
    """
    Capture a frame from the screen containing the cursor.

    Returns:
        Tuple of (PIL Image, stats dict) or (None, None) if capture fails
    """
    try:
        start_time = time.time()

        bounds = get_cursor_screen_bounds()
        if bounds is None:
            frame = ImageGrab.grab(all_screens=True)
        else:
            x, y, width, height = bounds
            frame = ImageGrab.grab(bbox=(x, y, x + width, y + height))

        stats = {
            "resolution": f"{frame.size[0]}x{frame.size[1]}",
            "capture_time_seconds": round(time.time() - start_time, 3),
            "screen_bounds": f"{bounds}" if bounds else "all_screens",
        }
        return frame, stats

    except Exception as e:
        logger.exception("Screen capture failed")
        print(f"❌ Error capturing frame: {e}")
        return None, None
