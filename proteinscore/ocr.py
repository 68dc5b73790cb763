"""
OCR processing module for PaddleOCR integration.

Produces positioned TextFragments for the label pipeline from an image.
"""

import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Tuple

import numpy as np
from PIL import Image

from .config import MAX_LONG_SIDE, MIN_OCR_CONFIDENCE, MIN_TEXT_HEIGHT, REGION_OF_INTEREST
from .pipeline.layout import TextFragment, fragments_from_boxes

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp"}


def init_ocr():
    """Initialize PaddleOCR model with settings tuned for printed labels."""
    from paddleocr import PaddleOCR

    return PaddleOCR(
        lang="en",
        use_textline_orientation=False,
        use_doc_orientation_classify=False,
        use_doc_unwarping=False,
        text_detection_model_name="PP-OCRv5_mobile_det",
        text_recognition_model_name="en_PP-OCRv5_mobile_rec",
        text_det_limit_type="max",  # enforce a hard size limit on detector input
        text_det_limit_side_len=MAX_LONG_SIDE,
    )


def _as_points(raw_box):
    """Coerce a polygon (numpy array, flat list or point list) to [[x, y], ...]."""
    if raw_box is None:
        return None
    if hasattr(raw_box, "reshape"):
        return [[float(x), float(y)] for x, y in raw_box.reshape(-1, 2)]
    coords = raw_box.tolist() if hasattr(raw_box, "tolist") else list(raw_box)
    if not coords:
        return None
    if isinstance(coords[0], (list, tuple)):
        return [[float(x), float(y)] for x, y in coords]
    # flat [x1, y1, x2, y2, ...]
    return [[float(x), float(y)] for x, y in zip(coords[::2], coords[1::2])]


def _as_score(value):
    if value is None:
        return None
    try:
        return float(value)
    except (OverflowError, TypeError, ValueError):
        return None


def _first_present(mapping, *keys):
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _is_text_info(info):
    if isinstance(info, (str, Mapping)):
        return True
    return isinstance(info, (list, tuple)) and bool(info) and isinstance(info[0], str)


def _is_line(item):
    """A 2.x detection: [polygon, (text, score)] or [polygon, text]."""
    return isinstance(item, (list, tuple)) and len(item) >= 2 and _is_text_info(item[1])


def normalize_ocr_result(ocr_result) -> Tuple[List, List[str], List]:
    """
    Returns (boxes, texts, scores).
    Works with:
      - 3.x predict output: [{'rec_polys': ..., 'rec_texts': ..., 'rec_scores': ...}]
      - {'data': [{'text_region':..., 'text':..., 'confidence':...}, ...]}
      - 2.x output: [[ [x,y]x4, (text, score) ], ...], optionally batched
    """
    boxes, texts, scores = [], [], []

    if ocr_result is None:
        return boxes, texts, scores

    if isinstance(ocr_result, Mapping):
        if ocr_result.get("data"):
            for item in ocr_result["data"]:
                boxes.append(_as_points(item.get("text_region")))
                texts.append(item.get("text", ""))
                scores.append(_as_score(item.get("confidence")))
            return boxes, texts, scores

        polys = _first_present(ocr_result, "rec_polys", "rec_boxes", "dt_polys")
        rec_texts = ocr_result.get("rec_texts")
        if polys is None or rec_texts is None:
            return boxes, texts, scores
        rec_scores = list(ocr_result.get("rec_scores") or [])
        for i, poly in enumerate(polys):
            if i >= len(rec_texts):
                break
            boxes.append(_as_points(poly))
            texts.append(str(rec_texts[i]))
            scores.append(_as_score(rec_scores[i]) if i < len(rec_scores) else None)
        return boxes, texts, scores

    if not isinstance(ocr_result, (list, tuple)) or not ocr_result:
        return boxes, texts, scores

    # Batched results: one entry per page
    first = ocr_result[0]
    if first is None or isinstance(first, Mapping) or not _is_line(first):
        for page in ocr_result:
            b, t, s = normalize_ocr_result(page)
            boxes.extend(b)
            texts.extend(t)
            scores.extend(s)
        return boxes, texts, scores

    for line in ocr_result:
        if not line or len(line) < 2:
            continue
        box, info = line[0], line[1]
        if isinstance(info, (list, tuple)):
            text = str(info[0]) if info else ""
            score = _as_score(info[1] if len(info) > 1 else None)
        elif isinstance(info, Mapping):
            text = info.get("text", "")
            score = _as_score(info.get("confidence"))
        else:
            text, score = str(info), None
        boxes.append(_as_points(box))
        texts.append(text)
        scores.append(score)

    return boxes, texts, scores


def load_image(image_path: Path, max_long_side: int = MAX_LONG_SIDE) -> Image.Image:
    """Load image as RGB and resize proportionally so its long side fits."""
    image = Image.open(image_path)
    if image.mode != "RGB":
        image = image.convert("RGB")

    max_dim = max(image.size)
    if max_dim > max_long_side:
        scale = max_long_side / max_dim
        new_size = (
            int(round(image.size[0] * scale)),
            int(round(image.size[1] * scale)),
        )
        image = image.resize(new_size, Image.LANCZOS)
    return image


def iter_image_paths(paths, extensions=SUPPORTED_EXTENSIONS):
    """Expand files and directories into image paths, skipping duplicates."""
    seen = set()
    for path in paths:
        path = Path(path)
        children = sorted(path.iterdir()) if path.is_dir() else [path]
        for child in children:
            if child.suffix.lower() in extensions and child not in seen:
                seen.add(child)
                yield child


def crop_region_of_interest(image: Image.Image, roi=REGION_OF_INTEREST) -> Image.Image:
    """
    Crop the scanned region out of a frame.

    Args:
        image: PIL Image
        roi: (x, y, width, height) as fractions of the frame, or None for all of it
    """
    if roi is None:
        return image
    x, y, w, h = roi
    width, height = image.size
    box = (
        int(round(x * width)),
        int(round(y * height)),
        int(round((x + w) * width)),
        int(round((y + h) * height)),
    )
    return image.crop(box)


def recognize_fragments(
    ocr_model,
    image: Image.Image,
    roi=REGION_OF_INTEREST,
    min_text_height: float = MIN_TEXT_HEIGHT,
    min_confidence: float = MIN_OCR_CONFIDENCE,
) -> Tuple[List[TextFragment], Dict[str, Any]]:
    """
    Run OCR on the scanned region of an image.

    Args:
        ocr_model: Initialized PaddleOCR model
        image: PIL Image (any mode)
        roi: Region of interest, see crop_region_of_interest

    Returns:
        Tuple of (fragments, stats dict); fragments is empty if OCR failed
    """
    start_time = time.time()
    try:
        region = crop_region_of_interest(image, roi)
        if region.mode != "RGB":
            region = region.convert("RGB")
        import cv2

        image_bgr = cv2.cvtColor(np.array(region), cv2.COLOR_RGB2BGR)

        boxes, texts, scores = normalize_ocr_result(ocr_model.predict(image_bgr))
        fragments = fragments_from_boxes(
            boxes,
            texts,
            scores,
            region.size,
            min_text_height=min_text_height,
            min_confidence=min_confidence,
        )
        stats = {
            "ocr_processing_time_seconds": round(time.time() - start_time, 3),
            "text_regions_found": len(texts),
            "fragments_kept": len(fragments),
        }
        return fragments, stats

    except Exception as e:
        logger.exception("OCR extraction failed")
        print(f"❌ OCR extraction failed: {e}")
        return [], {
            "ocr_processing_time_seconds": round(time.time() - start_time, 3),
            "error": str(e),
        }
