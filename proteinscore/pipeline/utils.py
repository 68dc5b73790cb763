"""
Geometry helpers for OCR bounding polygons.
"""


def box_bounds(box):
    """Get bounding box (min_x, min_y, max_x, max_y) from polygon points."""
    xs = [p[0] for p in box]
    ys = [p[1] for p in box]
    return min(xs), min(ys), max(xs), max(ys)


def poly_height(box):
    """Get height of bounding box."""
    _, y0, _, y1 = box_bounds(box)
    return y1 - y0


def x_start(box):
    """Get left x-coordinate of bounding box."""
    x0, _, _, _ = box_bounds(box)
    return x0


def y_center(box):
    """Get vertical center of bounding box."""
    _, y0, _, y1 = box_bounds(box)
    return (y0 + y1) / 2.0
