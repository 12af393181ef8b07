"""
Bounding box utilities for the region overlay.

Converts detector boxes (0-1000 normalized) to pixel space and renders the
overlay preview: active regions outlined with their order badge, the
selected region highlighted.
"""
from typing import Dict, List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from core.constants import COORDINATE_SCALE
from core.models import BoundingBox, TextRegion

REGION_COLOR = (59, 130, 246)
SELECTED_COLOR = (37, 99, 235)
SELECTED_FILL = (59, 130, 246, 51)
BADGE_WIDTH = 30
BADGE_HEIGHT = 25


def denormalize_box(box: BoundingBox, img_width: int, img_height: int) -> Dict:
    """
    Convert a normalized box to pixel coordinates.

    Args:
        box: Detector box in 0-1000 space
        img_width: Image width
        img_height: Image height

    Returns:
        Dict with pixel x1, y1, x2, y2
    """
    return {
        'x1': int(box.xmin / COORDINATE_SCALE * img_width),
        'y1': int(box.ymin / COORDINATE_SCALE * img_height),
        'x2': int(box.xmax / COORDINATE_SCALE * img_width),
        'y2': int(box.ymax / COORDINATE_SCALE * img_height)
    }


def badge_origin(box: BoundingBox) -> tuple:
    """
    Top-left corner of the order badge in normalized space.

    The badge sits above the box unless that would leave the canvas, in
    which case it sits inside the top edge.
    """
    top = box.ymin - BADGE_HEIGHT
    return box.xmin, top if top > 0 else box.ymin


def overlay_items(
    regions: Sequence[TextRegion],
    selected_id: Optional[str] = None
) -> List[Dict]:
    """
    Describe what the overlay draws. Inactive regions get no badge.

    Returns:
        One dict per active region with id, order, box, badge and selected flag
    """
    items = []
    for region in regions:
        if not region.is_active:
            continue
        bx, by = badge_origin(region.box)
        items.append({
            'id': region.id,
            'order': region.order,
            'box': region.box.to_dict(),
            'badge': {'x': bx, 'y': by},
            'selected': region.id == selected_id
        })
    return items


def draw_region_overlay(
    image: Image.Image,
    regions: Sequence[TextRegion],
    selected_id: Optional[str] = None
) -> Image.Image:
    """
    Draw active regions with order badges on a copy of the image.

    Args:
        image: PIL Image to draw on
        regions: Current region set
        selected_id: Region to highlight

    Returns:
        Annotated RGB image
    """
    img_draw = image.convert('RGB')
    draw = ImageDraw.Draw(img_draw)
    overlay = Image.new('RGBA', img_draw.size, (0, 0, 0, 0))
    draw2 = ImageDraw.Draw(overlay)
    width, height = img_draw.size

    try:
        font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 16)
    except OSError:
        font = ImageFont.load_default()

    sx = width / COORDINATE_SCALE
    sy = height / COORDINATE_SCALE

    for item in overlay_items(regions, selected_id):
        px = denormalize_box(BoundingBox(**item['box']), width, height)
        color = SELECTED_COLOR if item['selected'] else REGION_COLOR

        draw.rectangle([px['x1'], px['y1'], px['x2'], px['y2']], outline=color, width=3)
        if item['selected']:
            draw2.rectangle([px['x1'], px['y1'], px['x2'], px['y2']], fill=SELECTED_FILL)

        bx = int(item['badge']['x'] * sx)
        by = int(item['badge']['y'] * sy)
        bw = max(int(BADGE_WIDTH * sx), 12)
        bh = max(int(BADGE_HEIGHT * sy), 12)
        draw.rectangle([bx, by, bx + bw, by + bh], fill=color)
        label = str(item['order'])
        text_bbox = draw.textbbox((0, 0), label, font=font)
        tw = text_bbox[2] - text_bbox[0]
        th = text_bbox[3] - text_bbox[1]
        draw.text((bx + (bw - tw) // 2, by + (bh - th) // 2), label,
                  font=font, fill=(255, 255, 255))

    img_draw.paste(overlay, (0, 0), overlay)
    return img_draw
