"""Image converters turn a document image into the attributes of an ``img`` element."""
from __future__ import annotations

import base64
from typing import Callable, Dict

from docx_html.model.elements import Image

ImageConverter = Callable[[Image], Dict[str, str]]


def data_uri(image: Image) -> Dict[str, str]:
    """Inline the image bytes as a base64 data URI."""
    with image.open() as image_bytes:
        encoded_src = base64.b64encode(image_bytes.read()).decode("ascii")
    return {"src": f"data:{image.content_type};base64,{encoded_src}"}
