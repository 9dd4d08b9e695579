import io

import pytest
from PIL import Image

from scraping_viewer.models import AssetResult

BASE_URL = "http://example.com/wallpaper/"


def build_page(links_html: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head><title>Wallpaper</title></head>
  <body>
    <div class="container">
      <div class="row">
        <div id="hl_links">
          <div>{links_html}</div>
        </div>
      </div>
    </div>
  </body>
</html>
"""


def anchor(href: str, css_class: str = "liimagelink", with_img: bool = True) -> str:
    inner = '<img src="thumb.png" alt="thumb">' if with_img else "text"
    return f'<a class="{css_class}" href="{href}">{inner}</a>'


def image_bytes(fmt: str = "PNG", size=(4, 3), color=(255, 0, 0), mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_result(url: str) -> AssetResult:
    return AssetResult(url=url, format="PNG", width=1, height=1, mode="L", pixels=b"\x00")


@pytest.fixture
def scenario_page() -> str:
    return build_page(
        anchor("/a.jpg") + anchor("http://x/b.png") + anchor("bad::uri")
    )
