import inspect

from scraping_viewer.content import extract_links, iter_image_hrefs
from scraping_viewer.markup import parse_document

from .conftest import BASE_URL, anchor, build_page


def test_extract_links_resolves_and_drops_bad_hrefs(scenario_page):
    links = list(extract_links(parse_document(scenario_page), BASE_URL))
    assert [link.url for link in links] == ["http://example.com/a.jpg", "http://x/b.png"]
    assert [link.href for link in links] == ["/a.jpg", "http://x/b.png"]


def test_extract_links_carries_the_originating_anchor(scenario_page):
    links = list(extract_links(parse_document(scenario_page), BASE_URL))
    tags = [link.anchor for link in links]
    assert [tag.name for tag in tags] == ["a", "a"]
    assert [tag["href"] for tag in tags] == ["/a.jpg", "http://x/b.png"]
    assert all(tag.find("img", recursive=False) is not None for tag in tags)
    assert "anchor" not in repr(links[0])


def test_iter_image_hrefs_is_lazy_and_idempotent(scenario_page):
    document = parse_document(scenario_page)
    hrefs = iter_image_hrefs(document)
    assert inspect.isgenerator(hrefs)
    first = list(hrefs)
    assert first == ["/a.jpg", "http://x/b.png", "bad::uri"]
    assert list(iter_image_hrefs(document)) == first


def test_iter_image_hrefs_filters_anchors():
    page = build_page(
        anchor("/keep.jpg")
        + anchor("/wrong-class.jpg", css_class="other")
        + anchor("/no-image.jpg", with_img=False)
        + '<a class="liimagelink"><img src="x.png"></a>'
    )
    assert list(iter_image_hrefs(parse_document(page))) == ["/keep.jpg"]


def test_iter_image_hrefs_empty_region():
    page = """<html><body><div class="container"><div class="row">
    <div id="hl_links"></div></div></div></body></html>"""
    assert list(iter_image_hrefs(parse_document(page))) == []


def test_iter_image_hrefs_requires_exact_structure():
    nested_too_deep = """<html><body><div class="container"><div class="row">
    <div id="hl_links"><div><span>%s</span></div></div></div></div></body></html>""" % anchor("/deep.jpg")
    wrong_container = build_page(anchor("/a.jpg")).replace('class="container"', 'class="container fluid"')
    no_html = '<body><div class="container"><div class="row"><div id="hl_links"><div>%s</div></div></div></div></body>' % anchor("/a.jpg")
    for page in (nested_too_deep, wrong_container, no_html):
        assert list(iter_image_hrefs(parse_document(page))) == []


def test_iter_image_hrefs_follows_repeated_levels_in_document_order():
    region = '<div class="row"><div id="hl_links"><div>%s</div><div>%s</div></div></div>'
    page = (
        "<html><body>"
        '<div class="container">' + region % (anchor("/1.jpg"), anchor("/2.png")) + "</div>"
        '<div class="sidebar">' + region % (anchor("/skip.jpg"), "") + "</div>"
        '<div class="container">' + region % (anchor("/3.jpg"), "") + "</div>"
        "</body></html>"
    )
    assert list(iter_image_hrefs(parse_document(page))) == ["/1.jpg", "/2.png", "/3.jpg"]


def test_iter_image_hrefs_tolerates_unclosed_markup():
    page = (
        '<html><body><div class="container"><div class="row"><div id="hl_links"><div>'
        '<a class="liimagelink" href="/open.jpg"><img src="t.png"></a>'
        "<p>unclosed paragraph"
    )
    assert list(iter_image_hrefs(parse_document(page))) == ["/open.jpg"]
