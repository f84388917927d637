from newsdesk.media import is_image_url


def test_image_extensions_detected():
    assert is_image_url("https://example.com/pic.PNG")
    assert is_image_url("https://example.com/a/b/pic.jpeg?width=300#top")
    assert is_image_url("/pictrs/image/abc.webp")


def test_non_images_rejected():
    assert not is_image_url(None)
    assert not is_image_url("")
    assert not is_image_url("https://example.com/article")
    assert not is_image_url("https://example.com/png")
    assert not is_image_url("javascript:alert('x.png')")
