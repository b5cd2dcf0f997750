import pytest

from devevent.core.errors import ValidationError
from devevent.services.images import LocalImageHost


class TestLocalImageHost:
    def test_upload_returns_public_url(self, tmp_path):
        host = LocalImageHost(tmp_path / "events", "https://cdn.example.com/static/events/")

        url = host.upload(b"image-bytes", "Cover.PNG")

        assert url.startswith("https://cdn.example.com/static/events/")
        assert url.endswith(".png")
        name = url.rsplit("/", 1)[1]
        assert (tmp_path / "events" / name).read_bytes() == b"image-bytes"

    def test_uploads_get_distinct_names(self, tmp_path):
        host = LocalImageHost(tmp_path, "http://testserver/static/events")

        assert host.upload(b"a", "x.jpg") != host.upload(b"b", "x.jpg")

    def test_empty_upload_rejected(self, tmp_path):
        host = LocalImageHost(tmp_path, "http://testserver/static/events")

        with pytest.raises(ValidationError) as exc_info:
            host.upload(b"", "empty.png")
        assert exc_info.value.field == "image"

    def test_remove_deletes_stored_file(self, tmp_path):
        host = LocalImageHost(tmp_path, "http://testserver/static/events")
        url = host.upload(b"data", "x.png")

        host.remove(url)

        assert list(tmp_path.iterdir()) == []

    def test_remove_ignores_foreign_urls(self, tmp_path):
        host = LocalImageHost(tmp_path, "http://testserver/static/events")
        host.upload(b"data", "x.png")

        host.remove("https://elsewhere.example.com/static/events/x.png")

        assert len(list(tmp_path.iterdir())) == 1
