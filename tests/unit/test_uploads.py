"""Unit tests for review image ingestion."""
import io
import re
from types import SimpleNamespace

from reviewhub.uploads import ImageStorage, generate_filename

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def upload(data=PNG_BYTES, filename="logo.PNG", content_type="image/png"):
    return SimpleNamespace(filename=filename, content_type=content_type, file=io.BytesIO(data))


class TestGenerateFilename:
    def test_keeps_extension(self):
        assert re.fullmatch(r"\d{13}-[0-9a-f]{8}\.jpg", generate_filename("photo.jpg"))

    def test_keeps_extension_case(self):
        assert generate_filename("photo.JPG").endswith(".JPG")

    def test_without_extension(self):
        assert re.fullmatch(r"\d{13}-[0-9a-f]{8}", generate_filename("photo"))
        assert re.fullmatch(r"\d{13}-[0-9a-f]{8}", generate_filename(None))

    def test_names_do_not_collide(self):
        names = {generate_filename("a.png") for _ in range(200)}
        assert len(names) == 200


class TestImageStorage:
    def test_accepts_image(self, tmp_path):
        storage = ImageStorage(tmp_path, max_bytes=1024)

        data, errors = storage.check(upload())

        assert errors == []
        assert data == PNG_BYTES

    def test_rejects_non_image_type(self, tmp_path):
        storage = ImageStorage(tmp_path, max_bytes=1024)

        _, errors = storage.check(upload(filename="notes.txt", content_type="text/plain"))

        assert [error.field for error in errors] == ["image"]

    def test_rejects_oversized_file(self, tmp_path):
        storage = ImageStorage(tmp_path, max_bytes=16)

        _, errors = storage.check(upload())

        assert len(errors) == 1
        assert "MB" in errors[0].reason

    def test_reports_both_problems(self, tmp_path):
        storage = ImageStorage(tmp_path, max_bytes=16)

        _, errors = storage.check(upload(content_type="application/pdf"))

        assert len(errors) == 2

    def test_exact_limit_is_accepted(self, tmp_path):
        storage = ImageStorage(tmp_path, max_bytes=len(PNG_BYTES))

        _, errors = storage.check(upload())

        assert errors == []

    def test_save_and_discard(self, tmp_path):
        storage = ImageStorage(tmp_path / "uploads", max_bytes=1024)

        url = storage.save(PNG_BYTES, "logo.png")
        name = url.rsplit("/", 1)[1]

        assert url.startswith("/uploads/")
        assert (tmp_path / "uploads" / name).read_bytes() == PNG_BYTES

        storage.discard(url)
        assert not (tmp_path / "uploads" / name).exists()

    def test_discard_ignores_foreign_urls(self, tmp_path):
        storage = ImageStorage(tmp_path, max_bytes=1024)
        outside = tmp_path.parent / "keep.txt"
        outside.write_text("keep")

        storage.discard("https://cdn.example.com/keep.txt")
        storage.discard("/uploads/missing.png")

        assert outside.exists()
