import unittest

from drivehelper.models import FileResource, Permission, QuotaInfo
from drivehelper.util.mime import FOLDER_MIME


class TestFileResource(unittest.TestCase):
    def test_from_api_blob_file(self) -> None:
        data = {
            "id": "F1",
            "name": "notes.txt",
            "mimeType": "text/plain",
            "description": "d",
            "parents": ["P1", "P2"],
            "size": "123",
        }
        res = FileResource.from_api(data)
        self.assertEqual(res.file_id, "F1")
        self.assertEqual(res.title, "notes.txt")
        self.assertEqual(res.description, "d")
        self.assertEqual(res.parents, frozenset({"P1", "P2"}))
        self.assertEqual(res.size, 123)
        self.assertEqual(
            res.download_url,
            "https://www.googleapis.com/drive/v3/files/F1?alt=media",
        )
        self.assertFalse(res.is_folder)

    def test_from_api_folder_has_no_download_url(self) -> None:
        res = FileResource.from_api({"id": "D1", "name": "dir", "mimeType": FOLDER_MIME})
        self.assertTrue(res.is_folder)
        self.assertIsNone(res.download_url)
        self.assertIsNone(res.size)
        self.assertEqual(res.parents, frozenset())

    def test_from_api_google_doc_has_no_download_url(self) -> None:
        res = FileResource.from_api(
            {"id": "G1", "name": "doc", "mimeType": "application/vnd.google-apps.document"}
        )
        self.assertIsNone(res.download_url)

    def test_from_api_requires_id(self) -> None:
        with self.assertRaises(ValueError):
            FileResource.from_api({"name": "x"})

    def test_is_immutable(self) -> None:
        res = FileResource(file_id="F1", title="t", mime_type="text/plain")
        with self.assertRaises(AttributeError):
            res.title = "other"  # type: ignore[misc]


class TestPermission(unittest.TestCase):
    def test_to_body_user(self) -> None:
        p = Permission(value="a@example.com", type="user", role="writer")
        self.assertEqual(
            p.to_body(),
            {"type": "user", "role": "writer", "emailAddress": "a@example.com"},
        )

    def test_to_body_domain(self) -> None:
        p = Permission(value="example.com", type="domain", role="reader")
        self.assertEqual(
            p.to_body(),
            {"type": "domain", "role": "reader", "domain": "example.com"},
        )

    def test_to_body_anyone_ignores_value(self) -> None:
        p = Permission(value="", type="anyone", role="reader")
        self.assertEqual(p.to_body(), {"type": "anyone", "role": "reader"})


class TestQuotaInfo(unittest.TestCase):
    def test_free(self) -> None:
        q = QuotaInfo(total=100, used=40)
        self.assertEqual(q.free, 60)
        self.assertFalse(q.unlimited)

    def test_unlimited(self) -> None:
        q = QuotaInfo(total=None, used=40)
        self.assertIsNone(q.free)
        self.assertTrue(q.unlimited)


if __name__ == "__main__":
    unittest.main()
