import unittest

from drivehelper.util.mime import FOLDER_MIME
from drivehelper.util.query import build_title_query, escape_query_value


class TestUtilQuery(unittest.TestCase):
    def test_escape_quotes_and_backslashes(self) -> None:
        self.assertEqual(escape_query_value("plain"), "plain")
        self.assertEqual(escape_query_value("Bob's"), "Bob\\'s")
        self.assertEqual(escape_query_value("a\\b"), "a\\\\b")

    def test_build_title_query(self) -> None:
        self.assertEqual(
            build_title_query("MyApp"),
            "name = 'MyApp' and trashed = false",
        )

    def test_build_title_query_folders_only(self) -> None:
        q = build_title_query("it's", folders_only=True)
        self.assertEqual(
            q,
            f"name = 'it\\'s' and mimeType = '{FOLDER_MIME}' and trashed = false",
        )


if __name__ == "__main__":
    unittest.main()
