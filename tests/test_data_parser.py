import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import unittest
from datetime import datetime, timezone

from data_parser import (
    format_saved_date,
    normalize_tweet,
    parse_backup_document,
    parse_criteria,
    parse_mirror_document,
    parse_saved_at,
    parse_tag_list,
    validate_updates,
)
from errors import ValidationError
from models import ViewCriteria


class TestNormalizeTweet(unittest.TestCase):
    def test_extracts_fields(self):
        raw = {
            "tweetId": "123",
            "url": "https://x.com/alice/status/123",
            "author": "alice",
            "text": "Hello",
            "savedAt": "2024-01-05T10:00:00.000Z",
            "tags": ["python", "read-later"],
            "note": "good thread",
            "status": "archived",
        }
        tweet = normalize_tweet(raw)
        self.assertEqual(tweet.item_id, "123")
        self.assertEqual(tweet.url, "https://x.com/alice/status/123")
        self.assertEqual(tweet.author, "alice")
        self.assertEqual(tweet.text, "Hello")
        self.assertEqual(tweet.saved_at, "2024-01-05T10:00:00.000Z")
        self.assertEqual(tweet.tags, ["python", "read-later"])
        self.assertEqual(tweet.note, "good thread")
        self.assertEqual(tweet.status, "archived")

    def test_handles_missing_fields(self):
        tweet = normalize_tweet({"tweetId": "456"})
        self.assertEqual(tweet.url, "")
        self.assertEqual(tweet.author, "")
        self.assertEqual(tweet.text, "")
        self.assertEqual(tweet.tags, [])
        self.assertEqual(tweet.note, "")
        self.assertEqual(tweet.status, "unread")
        self.assertIsNotNone(parse_saved_at(tweet.saved_at))
        self.assertTrue(tweet.saved_at.endswith("Z"))

    def test_accepts_plain_id_key(self):
        self.assertEqual(normalize_tweet({"id": "789"}).item_id, "789")

    def test_unknown_status_becomes_unread(self):
        self.assertEqual(normalize_tweet({"tweetId": "1", "status": "starred"}).status, "unread")

    def test_non_list_tags_are_dropped(self):
        self.assertEqual(normalize_tweet({"tweetId": "1", "tags": "python"}).tags, [])

    def test_defaults_fill_gaps(self):
        tweet = normalize_tweet({"tweetId": "1", "text": ""}, {"text": "fallback", "tags": ["x"]})
        self.assertEqual(tweet.text, "fallback")
        self.assertEqual(tweet.tags, ["x"])

    def test_rejects_missing_id(self):
        with self.assertRaises(ValidationError):
            normalize_tweet({"text": "no id"})
        with self.assertRaises(ValidationError):
            normalize_tweet({"tweetId": 42})

    def test_to_dict_uses_extension_keys(self):
        data = normalize_tweet({"tweetId": "1", "savedAt": "2024-01-01T00:00:00Z"}).to_dict()
        self.assertEqual(data["tweetId"], "1")
        self.assertEqual(data["savedAt"], "2024-01-01T00:00:00Z")


class TestTimestamps(unittest.TestCase):
    def test_parses_zulu_and_naive(self):
        expected = datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc)
        self.assertEqual(parse_saved_at("2024-01-05T10:00:00Z"), expected)
        self.assertEqual(parse_saved_at("2024-01-05T10:00:00"), expected)

    def test_invalid_timestamp(self):
        self.assertIsNone(parse_saved_at("not_a_timestamp"))
        self.assertIsNone(parse_saved_at(""))
        self.assertIsNone(parse_saved_at(None))

    def test_format_saved_date(self):
        self.assertEqual(format_saved_date("2024-01-05T10:00:00.000Z"), "Jan 5, 2024")
        self.assertEqual(format_saved_date("garbage"), "Unknown date")


class TestParseCriteria(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(parse_criteria(), ViewCriteria())

    def test_page_style_keys(self):
        criteria = parse_criteria({"searchTerm": "foo", "status": "unread", "tag": "py", "sort": "oldest"})
        self.assertEqual(criteria, ViewCriteria("foo", "unread", "py", "oldest"))

    def test_rejects_unknown_values(self):
        with self.assertRaises(ValidationError):
            parse_criteria({"status": "starred"})
        with self.assertRaises(ValidationError):
            parse_criteria({"sort": "random"})
        with self.assertRaises(ValidationError):
            parse_criteria({"tag": ""})
        with self.assertRaises(ValidationError):
            parse_criteria({"search_term": 5})


class TestValidateUpdates(unittest.TestCase):
    def test_keeps_allowed_fields(self):
        updates = validate_updates({"tags": ["a"], "note": "n", "status": "archived"})
        self.assertEqual(updates, {"tags": ["a"], "note": "n", "status": "archived"})

    def test_skips_none_values(self):
        self.assertEqual(validate_updates({"note": None, "status": "unread"}), {"status": "unread"})

    def test_rejects_fields_outside_updatable_set(self):
        with self.assertRaisesRegex(ValidationError, "author"):
            validate_updates({"author": "mallory"})
        with self.assertRaisesRegex(ValidationError, "text"):
            validate_updates({"note": "n", "text": "x"})

    def test_rejects_bad_shapes(self):
        with self.assertRaises(ValidationError):
            validate_updates({"tags": "a,b"})
        with self.assertRaises(ValidationError):
            validate_updates({"status": "deleted"})
        with self.assertRaises(ValidationError):
            validate_updates({"note": 3})

    def test_parse_tag_list(self):
        self.assertEqual(parse_tag_list(" python, ,read later ,"), ["python", "read later"])


class TestDocuments(unittest.TestCase):
    def test_backup_document(self):
        data = {
            "version": 1,
            "exportedAt": "2024-02-01T00:00:00Z",
            "tweets": [{"tweetId": "1"}, {"text": "no id"}, {"tweetId": 7}, {"tweetId": "2"}],
        }
        tweets = parse_backup_document(data)
        self.assertEqual([t.item_id for t in tweets], ["1", "2"])

    def test_backup_document_rejections(self):
        with self.assertRaisesRegex(ValidationError, "Invalid backup file format"):
            parse_backup_document([{"tweetId": "1"}])
        with self.assertRaisesRegex(ValidationError, "Unsupported backup version"):
            parse_backup_document({"version": 2, "tweets": [{"tweetId": "1"}]})
        with self.assertRaisesRegex(ValidationError, "No valid tweets"):
            parse_backup_document({"version": 1, "tweets": [{"text": "x"}]})

    def test_mirror_document_formats(self):
        bare = parse_mirror_document([{"tweetId": "1"}, None, {"text": "x"}])
        wrapped = parse_mirror_document({"tweets": [{"tweetId": "1"}]})
        self.assertEqual([t.item_id for t in bare], ["1"])
        self.assertEqual([t.item_id for t in wrapped], ["1"])
        with self.assertRaises(ValidationError):
            parse_mirror_document({"items": []})


if __name__ == "__main__":
    unittest.main()
