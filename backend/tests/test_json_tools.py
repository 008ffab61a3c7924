"""Tests for plantsafe.services.ai.common.json_tools.extract_json_object."""

import unittest

from plantsafe.services.ai.common.json_tools import extract_json_object

REPORT_KEYS = ("plantName", "isDangerous", "dangerLevel")


class JsonToolsTests(unittest.TestCase):
    def test_valid_json_object(self):
        result = extract_json_object('{"plantName": "Ivy", "isDangerous": true}')
        self.assertIsInstance(result, dict)
        self.assertEqual(result["plantName"], "Ivy")

    def test_valid_json_with_prefix_and_suffix(self):
        result = extract_json_object('Here is the result: {"plantName": "Ivy"} Hope this helps!')
        self.assertEqual(result, {"plantName": "Ivy"})

    def test_markdown_code_fence(self):
        text = 'Result:\n```json\n{\n  "plantName": "Foxglove",\n  "isDangerous": true\n}\n```'
        result = extract_json_object(text)
        self.assertEqual(result["plantName"], "Foxglove")
        self.assertTrue(result["isDangerous"])

    def test_empty_string_returns_none(self):
        self.assertIsNone(extract_json_object(""))
        self.assertIsNone(extract_json_object("   "))
        self.assertIsNone(extract_json_object(None))

    def test_no_json_returns_none(self):
        self.assertIsNone(extract_json_object("This is plain text with no JSON"))

    def test_top_level_array_is_not_an_object(self):
        self.assertIsNone(extract_json_object("[1, 2, 3]"))

    def test_nested_braces(self):
        result = extract_json_object('prefix {"a": {"b": {"c": 1}}} suffix')
        self.assertEqual(result["a"]["b"]["c"], 1)

    def test_braces_inside_string_values(self):
        text = 'ok {"plantName": "Odd {name} here", "uses": "}}}"} done'
        result = extract_json_object(text)
        self.assertEqual(result["plantName"], "Odd {name} here")
        self.assertEqual(result["uses"], "}}}")

    def test_json_with_escaped_quotes(self):
        result = extract_json_object('{"msg": "He said \\"hello\\" {not a brace}"}')
        self.assertIn("hello", result["msg"])

    def test_invalid_json_returns_none(self):
        self.assertIsNone(extract_json_object("{invalid json}"))

    def test_prose_braces_before_real_object_are_skipped(self):
        text = 'Note {this is not json} and then {"plantName": "Nettle"}'
        self.assertEqual(extract_json_object(text), {"plantName": "Nettle"})

    def test_first_of_multiple_objects_wins(self):
        text = '{"plantName": "First"} and also {"plantName": "Second"}'
        self.assertEqual(extract_json_object(text)["plantName"], "First")

    def test_truncated_object_returns_none(self):
        text = 'Sure! {"plantName": "Rosa", "toxicParts": ["thorns"'
        self.assertIsNone(extract_json_object(text))

    def test_truncated_prefix_then_complete_object(self):
        text = 'Draft: { oops\nFinal: {"plantName": "Rosa"}'
        self.assertEqual(extract_json_object(text, required_keys=REPORT_KEYS), {"plantName": "Rosa"})

    def test_required_keys_skip_unrelated_objects(self):
        text = 'Metadata {"model": "x", "version": 2} report {"plantName": "Yew", "isDangerous": true}'
        result = extract_json_object(text, required_keys=REPORT_KEYS)
        self.assertEqual(result["plantName"], "Yew")

    def test_required_keys_reject_nested_fragment_of_truncated_report(self):
        text = '{"plantName": "Yew", "extra": {"note": 1}'
        self.assertIsNone(extract_json_object(text, required_keys=REPORT_KEYS))

    def test_required_keys_with_no_match_returns_none(self):
        self.assertIsNone(extract_json_object('{"foo": 1}', required_keys=REPORT_KEYS))

    def test_deeply_nested_arrays_return_none(self):
        text = '{"plantName": "x", "uses": ' + "[" * 3000 + "]" * 3000 + "}"
        self.assertIsNone(extract_json_object(text, required_keys=REPORT_KEYS))

    def test_deeply_nested_object_skipped_for_later_report(self):
        deep = '{"a": ' + "[" * 3000 + "]" * 3000 + "}"
        text = f'{deep} then {{"plantName": "Yew"}}'
        self.assertEqual(extract_json_object(text, required_keys=REPORT_KEYS), {"plantName": "Yew"})


if __name__ == "__main__":
    unittest.main()
