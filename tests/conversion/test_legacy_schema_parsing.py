import json
import unittest

from flowbridge.schema import (
    DocumentSyntaxError,
    LegacyAttribute,
    LegacySchemaError,
    decode_value,
    parse_document_text,
    parse_legacy_definition,
)


class LegacySchemaParsingTests(unittest.TestCase):
    def test_parse_full_definition(self):
        legacy = parse_legacy_definition(
            {
                "name": "orders",
                "model": "simple",
                "explicitReply": True,
                "metadata": {
                    "input": [{"name": "orderId", "type": "string"}],
                    "output": {"total": {"type": "double", "value": 0}},
                },
                "tasks": [
                    {
                        "id": 2,
                        "name": "Fetch",
                        "type": "iterator",
                        "settings": {"iterate": 3},
                        "activity": {
                            "ref": "#rest",
                            "settings": {"uri": "http://x"},
                            "input": {"method": "GET"},
                            "output": {"data": None},
                            "mappings": {
                                "input": [{"type": 1, "value": "$flow.orderId", "mapTo": "pathParams"}],
                            },
                        },
                    }
                ],
                "links": [{"from": 1, "to": 2, "type": 0, "name": "l1"}],
                "errorHandler": {"tasks": [{"id": "log"}]},
            }
        )
        self.assertEqual(legacy.name, "orders")
        self.assertEqual(legacy.model_id, "simple")
        self.assertTrue(legacy.explicit_reply)
        self.assertEqual(legacy.metadata.input["orderId"], LegacyAttribute(name="orderId", type="string"))
        self.assertEqual(legacy.metadata.output["total"].value, 0)

        task = legacy.tasks[0]
        self.assertEqual(task.id, "2")
        self.assertEqual(task.settings, {"iterate": 3})
        self.assertEqual(task.activity.ref, "#rest")
        self.assertEqual(task.activity.input_attrs, {"method": "GET"})
        self.assertEqual(task.activity.output_attrs, {"data": None})
        self.assertEqual(task.activity.mappings.input[0].map_to, "pathParams")
        self.assertEqual(task.activity.mappings.output, ())

        self.assertEqual(legacy.links[0].from_id, "1")
        self.assertEqual(legacy.links[0].type, 0)
        self.assertEqual(legacy.error_handler.tasks[0].id, "log")
        self.assertEqual(legacy.error_handler.links, ())
        self.assertIsNone(legacy.root_task)

    def test_root_task_is_kept_for_converter(self):
        legacy = parse_legacy_definition({"rootTask": {"id": 1, "tasks": []}})
        self.assertEqual(legacy.root_task, {"id": 1, "tasks": []})

    def test_parse_does_not_mutate_input(self):
        raw = {"tasks": [{"id": "a", "activity": {"ref": "#x", "input": {"v": [1]}}}]}
        legacy = parse_legacy_definition(raw)
        legacy.tasks[0].activity.input_attrs["v"].append(2)
        self.assertEqual(raw["tasks"][0]["activity"]["input"]["v"], [1])

    def test_structural_errors_are_reported(self):
        cases = (
            [],
            {"tasks": {}},
            {"tasks": [{"name": "no id"}]},
            {"tasks": [{"id": ""}]},
            {"tasks": [{"id": "a", "activity": {"ref": "#x", "settings": []}}]},
            {"links": [{"from": "a"}]},
            {"explicitReply": "yes"},
            {"metadata": {"input": "bad"}},
            {"metadata": {"input": [{"name": "x"}]}},
            {"tasks": [{"id": "a", "activity": {"mappings": {"input": [{"mapTo": 1}]}}}]},
        )
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(LegacySchemaError):
                    parse_legacy_definition(raw)

    def test_decode_value_rejects_values_outside_closed_set(self):
        with self.assertRaises(LegacySchemaError) as ctx:
            decode_value({"a": [1, {2, 3}]})
        self.assertIn("$.a[1]", str(ctx.exception))

        with self.assertRaises(LegacySchemaError):
            decode_value({1: "x"})

    def test_decode_value_turns_tuples_into_lists(self):
        self.assertEqual(decode_value({"a": (1, 2)}), {"a": [1, 2]})

    def test_parse_document_text_accepts_json_and_yaml(self):
        self.assertEqual(parse_document_text('{"name": "f", "tasks": []}'), {"name": "f", "tasks": []})
        self.assertEqual(parse_document_text("name: f\ntasks: []\n"), {"name": "f", "tasks": []})
        self.assertEqual(parse_document_text(""), {})

    def test_parse_document_text_accepts_tab_indented_json(self):
        text = json.dumps({"name": "f", "tasks": [{"id": "a"}]}, indent="\t")
        self.assertIn("\t", text)
        self.assertEqual(parse_document_text(text), {"name": "f", "tasks": [{"id": "a"}]})

    def test_parse_document_text_keeps_unquoted_dates_as_text(self):
        data = parse_document_text("name: f\nsettings:\n  start: 2024-01-01\n  at: 2024-01-01 10:30:00\n")
        self.assertEqual(data["settings"], {"start": "2024-01-01", "at": "2024-01-01 10:30:00"})

        definition = parse_legacy_definition(
            parse_document_text("tasks:\n  - id: a\n    settings:\n      start: 2024-01-01\n")
        )
        self.assertEqual(definition.tasks[0].settings, {"start": "2024-01-01"})

    def test_parse_document_text_rejects_invalid_text(self):
        with self.assertRaises(DocumentSyntaxError):
            parse_document_text('{"name": ')
        with self.assertRaises(LegacySchemaError):
            parse_document_text("- item")


if __name__ == "__main__":
    unittest.main()
