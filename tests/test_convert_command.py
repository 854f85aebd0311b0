import json
import os
import unittest

import yaml
from click.testing import CliRunner

from flowbridge.cli import flowbridge_cli_group


LEGACY_FLOW = {
    "name": "hello",
    "tasks": [
        {
            "id": "log_1",
            "activity": {
                "ref": "#log",
                "input": {"message": {"value": "hi", "metadata": "S"}},
            },
        }
    ],
    "links": [],
}

EXPECTED_FLOW = {
    "name": "hello",
    "tasks": [
        {
            "id": "log_1",
            "name": "",
            "activity": {
                "ref": "#log",
                "input": {"message": "hi"},
                "schemas": {"input": {"message": {"type": "json", "value": "S"}}},
            },
        }
    ],
    "links": [],
}

CLEAN_ENV = {
    "FLOWBRIDGE_LOG_LEVEL": None,
    "FLOWBRIDGE_OUTPUT_FORMAT": None,
    "FLOWBRIDGE_JSON_INDENT": None,
}


def _write(path, document):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f)


class ConvertCommandTests(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_convert_writes_json_to_stdout(self):
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(flowbridge_cli_group, ["convert", "flow.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.stdout), EXPECTED_FLOW)

    def test_convert_writes_output_file(self):
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(
                flowbridge_cli_group,
                ["convert", "flow.json", "-o", "converted.json", "--indent", "4"],
                env=CLEAN_ENV,
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(os.path.exists("converted.json"))
            with open("converted.json", encoding="utf-8") as f:
                content = f.read()

        self.assertEqual(json.loads(content), EXPECTED_FLOW)
        self.assertIn('\n    "name"', content)
        self.assertIn("Converted flow.json -> converted.json", result.output)

    def test_convert_yaml_output_from_environment(self):
        env = dict(CLEAN_ENV, FLOWBRIDGE_OUTPUT_FORMAT="yaml")
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(flowbridge_cli_group, ["convert", "flow.json"], env=env)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(yaml.safe_load(result.stdout), EXPECTED_FLOW)

    def test_convert_format_option_overrides_environment(self):
        env = dict(CLEAN_ENV, FLOWBRIDGE_OUTPUT_FORMAT="yaml")
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(flowbridge_cli_group, ["convert", "flow.json", "--format", "json"], env=env)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.stdout), EXPECTED_FLOW)

    def test_convert_reports_unsupported_document(self):
        with self.runner.isolated_filesystem():
            _write("old.json", {"name": "old", "rootTask": {"id": 1}})
            result = self.runner.invoke(flowbridge_cli_group, ["convert", "old.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR: definition too old", result.output)

    def test_convert_reports_invalid_setting(self):
        env = dict(CLEAN_ENV, FLOWBRIDGE_OUTPUT_FORMAT="xml")
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(flowbridge_cli_group, ["convert", "flow.json"], env=env)

        self.assertEqual(result.exit_code, 1)
        self.assertIn("FLOWBRIDGE_OUTPUT_FORMAT", result.output)

    def test_convert_verbose_succeeds(self):
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(flowbridge_cli_group, ["convert", "flow.json", "-v"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 0, result.output)

    def test_check_summarizes_tasks(self):
        with self.runner.isolated_filesystem():
            _write("flow.json", LEGACY_FLOW)
            result = self.runner.invoke(flowbridge_cli_group, ["check", "flow.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("log_1", result.output)
        self.assertIn("OK: 1 flow(s), 1 task(s), 0 link(s) convertible", result.output)

    def test_check_converts_each_flow_resource(self):
        app = {
            "name": "app",
            "resources": [
                {"id": "flow:main", "data": LEGACY_FLOW},
                {"id": "schema:order", "data": {"keep": "me"}},
                {"id": "flow:second", "data": dict(LEGACY_FLOW, links=[{"from": "log_1", "to": "log_1"}])},
            ],
        }
        with self.runner.isolated_filesystem():
            _write("app.json", app)
            result = self.runner.invoke(flowbridge_cli_group, ["check", "app.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("flow:main", result.output)
        self.assertIn("flow:second", result.output)
        self.assertIn("OK: 2 flow(s), 2 task(s), 1 link(s) convertible", result.output)

    def test_check_rejects_application_without_flows(self):
        app = {"name": "app", "resources": [{"id": "schema:order", "data": {}}]}
        with self.runner.isolated_filesystem():
            _write("app.json", app)
            result = self.runner.invoke(flowbridge_cli_group, ["check", "app.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR: No flow resources found in app.json", result.output)

    def test_check_names_failing_flow_resource(self):
        app = {"resources": [{"id": "flow:old", "data": {"rootTask": {"id": 1}}}]}
        with self.runner.isolated_filesystem():
            _write("app.json", app)
            result = self.runner.invoke(flowbridge_cli_group, ["check", "app.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR: Resource 'flow:old'", result.output)

    def test_check_reports_conversion_error(self):
        legacy = {
            "tasks": [
                {
                    "id": "bad",
                    "activity": {
                        "ref": "#log",
                        "mappings": {"input": [{"type": 7, "value": "x", "mapTo": "message"}]},
                    },
                }
            ]
        }
        with self.runner.isolated_filesystem():
            _write("flow.json", legacy)
            result = self.runner.invoke(flowbridge_cli_group, ["check", "flow.json"], env=CLEAN_ENV)

        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR: Task 'bad'", result.output)


if __name__ == "__main__":
    unittest.main()
