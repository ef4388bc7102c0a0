"""
Tests for the bpmn-json command line tool.

Tests:
- to-json and to-domain write their documents with a conversion summary
- --strict aborts with exit status 1
- Unreadable input and invalid process graphs exit with status 1
- stencils and info listings
- A graph passed through to-json and then to-domain
"""

import json

import pytest
from click.testing import CliRunner

from bpmn_json_converter.models import dump_model
from bpmn_json_converter.tools.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def graph_file(tmp_path, simple_model):
    path = tmp_path / "order-process.json"
    path.write_text(json.dumps(dump_model(simple_model)), encoding="utf-8")
    return path


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def create_document(*shapes):
    return {
        "resourceId": "canvas",
        "stencil": {"id": "BPMNDiagram"},
        "properties": {"process_id": "orderProcess"},
        "childShapes": list(shapes),
    }


def create_node(resource_id, stencil_id):
    return {
        "resourceId": resource_id,
        "stencil": {"id": stencil_id},
        "properties": {},
        "bounds": {"lowerRight": {"x": 300, "y": 175}, "upperLeft": {"x": 200, "y": 95}},
        "childShapes": [],
        "outgoing": [],
    }


class TestToJson:
    """to-json command"""

    def test_writes_editor_document(self, runner, graph_file, tmp_path):
        output = tmp_path / "order-process.editor.json"

        result = runner.invoke(cli, ["to-json", str(graph_file), "-o", str(output)])

        assert result.exit_code == 0
        document = json.loads(output.read_text(encoding="utf-8"))
        assert document["stencil"] == {"id": "BPMNDiagram"}
        assert [shape["resourceId"] for shape in document["childShapes"]] == [
            "start",
            "review",
            "end",
            "flow1",
            "flow2",
        ]
        assert "--- Conversion Summary ---" in result.output
        assert "5 converted, 0 skipped" in result.output

    def test_invalid_process_graph(self, runner, tmp_path, simple_model):
        data = dump_model(simple_model)
        data["processes"][0]["flow_elements"][0]["element_type"] = "QuantumTask"
        path = write_json(tmp_path / "broken.json", data)

        result = runner.invoke(cli, ["to-json", path])

        assert result.exit_code == 1
        assert "Error: invalid process graph" in result.output

    def test_unreadable_json(self, runner, tmp_path):
        path = tmp_path / "garbage.json"
        path.write_text("{not json", encoding="utf-8")

        result = runner.invoke(cli, ["to-json", str(path)])

        assert result.exit_code == 1
        assert f"Error reading {path}" in result.output


class TestToDomain:
    """to-domain command"""

    def test_writes_process_graph(self, runner, tmp_path):
        document = create_document(create_node("review", "UserTask"))
        path = write_json(tmp_path / "order.editor.json", document)
        output = tmp_path / "order.json"

        result = runner.invoke(cli, ["to-domain", path, "-o", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        process = data["processes"][0]
        assert process["id"] == "orderProcess"
        assert [element["id"] for element in process["flow_elements"]] == ["review"]
        assert process["flow_elements"][0]["element_type"] == "UserTask"

    def test_recovery_reports_dropped_elements(self, runner, tmp_path):
        document = create_document(create_node("review", "UserTask"), create_node("widget", "FancyWidget"))
        path = write_json(tmp_path / "order.editor.json", document)
        output = tmp_path / "order.json"

        result = runner.invoke(cli, ["to-domain", path, "-o", str(output)])

        assert result.exit_code == 0
        assert "1 converted, 1 skipped" in result.output
        assert "error [widget]" in result.output

    def test_strict_aborts(self, runner, tmp_path):
        document = create_document(create_node("review", "UserTask"), create_node("widget", "FancyWidget"))
        path = write_json(tmp_path / "order.editor.json", document)
        output = tmp_path / "order.json"

        result = runner.invoke(cli, ["--strict", "to-domain", path, "-o", str(output)])

        assert result.exit_code == 1
        assert "Error: conversion failed" in result.output
        assert "FancyWidget" in result.output
        assert not output.exists()


class TestListings:
    """stencils and info commands"""

    def test_stencils_text(self, runner):
        result = runner.invoke(cli, ["--quiet", "stencils"])

        assert result.exit_code == 0
        assert "UserTask" in result.output
        assert "SequenceFlow" in result.output

    def test_stencils_json(self, runner):
        result = runner.invoke(cli, ["--quiet", "stencils", "--format", "json"])

        assert result.exit_code == 0
        rows = {row["stencil"]: row for row in json.loads(result.stdout)}
        assert rows["UserTask"]["types"] == ["UserTask"]
        assert rows["SequenceFlow"]["converter"] == "SequenceFlowConverter"

    def test_info(self, runner, monkeypatch):
        monkeypatch.delenv("BPMN_JSON_ERROR_HANDLING", raising=False)

        result = runner.invoke(cli, ["--quiet", "--strict", "info"])

        assert result.exit_code == 0
        info = json.loads(result.stdout)
        assert info["version"] == "0.1.0"
        assert info["stencil_count"] > 30
        assert info["config"]["error_handling"] == "strict"
        assert info["config"]["min_canvas_width"] == 1485


class TestRoundTrip:
    """to-json output fed back through to-domain"""

    def test_graph_survives_both_commands(self, runner, graph_file, tmp_path, simple_model):
        document_file = tmp_path / "order-process.editor.json"
        graph_out = tmp_path / "order-process.out.json"

        to_json_result = runner.invoke(cli, ["to-json", str(graph_file), "-o", str(document_file)])
        to_domain_result = runner.invoke(cli, ["to-domain", str(document_file), "-o", str(graph_out)])

        assert to_json_result.exit_code == 0, to_json_result.output
        assert to_domain_result.exit_code == 0, to_domain_result.output
        data = json.loads(graph_out.read_text(encoding="utf-8"))
        assert data["target_namespace"] == simple_model.target_namespace
        assert [element["id"] for element in data["processes"][0]["flow_elements"]] == [
            "start",
            "review",
            "end",
            "flow1",
            "flow2",
        ]
