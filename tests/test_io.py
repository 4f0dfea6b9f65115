import json

import pytest

from skillnetwork.config import SAMPLE_NETWORK_PATH
from skillnetwork.model.graph import GraphModel
from skillnetwork.model.io import (
    AnalysisResponseError,
    FileAnalysisService,
    clean_json,
    load_network_file,
    parse_network_response,
)

PAYLOAD = {
    "nodes": [{"id": "Python", "group": 1, "radius": 8}, {"id": "Git", "group": 3, "radius": 4}],
    "links": [{"source": "Python", "target": "Git", "value": 2}],
}


@pytest.mark.parametrize("text, expected", [
    ('```json\n{"nodes": []}\n```', '{"nodes": []}'),
    ('```\n{"nodes": []}```', '{"nodes": []}'),
    ('  {"nodes": []}  ', '{"nodes": []}'),
    ("", "{}"),
    (None, "{}"),
])
def test_clean_json(text, expected):
    assert clean_json(text) == expected


def test_parse_fenced_response():
    text = "```json\n" + json.dumps(PAYLOAD) + "\n```"
    assert parse_network_response(text) == PAYLOAD


def test_parse_empty_response_is_empty_object():
    assert parse_network_response("") == {}


@pytest.mark.parametrize("text", ["{nodes:", "[1, 2, 3]", '"just text"'])
def test_parse_rejects_bad_responses(text):
    with pytest.raises(AnalysisResponseError):
        parse_network_response(text)


def test_load_network_file(tmp_path):
    path = tmp_path / "network.json"
    path.write_text(json.dumps(PAYLOAD), encoding="utf-8")

    assert load_network_file(str(path)) == PAYLOAD
    assert FileAnalysisService(str(path)).generate_skill_network("resume text") == PAYLOAD


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileAnalysisService(str(tmp_path / "missing.json")).generate_skill_network()


def test_bundled_sample_is_a_clean_graph():
    model = GraphModel.from_response(load_network_file(SAMPLE_NETWORK_PATH))

    assert len(model.nodes) >= 10
    assert model.dropped_links == 0
    assert model.overwritten_nodes == 0
    assert {node.group for node in model.nodes} == {1, 2, 3}
