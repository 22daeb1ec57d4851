"""Tests for biograph.analyze and biograph.visualize."""

import pytest


class TestAnalyzePublication:
    def test_returns_parsed_analysis(self, bone_publication, mock_openai_client):
        from biograph.analyze import analyze_publication

        result = analyze_publication(bone_publication, mock_openai_client)

        assert result["error"] is False
        assert result["summary"] == "Studies bone loss in microgravity."
        assert result["keyFindings"] == ["Reduced osteoblast activity"]
        assert result["visualDiagram"]["title"] == "Bone Loss Process"

    def test_request_shape(self, bone_publication, mock_openai_client):
        from biograph.analyze import analyze_publication

        analyze_publication(bone_publication, mock_openai_client, model="test-model")

        kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert bone_publication.title in kwargs["messages"][1]["content"]

    def test_api_failure_falls_back(self, bone_publication, mock_openai_client):
        from biograph.analyze import analyze_publication

        mock_openai_client.chat.completions.create.side_effect = RuntimeError("no key")
        result = analyze_publication(bone_publication, mock_openai_client)

        assert result["error"] is True
        assert result["message"] == "no key"
        assert result["entities"]
        assert result["visualDiagram"]["type"] == "flowchart"

    def test_invalid_json_falls_back(self, bone_publication, mock_openai_client):
        from biograph.analyze import analyze_publication

        response = mock_openai_client.chat.completions.create.return_value
        response.choices[0].message.content = "not json"
        assert analyze_publication(bone_publication, mock_openai_client)["error"] is True

    def test_non_object_json_falls_back(self, bone_publication, mock_openai_client):
        from biograph.analyze import analyze_publication

        response = mock_openai_client.chat.completions.create.return_value
        response.choices[0].message.content = "[1, 2]"
        assert analyze_publication(bone_publication, mock_openai_client)["error"] is True


class TestEntitiesAndDiagrams:
    def test_extract_entities(self):
        from biograph.analyze import extract_entities

        entities = extract_entities("Bone Density in Microgravity")
        assert entities == [
            {"term": "microgravity", "type": "Environmental Condition"},
            {"term": "bone", "type": "Biological System"},
        ]

    def test_extract_entities_none(self):
        from biograph.analyze import extract_entities

        assert extract_entities("Sleep in orbit") == []

    @pytest.mark.parametrize("title,expected", [
        ("Bone loss in flight", "Bone Loss Process"),
        ("Radiation and DNA", "Radiation Damage Process"),
        ("Sleep in orbit", "Research Process"),
    ])
    def test_diagram_for(self, title, expected):
        from biograph.analyze import diagram_for

        diagram = diagram_for(title)
        assert diagram["type"] == "flowchart"
        assert diagram["title"] == expected
        for source, target in diagram["connections"]:
            assert source in diagram["nodes"]
            assert target in diagram["nodes"]

    def test_diagram_is_a_copy(self):
        from biograph.analyze import diagram_for
        from biograph.config import DEFAULT_DIAGRAM

        diagram_for("Sleep")["nodes"].append("Extra")
        assert "Extra" not in DEFAULT_DIAGRAM["nodes"]


class TestGenerateHtml:
    def test_renders_nodes_and_links(self, sample_corpus):
        from biograph.interaction import Explorer
        from biograph.visualize import generate_html

        explorer = Explorer(sample_corpus)
        explorer.focus(sample_corpus[0], animate=False)
        frame = explorer.frame()

        html, n_nodes, n_links = generate_html(frame, title="Bone <Density>")
        assert n_nodes == len(frame["nodes"])
        assert n_links == len(frame["links"])
        assert "Bone &lt;Density&gt;" in html
        assert html.count("<circle") == n_nodes
        assert html.count("<line") == n_links

    def test_placeholder(self, sample_corpus):
        from biograph.interaction import PLACEHOLDER_MESSAGE, Explorer
        from biograph.visualize import generate_html

        html, n_nodes, n_links = generate_html(Explorer(sample_corpus).frame())
        assert PLACEHOLDER_MESSAGE in html
        assert (n_nodes, n_links) == (0, 0)
