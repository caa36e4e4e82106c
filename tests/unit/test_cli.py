"""Unit tests for the command-line interface."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from debaterag import __version__
from debaterag.cli import app
from debaterag.errors import StoreError
from debaterag.nodes.loader import NO_HISTORY_MESSAGE

runner = CliRunner()


@pytest.mark.unit
class TestAskCommand:
    def test_prints_answer(self, pipeline_deps):
        with patch("debaterag.retrieval.resources.get_pipeline_dependencies", return_value=pipeline_deps):
            result = runner.invoke(app, ["ask", "What did I say about nuclear?", "-c", "u1"])

        assert result.exit_code == 0
        assert "You argued that nuclear power is clean." in result.output

    def test_no_history(self, pipeline_deps):
        with patch("debaterag.retrieval.resources.get_pipeline_dependencies", return_value=pipeline_deps):
            result = runner.invoke(app, ["ask", "Anything?", "--client-id", "nobody"])

        assert result.exit_code == 0
        assert NO_HISTORY_MESSAGE in " ".join(result.output.split())

    def test_blank_question_exits_non_zero(self, pipeline_deps):
        with patch("debaterag.retrieval.resources.get_pipeline_dependencies", return_value=pipeline_deps):
            result = runner.invoke(app, ["ask", "   "])

        assert result.exit_code == 1
        assert "Question is required." in result.output

    def test_failed_stage_exits_non_zero(self, pipeline_deps):
        pipeline_deps.store = MagicMock()
        pipeline_deps.store.find.side_effect = StoreError("database is locked")

        with patch("debaterag.retrieval.resources.get_pipeline_dependencies", return_value=pipeline_deps):
            result = runner.invoke(app, ["ask", "q"])

        assert result.exit_code == 1
        assert "loading" in result.output

    def test_save_index(self, pipeline_deps, tmp_index_dir):
        target = tmp_index_dir / "question"

        with patch("debaterag.retrieval.resources.get_pipeline_dependencies", return_value=pipeline_deps):
            result = runner.invoke(app, ["ask", "nuclear", "--save-index", str(target)])

        assert result.exit_code == 0
        assert target.with_suffix(".index").exists()
        assert target.with_suffix(".json").exists()


@pytest.mark.unit
class TestDebatesCommand:
    def test_lists_debates(self, seeded_store):
        with patch("debaterag.retrieval.resources.get_debate_store", return_value=seeded_store):
            result = runner.invoke(app, ["debates", "--client-id", "u2"])

        assert result.exit_code == 0
        assert "Homework" in result.output
        assert "Nuclear" not in result.output

    def test_client_filter_runs_in_store(self):
        store = MagicMock()
        store.list_summaries.return_value = []

        with patch("debaterag.retrieval.resources.get_debate_store", return_value=store):
            result = runner.invoke(app, ["debates", "-c", "u1"])

        assert result.exit_code == 0
        store.list_summaries.assert_called_once_with("u1")

    def test_empty_store(self, debate_store):
        with patch("debaterag.retrieval.resources.get_debate_store", return_value=debate_store):
            result = runner.invoke(app, ["debates"])

        assert result.exit_code == 0
        assert "No debates stored." in result.output


@pytest.mark.unit
def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
