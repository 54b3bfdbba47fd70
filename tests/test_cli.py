"""Tests for the dagfold command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from dagfold import graph_to_xml, parse_notation
from dagfold._cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command away from any pyproject.toml of the source tree."""
    monkeypatch.chdir(tmp_path)


def _write_graph(path: Path, notation: str) -> Path:
    path.write_text(graph_to_xml(parse_notation(notation)))
    return path


class TestBuild:
    """Tests for the build command."""

    def test_notation_to_xml(self, tmp_path: Path) -> None:
        """Should convert a notation file into an XML graph document."""
        source = tmp_path / "graph.txt"
        source.write_text("(A,B,0),(B,C,1),")
        target = tmp_path / "graph.xml"

        result = runner.invoke(app, ["build", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 0, result.output
        assert target.read_text() == graph_to_xml(parse_notation("(A,B,0),(B,C,1),"))

    def test_invalid_notation_writes_nothing(self, tmp_path: Path) -> None:
        """Should exit 1 without an output file for malformed notation."""
        source = tmp_path / "graph.txt"
        source.write_text("(A,B,x),")
        target = tmp_path / "graph.xml"

        result = runner.invoke(app, ["build", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 1
        assert "Invalid" in result.output
        assert not target.exists()

    def test_missing_input_file(self, tmp_path: Path) -> None:
        """Should report an unreadable input file."""
        target = tmp_path / "graph.xml"

        result = runner.invoke(app, ["build", "--input1", str(tmp_path / "nope.txt"), "--output1", str(target)])

        assert result.exit_code == 1
        assert "read" in result.output
        assert not target.exists()

    def test_creates_output_directory(self, tmp_path: Path) -> None:
        """Should create missing parent directories of the output file."""
        source = tmp_path / "graph.txt"
        source.write_text("(A,B,0),")
        target = tmp_path / "out" / "graph.xml"

        result = runner.invoke(app, ["build", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 0, result.output
        assert target.exists()


class TestRender:
    """Tests for the render command."""

    def test_call_string(self, tmp_path: Path) -> None:
        """Should write the call string of the graph."""
        source = _write_graph(tmp_path / "graph.xml", "(f,x,0),(f,y,1),")
        target = tmp_path / "call.txt"

        result = runner.invoke(app, ["render", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 0, result.output
        assert target.read_text() == "f(x(), y())"

    def test_cycle_writes_nothing(self, tmp_path: Path) -> None:
        """Should exit 1 without an output file for a cyclic graph."""
        source = _write_graph(tmp_path / "graph.xml", "(A,B,0),(B,A,1),")
        target = tmp_path / "call.txt"

        result = runner.invoke(app, ["render", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 1
        assert "cycle" in result.output
        assert not target.exists()

    def test_two_roots_writes_nothing(self, tmp_path: Path) -> None:
        """Should exit 1 without an output file when the root is ambiguous."""
        source = _write_graph(tmp_path / "graph.xml", "(a,b,0),(c,b,1),")
        target = tmp_path / "call.txt"

        result = runner.invoke(app, ["render", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 1
        assert "extremal" in result.output
        assert not target.exists()

    def test_malformed_xml(self, tmp_path: Path) -> None:
        """Should exit 1 without an output file for malformed XML."""
        source = tmp_path / "graph.xml"
        source.write_text("<graph><vertex>a</graph>")
        target = tmp_path / "call.txt"

        result = runner.invoke(app, ["render", "--input1", str(source), "--output1", str(target)])

        assert result.exit_code == 1
        assert "Invalid" in result.output
        assert not target.exists()


class TestEvaluate:
    """Tests for the evaluate command."""

    def test_sum(self, tmp_path: Path) -> None:
        """Should write the evaluated value as a float literal."""
        source = _write_graph(tmp_path / "graph.xml", "(a,s,0),(b,s,1),")
        operations = tmp_path / "ops.json"
        operations.write_text('{"a": 2, "b": 3, "s": "+"}')
        target = tmp_path / "result.txt"

        result = runner.invoke(
            app,
            ["evaluate", "--input1", str(source), "--input2", str(operations), "--output1", str(target)],
        )

        assert result.exit_code == 0, result.output
        assert target.read_text() == "5.0"

    def test_arity_mismatch_writes_nothing(self, tmp_path: Path) -> None:
        """Should exit 1 without an output file when an operation has the wrong arity."""
        source = _write_graph(tmp_path / "graph.xml", "(a,e,0),(b,e,1),")
        operations = tmp_path / "ops.json"
        operations.write_text('{"a": 2, "b": 3, "e": "exp"}')
        target = tmp_path / "result.txt"

        result = runner.invoke(
            app,
            ["evaluate", "--input1", str(source), "--input2", str(operations), "--output1", str(target)],
        )

        assert result.exit_code == 1
        assert "evaluated" in result.output
        assert not target.exists()

    def test_invalid_operation_table(self, tmp_path: Path) -> None:
        """Should report an operation table with an unknown tag."""
        source = _write_graph(tmp_path / "graph.xml", "(a,s,0),(b,s,1),")
        operations = tmp_path / "ops.json"
        operations.write_text('{"a": 2, "b": 3, "s": "sqrt"}')
        target = tmp_path / "result.txt"

        result = runner.invoke(
            app,
            ["evaluate", "--input1", str(source), "--input2", str(operations), "--output1", str(target)],
        )

        assert result.exit_code == 1
        assert "operation" in result.output
        assert not target.exists()

    def test_missing_operation(self, tmp_path: Path) -> None:
        """Should name the vertex that has no operation."""
        source = _write_graph(tmp_path / "graph.xml", "(a,s,0),(b,s,1),")
        operations = tmp_path / "ops.json"
        operations.write_text('{"a": 2, "s": "+"}')
        target = tmp_path / "result.txt"

        result = runner.invoke(
            app,
            ["evaluate", "--input1", str(source), "--input2", str(operations), "--output1", str(target)],
        )

        assert result.exit_code == 1
        assert "'b'" in result.output
        assert not target.exists()

    def test_missing_operations_file(self, tmp_path: Path) -> None:
        """Should report an unreadable operation table file."""
        source = _write_graph(tmp_path / "graph.xml", "(a,s,0),(b,s,1),")
        target = tmp_path / "result.txt"

        result = runner.invoke(
            app,
            ["evaluate", "--input1", str(source), "--input2", str(tmp_path / "nope.json"), "--output1", str(target)],
        )

        assert result.exit_code == 1
        assert "operations" in result.output
        assert not target.exists()

    def test_oversized_constant_is_diagnosed(self, tmp_path: Path) -> None:
        """Should report a constant too large for a float as a single diagnostic."""
        source = _write_graph(tmp_path / "graph.xml", "(a,e,0),")
        operations = tmp_path / "ops.json"
        operations.write_text('{"a": ' + "9" * 400 + ', "e": "exp"}')
        target = tmp_path / "result.txt"

        result = runner.invoke(
            app,
            ["evaluate", "--input1", str(source), "--input2", str(operations), "--output1", str(target)],
        )

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "operation" in result.output
        assert not target.exists()


class TestConfigFallback:
    """Tests for paths taken from [tool.dagfold]."""

    def test_paths_from_pyproject(self, tmp_path: Path) -> None:
        """Should take input and output paths from [tool.dagfold]."""
        _write_graph(tmp_path / "graph.xml", "(f,x,0),")
        (tmp_path / "pyproject.toml").write_text(
            """
[tool.dagfold]
input = "graph.xml"
output = "out/call.txt"
""",
        )

        result = runner.invoke(app, ["render"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "out" / "call.txt").read_text() == "f(x())"

    def test_cli_option_overrides_config(self, tmp_path: Path) -> None:
        """Should prefer CLI options over [tool.dagfold] values."""
        _write_graph(tmp_path / "graph.xml", "(f,x,0),")
        (tmp_path / "pyproject.toml").write_text('[tool.dagfold]\ninput = "graph.xml"\noutput = "config.txt"\n')
        target = tmp_path / "cli.txt"

        result = runner.invoke(app, ["render", "--output1", str(target)])

        assert result.exit_code == 0, result.output
        assert target.read_text() == "f(x())"
        assert not (tmp_path / "config.txt").exists()

    def test_missing_path_is_usage_error(self) -> None:
        """Should exit 2 when no path is given anywhere."""
        result = runner.invoke(app, ["render"])

        assert result.exit_code == 2

    def test_invalid_config(self, tmp_path: Path) -> None:
        """Should exit 1 on an invalid [tool.dagfold] section."""
        (tmp_path / "pyproject.toml").write_text('[tool.dagfold]\ngraph = "graph.xml"\n')

        result = runner.invoke(app, ["render"])

        assert result.exit_code == 1
        assert "Unknown" in result.output


class TestCheck:
    """Tests for the check command."""

    def test_valid_graph(self, tmp_path: Path) -> None:
        """Should summarize a renderable graph and exit 0."""
        source = _write_graph(tmp_path / "graph.xml", "(f,x,0),(f,y,1),")

        result = runner.invoke(app, ["check", "--input1", str(source)])

        assert result.exit_code == 0, result.output
        assert "Renderable" in result.output

    def test_cyclic_graph(self, tmp_path: Path) -> None:
        """Should exit 1 for a graph that can be neither rendered nor evaluated."""
        source = _write_graph(tmp_path / "graph.xml", "(A,B,0),(B,A,1),")

        result = runner.invoke(app, ["check", "--input1", str(source)])

        assert result.exit_code == 1

    def test_unknown_vertex(self, tmp_path: Path) -> None:
        """Should report an arc to an undeclared vertex."""
        source = tmp_path / "graph.xml"
        source.write_text("<graph><vertex>a</vertex><arc><from>a</from><to>b</to><order>0</order></arc></graph>")

        result = runner.invoke(app, ["check", "--input1", str(source)])

        assert result.exit_code == 1
        assert "undeclared" in result.output

    def test_markup_in_vertex_name(self, tmp_path: Path) -> None:
        """Should print bracketed vertex names literally."""
        source = tmp_path / "graph.xml"
        source.write_text("<graph><vertex>[/red]</vertex></graph>")

        result = runner.invoke(app, ["check", "--input1", str(source)])

        assert result.exit_code == 0, result.output
        assert "[/red]" in result.output

    def test_markup_in_cycle_vertex_name(self, tmp_path: Path) -> None:
        """Should print a bracketed cycle vertex name literally."""
        source = _write_graph(tmp_path / "graph.xml", "(x,y,0),(y,x,1),")
        source.write_text(source.read_text().replace(">x<", ">[bold]<"))

        result = runner.invoke(app, ["check", "--input1", str(source)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "through [bold]" in result.output
