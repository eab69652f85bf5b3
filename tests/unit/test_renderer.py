"""Unit tests for the template registry and renderer."""

import io
from pathlib import Path

import pytest

from render.config import Config
from render.exceptions import (
    CompileError,
    InvocationError,
    NotFoundError,
    RenderError,
    RenderIOError,
)
from render.functions import FunctionRegistry
from render.templates import LiteralTemplateSource, Templates, create_environment


def render_all(templates: Templates, **kwargs: str) -> str:
    """Render every template to a string."""
    sink = io.StringIO()
    templates.render(sink, **kwargs)
    return sink.getvalue()


class TestCreateEnvironment:
    """Tests for create_environment()."""

    def test_empty_delimiters(self, functions: FunctionRegistry) -> None:
        """Test that empty delimiters are rejected."""
        with pytest.raises(CompileError, match="must not be empty"):
            create_environment(functions, {}, left_delim="")

    def test_derived_delimiters(self, functions: FunctionRegistry) -> None:
        """Test that statement and comment tags follow the outer characters."""
        env = create_environment(functions, {}, left_delim="<<", right_delim=">>")

        assert env.block_start_string == "<%"
        assert env.block_end_string == "%>"
        assert env.comment_start_string == "<#"
        assert env.comment_end_string == "#>"


class TestAdd:
    """Tests for registering templates."""

    def test_hello_world(self, functions: FunctionRegistry) -> None:
        """Test the basic render of a single template."""
        templates = Templates(functions, {"name": "world"})

        templates.add("greet", "Hello {{ name }}")

        assert render_all(templates) == "Hello world"

    def test_syntax_error(self, functions: FunctionRegistry) -> None:
        """Test that invalid syntax raises CompileError naming the template."""
        templates = Templates(functions)

        with pytest.raises(CompileError) as exc_info:
            templates.add("bad", "{% if %}")

        assert exc_info.value.source == "bad"
        assert "bad" not in templates
        assert templates.names == []

    def test_failed_replace_keeps_previous(self, functions: FunctionRegistry) -> None:
        """Test that a failed re-add leaves the earlier template usable."""
        templates = Templates(functions)
        templates.add("t", "old")

        with pytest.raises(CompileError):
            templates.add("t", "{{ broken")

        assert templates.render_one("t") == "old"

    def test_readd_keeps_position(self, functions: FunctionRegistry) -> None:
        """Test that re-adding a name replaces its body in place."""
        templates = Templates(functions)
        templates.add("a", "A")
        templates.add("b", "B")

        templates.add("a", "a2")

        assert templates.names == ["a", "b"]
        assert render_all(templates) == "a2B"

    def test_custom_delimiters(self, functions: FunctionRegistry) -> None:
        """Test rendering with custom delimiters, leaving braces alone."""
        templates = Templates(functions, {"name": "x"}, left_delim="<<", right_delim=">>")

        templates.add("t", "<< name >> {{ name }}<% if true %>!<% endif %><# note #>")

        assert templates.render_one("t") == "x {{ name }}!"

    def test_load_locates_failure(self, functions: FunctionRegistry) -> None:
        """Test that a failing source is identified by position."""
        templates = Templates(functions)

        with pytest.raises(CompileError) as exc_info:
            templates.load([
                LiteralTemplateSource(name="ok", text="fine"),
                LiteralTemplateSource(name="bad", text="{{ x"),
            ])

        # The template name is the more specific location
        assert exc_info.value.source == "bad"
        assert templates.names == ["ok"]

    def test_from_config(self, functions: FunctionRegistry) -> None:
        """Test building a registry from a configuration."""
        config = Config(
            template_left_delim="[[",
            template_right_delim="]]",
            template_sources=[LiteralTemplateSource(name="t", text="[[ v ]]")],
        )

        templates = Templates.from_config(functions, config, {"v": 1})

        assert len(templates) == 1
        assert templates.render_one("t") == "1"


class TestRender:
    """Tests for rendering to a stream."""

    @pytest.fixture
    def templates(self, functions: FunctionRegistry) -> Templates:
        """Return a registry with three templates."""
        templates = Templates(functions, {"sep": "--", "items": ["a", "b"]})
        templates.add("one", "1")
        templates.add("two", "2")
        templates.add("three", "3")
        return templates

    def test_separator(self, templates: Templates) -> None:
        """Test that the separator appears only between templates."""
        assert render_all(templates, separator="|") == "1|2|3"

    def test_separator_is_a_template(self, templates: Templates) -> None:
        """Test that the separator is rendered against the variables."""
        assert render_all(templates, separator="{{ sep }}") == "1--2--3"

    def test_exclude(self, templates: Templates) -> None:
        """Test that excluded templates are skipped with their separators."""
        assert render_all(templates, separator="|", exclude="t*") == "1"
        assert render_all(templates, separator="|", exclude="three") == "1|2"

    def test_invalid_separator(self, templates: Templates) -> None:
        """Test that an invalid separator raises CompileError."""
        with pytest.raises(CompileError) as exc_info:
            render_all(templates, separator="{{")

        assert exc_info.value.source == "separator"

    def test_invalid_exclude(self, templates: Templates) -> None:
        """Test that an invalid exclude pattern raises CompileError."""
        with pytest.raises(CompileError):
            render_all(templates, exclude="[")

    def test_functions_and_vars(self, functions: FunctionRegistry) -> None:
        """Test calling functions and reading variables through vars."""
        templates = Templates(functions, {"items": ["a", "b"], "name": "n"})
        templates.add("t", '{{ join(",", map("upper", items)) }} {{ vars.name }}')

        assert templates.render_one("t") == "A,B n"

    def test_missing_variable_is_empty(self, functions: FunctionRegistry) -> None:
        """Test that a missing variable renders as nothing."""
        templates = Templates(functions)
        templates.add("t", "[{{ service.port }}]")

        assert templates.render_one("t") == "[]"

    def test_include(self, functions: FunctionRegistry) -> None:
        """Test that templates can include each other by name."""
        templates = Templates(functions, {"name": "x"})
        templates.add("header", "# {{ name }}\n")
        templates.add("body", '{% include "header" %}body')

        assert templates.render_one("body") == "# x\nbody"

    def test_render_error(self, functions: FunctionRegistry) -> None:
        """Test that a failing function surfaces as RenderError."""
        templates = Templates(functions)
        templates.add("t", '{{ fail("boom") }}')

        with pytest.raises(RenderError, match="t: ValueError: boom") as exc_info:
            templates.render_one("t")

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_dispatch_error_keeps_kind(self, functions: FunctionRegistry) -> None:
        """Test that an unknown dispatched name surfaces as NotFoundError."""
        templates = Templates(functions, {"items": [1]})
        templates.add("t", '{{ map("nope", items) }}')

        with pytest.raises(NotFoundError) as exc_info:
            templates.render_one("t")

        assert exc_info.value.source == "t"
        assert str(exc_info.value) == "t: no such function: 'nope'"

    def test_invocation_error_keeps_kind(self, functions: FunctionRegistry) -> None:
        """Test that a failing dispatched call surfaces as InvocationError."""
        templates = Templates(functions, {"items": ["a"]})
        templates.add("t", '{{ filter("upper", items) }}')

        with pytest.raises(InvocationError, match="must return a boolean") as exc_info:
            templates.render_one("t")

        assert exc_info.value.source == "t"

    def test_undefined_function(self, functions: FunctionRegistry) -> None:
        """Test that calling an unknown function fails at render time."""
        templates = Templates(functions)
        templates.add("t", "{{ nosuch() }}")

        with pytest.raises(RenderError):
            templates.render_one("t")

    def test_render_one_unknown(self, functions: FunctionRegistry) -> None:
        """Test that rendering an unknown name fails."""
        with pytest.raises(RenderError, match="no such template"):
            Templates(functions).render_one("nope")

    def test_sink_failure(self, functions: FunctionRegistry) -> None:
        """Test that a failing output stream raises RenderIOError."""

        class BrokenSink(io.StringIO):
            def write(self, text: str) -> int:
                raise OSError("disk full")

        templates = Templates(functions)
        templates.add("t", "x")

        with pytest.raises(RenderIOError, match="disk full"):
            templates.render(BrokenSink())


class TestRenderToDir:
    """Tests for rendering to a directory tree."""

    def test_nested_names(self, functions: FunctionRegistry, tmp_path: Path) -> None:
        """Test that names with separators create subdirectories."""
        templates = Templates(functions, {"v": "x"})
        templates.add("top.txt", "top {{ v }}")
        templates.add("sub/deep/file.txt", "deep")

        written = templates.render_to_dir(tmp_path / "out")

        assert written == [tmp_path / "out" / "top.txt", tmp_path / "out" / "sub/deep/file.txt"]
        assert (tmp_path / "out" / "top.txt").read_text() == "top x"
        assert (tmp_path / "out" / "sub" / "deep" / "file.txt").read_text() == "deep"

    def test_replaces_existing_file(self, functions: FunctionRegistry, tmp_path: Path) -> None:
        """Test that an existing longer file is fully replaced."""
        (tmp_path / "t.txt").write_text("a much longer previous content")
        templates = Templates(functions)
        templates.add("t.txt", "short")

        templates.render_to_dir(tmp_path)

        assert (tmp_path / "t.txt").read_text() == "short"

    def test_absolute_names_stay_inside(self, functions: FunctionRegistry, tmp_path: Path) -> None:
        """Test that absolute template names are written under the directory."""
        templates = Templates(functions)
        templates.add("/etc/app.conf", "conf")

        templates.render_to_dir(tmp_path)

        assert (tmp_path / "etc" / "app.conf").read_text() == "conf"

    def test_exclude(self, functions: FunctionRegistry, tmp_path: Path) -> None:
        """Test that excluded templates are not written."""
        templates = Templates(functions)
        templates.add("keep.txt", "k")
        templates.add("partials/skip.txt", "s")

        written = templates.render_to_dir(tmp_path, exclude="partials/*")

        assert written == [tmp_path / "keep.txt"]
        assert not (tmp_path / "partials").exists()

    def test_render_error_keeps_earlier_files(
        self, functions: FunctionRegistry, tmp_path: Path
    ) -> None:
        """Test that files written before a failure are left in place."""
        templates = Templates(functions)
        templates.add("a.txt", "a")
        templates.add("b.txt", '{{ fail("no") }}')

        with pytest.raises(RenderError):
            templates.render_to_dir(tmp_path)

        assert (tmp_path / "a.txt").read_text() == "a"
        assert not (tmp_path / "b.txt").exists()

    def test_write_failure_keeps_earlier_files(
        self, functions: FunctionRegistry, tmp_path: Path
    ) -> None:
        """Test that a path blocked by an earlier file aborts with RenderIOError."""
        templates = Templates(functions)
        templates.add("a", "first")
        templates.add("a/b", "second")
        templates.add("c", "never")

        with pytest.raises(RenderIOError) as exc_info:
            templates.render_to_dir(tmp_path)

        assert exc_info.value.source == "a/b"
        assert (tmp_path / "a").read_text() == "first"
        assert not (tmp_path / "c").exists()
