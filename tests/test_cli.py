from __future__ import annotations

from typer.testing import CliRunner

from lsmeta import walker as walker_module
from lsmeta.cli import app

runner = CliRunner()


def test_lists_visible_children(sample_tree) -> None:
    result = runner.invoke(app, [str(sample_tree)])

    assert result.exit_code == 0
    assert "a.txt" in result.stdout
    assert "nested" in result.stdout
    assert ".hidden" not in result.stdout
    assert "c.txt" not in result.stdout


def test_tree_with_all_and_classify(sample_tree) -> None:
    result = runner.invoke(app, [str(sample_tree), "--tree", "-A", "-F"])

    assert result.exit_code == 0
    assert ".hidden" in result.stdout
    assert "c.txt" in result.stdout
    assert "deep/" in result.stdout


def test_ignore_glob_option(sample_tree) -> None:
    result = runner.invoke(app, [str(sample_tree), "--tree", "-I", "nest*"])

    assert result.exit_code == 0
    assert "nested" not in result.stdout
    assert "b.bin" not in result.stdout


def test_missing_root_is_a_major_issue(tmp_path, sample_tree) -> None:
    missing = tmp_path / "missing"

    result = runner.invoke(app, [str(missing), str(sample_tree)])

    assert result.exit_code == 2
    assert f"{missing}: No such file or directory." in result.output
    assert "a.txt" in result.stdout


def test_minor_issue_exit_code(sample_tree, monkeypatch) -> None:
    real_resolve = walker_module.resolve

    def failing_resolve(path, *args, **kwargs):
        if str(path).endswith("a.txt"):
            raise PermissionError(13, "Permission denied")
        return real_resolve(path, *args, **kwargs)

    monkeypatch.setattr(walker_module, "resolve", failing_resolve)

    result = runner.invoke(app, [str(sample_tree)])

    assert result.exit_code == 1
    assert f"{sample_tree / 'a.txt'}: Permission denied." in result.output


def test_invalid_config_file(tmp_path, sample_tree) -> None:
    config = tmp_path / "config.toml"
    config.write_text('display = "sideways"\n', encoding="utf-8")

    result = runner.invoke(app, [str(sample_tree), "--config", str(config)])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_config_file_depth_applies(tmp_path, sample_tree) -> None:
    config = tmp_path / "config.toml"
    config.write_text('layout = "tree"\ndepth = 1\n', encoding="utf-8")

    result = runner.invoke(app, [str(sample_tree), "--config", str(config)])

    assert result.exit_code == 0
    assert "nested" in result.stdout
    assert "b.bin" not in result.stdout


def test_invalid_config_value_with_markup_is_printed_verbatim(tmp_path, sample_tree) -> None:
    config = tmp_path / "config.toml"
    config.write_text('display = "[/x]"\n', encoding="utf-8")

    result = runner.invoke(app, [str(sample_tree), "--config", str(config)])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output
    assert "[/x]" in result.output
