"""Tests for the CLI interface."""

import json

import pytest
from click.testing import CliRunner

from tumblr_archive.cli import main
from tumblr_archive.config import AppConfig, load_config, save_config
from tumblr_archive.media import TrimRule


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.toml"


@pytest.fixture
def configured(config_path, archive_root):
    """Create a config file pointing at the fixture archive."""
    save_config(AppConfig(archive_path=archive_root), config_path)
    return config_path


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "TumblThree Archive" in result.output

    def test_init_creates_config(self, runner, config_path, archive_root):
        result = runner.invoke(
            main,
            ["--config", str(config_path), "init"],
            input=f"{archive_root}\nextension\n",
        )
        assert result.exit_code == 0
        assert "Config saved" in result.output
        config = load_config(config_path)
        assert config.archive_path == archive_root
        assert config.image_trim is TrimRule.EXTENSION

    def test_status_without_config(self, runner, config_path):
        result = runner.invoke(main, ["--config", str(config_path), "status"])
        assert result.exit_code == 0
        assert "Not configured" in result.output

    def test_status_with_config(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "status"])
        assert result.exit_code == 0
        assert "Found" in result.output
        assert "Blogs: 2" in result.output

    def test_bad_config(self, runner, config_path):
        config_path.write_text('[media]\nmedia_trim = "nope"\n', encoding="utf-8")
        result = runner.invoke(main, ["--config", str(config_path), "status"])
        assert result.exit_code != 0
        assert "media.media_trim" in result.output


class TestBlogsCommand:
    def test_lists_configured_archive(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "blogs"])
        assert result.exit_code == 0
        assert "jsonblog" in result.output
        assert "legacyblog" in result.output
        assert "Index" not in result.output

    def test_explicit_root(self, runner, config_path, archive_root):
        result = runner.invoke(main, ["--config", str(config_path), "blogs", str(archive_root)])
        assert result.exit_code == 0
        assert "legacyblog" in result.output

    def test_missing_root(self, runner, config_path, tmp_path):
        result = runner.invoke(
            main, ["--config", str(config_path), "blogs", str(tmp_path / "nope")]
        )
        assert result.exit_code != 0
        assert "Archive directory not found" in result.output


class TestPostsCommand:
    def test_posts_by_name_to_file(self, runner, configured, tmp_path):
        output = tmp_path / "posts.json"
        result = runner.invoke(
            main, ["--config", str(configured), "posts", "legacyblog", "-o", str(output)]
        )
        assert result.exit_code == 0
        assert "Parsed 6 posts" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [p["id"] for p in data] == [1001, 1002, 1003, 2001, 2002, 4001]
        assert {p["type"] for p in data} == {"Image", "Text", "Video", "Answer"}

    def test_posts_by_path_to_stdout(self, runner, config_path, json_blog):
        result = runner.invoke(main, ["--config", str(config_path), "posts", str(json_blog)])
        assert result.exit_code == 0
        assert '"type": "Answer"' in result.output
        assert "<em>Why?</em><br>Because." in result.output

    def test_strict_fails_on_bad_record(self, runner, config_path, json_blog):
        result = runner.invoke(
            main, ["--config", str(config_path), "posts", str(json_blog), "--strict"]
        )
        assert result.exit_code != 0
        assert "Error:" in result.output

    def test_unknown_blog(self, runner, configured):
        result = runner.invoke(main, ["--config", str(configured), "posts", "nosuchblog"])
        assert result.exit_code != 0
        assert "Blog directory not found" in result.output

    def test_image_trim_option(self, runner, configured, tmp_path):
        output = tmp_path / "posts.json"
        result = runner.invoke(
            main,
            [
                "--config",
                str(configured),
                "posts",
                "legacyblog",
                "--image-trim",
                "extension",
                "-o",
                str(output),
            ],
        )
        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        first = next(p for p in data if p["id"] == 1001)
        assert first["photo_urls"] == ["unknown"]

    def test_posts_help(self, runner):
        result = runner.invoke(main, ["posts", "--help"])
        assert result.exit_code == 0
        assert "--strict" in result.output
        assert "--image-trim" in result.output
