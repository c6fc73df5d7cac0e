"""
Tests for the CLI module.

The commands run against a temporary store with ``--no-git`` so no
repository is needed; git configuration is covered in test_git_integration.
"""

import pytest
import yaml
from click.testing import CliRunner

from git_drive.cli import cli
from git_drive.core.store import Store
from git_drive.models import Identity, Kind


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, store_dir):
    """Invoke the CLI against the populated store."""

    def _invoke(*args, input=None):
        return runner.invoke(cli, ["--home", str(store_dir), *args], input=input)

    return _invoke


def load_store(home):
    return Store(home).load()


class TestCLI:
    """Test cases for the main CLI group."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "git-drive" in result.output
        for command in ("with", "alone", "as", "show", "me"):
            assert command in result.output

    def test_no_subcommand_shows_help(self, runner, temp_dir):
        result = runner.invoke(cli, ["--home", str(temp_dir)])

        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "git-drive" in result.output


class TestDriveCommands:
    """Tests for with, alone, as and show."""

    def test_with_navigators(self, invoke, store_dir):
        result = invoke("with", "nav1", "nav2", "--no-git")

        assert result.exit_code == 0
        assert "Driving with nav1, nav2." in result.output
        assert load_store(store_dir).session.navigators == ("nav1", "nav2")

    def test_with_unknown_navigator_fails(self, invoke, store_dir):
        result = invoke("with", "nav1", "ghost", "--no-git")

        assert result.exit_code == 1
        assert "No navigator found for `ghost`" in result.output
        assert "git-drive list" in result.output
        assert load_store(store_dir).session.is_idle

    def test_with_ambiguous_prefix_fails(self, invoke):
        result = invoke("with", "nav", "--no-git")

        assert result.exit_code == 1
        assert "ambiguous" in result.output
        assert "nav1" in result.output and "nav2" in result.output

    def test_with_driver(self, invoke, store_dir):
        result = invoke("with", "nav1", "--as", "drv1", "--no-git")

        assert result.exit_code == 0
        session = load_store(store_dir).session
        assert session.driver == "drv1"
        assert session.navigators == ("nav1",)

    def test_with_interactive_selection(self, invoke, store_dir):
        result = invoke("with", "--no-git", input="2 1\n")

        assert result.exit_code == 0
        assert "nav1" in result.output
        assert load_store(store_dir).session.navigators == ("nav2", "nav1")

    def test_with_interactive_selection_rejects_bad_input(self, invoke, store_dir):
        result = invoke("with", "--no-git", input="x\n7\n1\n")

        assert result.exit_code == 0
        assert "Invalid input" in result.output
        assert "between 1 and 2" in result.output
        assert load_store(store_dir).session.navigators == ("nav1",)

    def test_with_no_navigators_known(self, runner, temp_dir):
        result = runner.invoke(cli, ["--home", str(temp_dir), "with", "--no-git"])

        assert result.exit_code == 0
        assert "No navigators known yet" in result.output

    def test_with_driver_and_no_navigators_known(self, runner, temp_dir, drv1):
        with Store.open(temp_dir) as store:
            store.registry.add(Kind.DRIVER, drv1)

        result = runner.invoke(cli, ["--home", str(temp_dir), "with", "--as", "drv1", "--no-git"])

        assert result.exit_code == 0
        assert "Driving alone." in result.output
        session = load_store(temp_dir).session
        assert session.driver == "drv1"
        assert session.navigators == ()

    def test_show(self, invoke):
        invoke("with", "nav2", "nav1", "--no-git")

        result = invoke("show")

        assert result.exit_code == 0
        assert result.output.strip() == "nav2 nav1"

    def test_show_fail_if_empty(self, invoke):
        result = invoke("show", "--fail-if-empty")

        assert result.exit_code == 1
        assert result.output == ""

    def test_show_verbose(self, invoke):
        invoke("with", "nav1", "--as", "drv1", "--no-git")

        result = invoke("show", "--verbose")

        assert result.exit_code == 0
        assert "drv1" in result.output
        assert "bernd" in result.output

    def test_alone_keeps_driver(self, invoke, store_dir):
        invoke("with", "nav1", "--as", "drv1", "--no-git")

        result = invoke("alone", "--no-git")

        assert result.exit_code == 0
        assert "Driving alone." in result.output
        session = load_store(store_dir).session
        assert session.driver == "drv1"
        assert session.navigators == ()

    def test_alone_without_driver_removes_session(self, invoke, store_dir):
        invoke("with", "nav1", "--no-git")

        result = invoke("alone", "--no-git")

        assert result.exit_code == 0
        assert not (store_dir / "session.yaml").exists()

    def test_as_switches_driver(self, invoke, store_dir):
        with Store.open(store_dir) as store:
            store.registry.add(Kind.DRIVER, Identity(alias="drv2", name="Kim", email="kim@bar.org"))
        invoke("with", "nav1", "--as", "drv1", "--no-git")

        result = invoke("as", "drv2", "--no-git")

        assert result.exit_code == 0
        assert "Driving as drv2." in result.output
        session = load_store(store_dir).session
        assert session.driver == "drv2"
        assert session.navigators == ("nav1",)

    def test_as_unknown_driver(self, invoke):
        result = invoke("as", "nobody", "--no-git")

        assert result.exit_code == 1
        assert "No driver found for `nobody`" in result.output
        assert "git-drive me list" in result.output


class TestEnvAndTrailers:
    """Tests for env and trailers."""

    def test_env_requires_driver(self, invoke):
        result = invoke("env")

        assert result.exit_code == 1
        assert "No driver is set" in result.output

    def test_env_exports_driver(self, invoke):
        invoke("as", "drv1", "--no-git")

        result = invoke("env")

        assert result.exit_code == 0
        assert "export GIT_AUTHOR_NAME=ralle" in result.output
        assert "export GIT_COMMITTER_EMAIL=qux@bar.org" in result.output

    def test_trailers_appends_to_message_file(self, invoke, temp_dir):
        invoke("with", "nav1", "nav2", "--no-git")
        message_file = temp_dir / "COMMIT_EDITMSG"
        message_file.write_text("Fix the build\n", encoding="utf-8")

        result = invoke("trailers", str(message_file))

        assert result.exit_code == 0
        assert message_file.read_text(encoding="utf-8") == (
            "Fix the build\n\n"
            "Co-authored-by: bernd <foo@bar.org>\n"
            "Co-authored-by: ronny <baz@bar.org>\n"
        )

    def test_trailers_alone_leaves_file_untouched(self, invoke, temp_dir):
        message_file = temp_dir / "COMMIT_EDITMSG"
        message_file.write_text("Fix the build\n", encoding="utf-8")

        result = invoke("trailers", str(message_file))

        assert result.exit_code == 0
        assert message_file.read_text(encoding="utf-8") == "Fix the build\n"


class TestIdentityCommands:
    """Tests for list/new/edit/delete at the top level and under ``me``."""

    def test_list_navigators(self, invoke):
        result = invoke("list")

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "nav1: bernd <foo@bar.org>",
            "nav2: ronny <baz@bar.org>",
        ]

    def test_list_drivers(self, invoke):
        result = invoke("me", "list")

        assert result.exit_code == 0
        assert result.output.splitlines() == ["drv1: ralle <qux@bar.org>"]

    def test_list_table(self, invoke):
        result = invoke("me", "list", "--table")

        assert result.exit_code == 0
        assert "ABCD1234" in result.output

    def test_new_navigator_with_options(self, invoke, store_dir):
        result = invoke("new", "ada", "--name", "Ada Lovelace", "--email", "ada@example.com")

        assert result.exit_code == 0
        assert "Added navigator ada: Ada Lovelace <ada@example.com>" in result.output
        assert load_store(store_dir).registry.find(Kind.NAVIGATOR, "ada").name == "Ada Lovelace"

    def test_new_navigator_prompts(self, invoke, store_dir):
        result = invoke("new", input="ada\nAda Lovelace\nnot-an-email\nada@example.com\n")

        assert result.exit_code == 0
        assert "the email must contain exactly one '@'" in result.output
        assert load_store(store_dir).registry.find(Kind.NAVIGATOR, "ada").email == "ada@example.com"

    def test_new_duplicate_alias(self, invoke):
        result = invoke("new", "NAV1", "--name", "X", "--email", "x@y.org")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_new_navigator_rejects_key(self, invoke):
        result = invoke("new", "ada", "--name", "Ada", "--email", "ada@x.org", "--key", "K")

        assert result.exit_code == 1
        assert "signing key" in result.output

    def test_new_driver_with_key(self, invoke, store_dir):
        result = invoke(
            "me", "new", "--as", "kim", "--name", "Kim", "--email", "kim@x.org", "--key", "FEED"
        )

        assert result.exit_code == 0
        assert load_store(store_dir).registry.find(Kind.DRIVER, "kim").signing_key == "FEED"

    def test_same_alias_in_both_namespaces(self, invoke, store_dir):
        result = invoke("me", "new", "nav1", "--name", "Me", "--email", "me@x.org", "--key", "")

        assert result.exit_code == 0
        store = load_store(store_dir)
        assert store.registry.find(Kind.DRIVER, "nav1").name == "Me"
        assert store.registry.find(Kind.NAVIGATOR, "nav1").name == "bernd"

    def test_edit_with_options(self, invoke, store_dir):
        result = invoke("edit", "nav1", "--email", "bernd@bar.org")

        assert result.exit_code == 0
        navigator = load_store(store_dir).registry.find(Kind.NAVIGATOR, "nav1")
        assert navigator.email == "bernd@bar.org"
        assert navigator.name == "bernd"

    def test_edit_invalid_email_keeps_registry(self, invoke, store_dir):
        result = invoke("edit", "nav1", "--email", "broken")

        assert result.exit_code == 1
        assert load_store(store_dir).registry.find(Kind.NAVIGATOR, "nav1").email == "foo@bar.org"

    def test_edit_unknown(self, invoke):
        result = invoke("me", "edit", "ghost", "--name", "X")

        assert result.exit_code == 1
        assert "No driver found for `ghost`" in result.output

    def test_delete_active_navigator(self, invoke, store_dir):
        invoke("with", "nav1", "nav2", "--no-git")

        result = invoke("delete", "nav1")

        assert result.exit_code == 0
        assert "Deleted navigator nav1" in result.output
        store = load_store(store_dir)
        assert "nav1" not in store.registry.navigators
        assert store.session.navigators == ("nav2",)

    def test_delete_last_participant_idles_session(self, invoke, store_dir):
        invoke("with", "nav1", "--no-git")

        result = invoke("delete", "nav1")

        assert result.exit_code == 0
        assert not (store_dir / "session.yaml").exists()

    def test_delete_unknown_changes_nothing(self, invoke, store_dir):
        result = invoke("delete", "nav1", "ghost")

        assert result.exit_code == 1
        assert "nav1" in load_store(store_dir).registry.navigators


class TestMalformedStore:
    """Broken store files are reported, not raised."""

    def test_malformed_registry(self, runner, temp_dir):
        (temp_dir / "config.yaml").write_text("drivers: [\n", encoding="utf-8")

        result = runner.invoke(cli, ["--home", str(temp_dir), "list"])

        assert result.exit_code == 1
        assert "Could not read" in result.output
        assert "config.yaml" in result.output

    def test_malformed_session(self, runner, store_dir):
        (store_dir / "session.yaml").write_text(
            yaml.safe_dump({"navigators": "nav1"}), encoding="utf-8"
        )

        result = runner.invoke(cli, ["--home", str(store_dir), "show"])

        assert result.exit_code == 1
        assert "session.yaml" in result.output
