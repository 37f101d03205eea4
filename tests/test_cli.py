from pathlib import Path

from click.testing import CliRunner

from tarsift.cli import main as cli_main

from tests.utils import archive_bytes, write_archive


def _make_tree(root: Path) -> None:
    """Write ``a.tar`` holding ``x.txt`` and a gzip-compressed ``inner.tar.gz``."""
    inner = archive_bytes({"y.txt": b"y", "y2.txt": b"y"}, "gzip")
    write_archive(root / "a.tar", [("x.txt", b"x"), ("inner.tar.gz", inner)])


def _run(*args: str):
    return CliRunner().invoke(cli_main, list(args))


def test_find_prints_chains(workdir: Path) -> None:
    """Verify matches are printed one chain per line with the default separator."""
    _make_tree(workdir)
    result = _run("find", "y", "a.tar")

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        "a.tar:inner.tar.gz:y.txt",
        "a.tar:inner.tar.gz:y2.txt",
    ]


def test_find_custom_separator(workdir: Path) -> None:
    """Verify --separator replaces the chain delimiter."""
    _make_tree(workdir)
    result = _run("find", "--separator", " > ", r"^x", "a.tar")

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "a.tar > x.txt"


def test_find_no_match_exits_one(workdir: Path) -> None:
    """Verify the grep-style exit status when nothing matched."""
    _make_tree(workdir)
    result = _run("find", "nothing-like-this", "a.tar")

    assert result.exit_code == 1
    assert result.stdout == ""


def test_find_failure_only_exits_two(workdir: Path) -> None:
    """Verify failures are reported on stderr and turn exit status into 2."""
    result = _run("find", "zzz", "missing.tar")

    assert result.exit_code == 2
    assert result.stdout == ""
    assert "missing.tar: cannot open missing.tar" in result.stderr


def test_find_match_wins_over_failure(workdir: Path) -> None:
    """Verify any match yields exit status 0 even when a branch failed."""
    _make_tree(workdir)
    (workdir / "bad.tgz").write_bytes(b"not gzip")
    result = _run("find", r"^x\.txt$", "a.tar", "bad.tgz")

    assert result.exit_code == 0, result.output
    assert "a.tar:x.txt" in result.stdout
    assert "bad.tgz:" in result.stderr


def test_find_no_errors_hides_failures(workdir: Path) -> None:
    """Verify --no-errors keeps stderr free of per-branch failures."""
    result = _run("find", "--no-errors", "zzz", "missing.tar")

    assert result.exit_code == 2
    assert "missing.tar" not in result.stderr


def test_find_count(workdir: Path) -> None:
    """Verify --count prints only the number of matches."""
    _make_tree(workdir)
    result = _run("find", "--count", r"\.txt$", "a.tar")

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "3"


def test_find_max_results(workdir: Path) -> None:
    """Verify --max-results stops after the requested number of matches."""
    _make_tree(workdir)
    result = _run("find", "--max-results", "1", r"\.txt$", "a.tar")

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["a.tar:x.txt"]


def test_find_ignore_case(workdir: Path) -> None:
    """Verify -i matches regardless of case."""
    _make_tree(workdir)
    assert _run("find", "X.TXT", "a.tar").exit_code == 1

    result = _run("find", "-i", "X.TXT", "a.tar")
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "a.tar:x.txt"


def test_find_invalid_pattern(workdir: Path) -> None:
    """Verify an invalid regular expression is a usage error."""
    _make_tree(workdir)
    result = _run("find", "[unterminated", "a.tar")

    assert result.exit_code == 2
    assert "PATTERN" in result.stderr
    assert result.stdout == ""


def test_find_requires_paths(workdir: Path) -> None:
    """Verify at least one PATH must be given."""
    result = _run("find", "x")
    assert result.exit_code == 2


def test_config_option_sets_separator(workdir: Path) -> None:
    """Verify --config values reach the find command."""
    _make_tree(workdir)
    cfg = workdir / "custom.yaml"
    cfg.write_text('separator: "|"\n')

    result = _run("--config", str(cfg), "find", r"^x", "a.tar")
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "a.tar|x.txt"


def test_project_local_config_is_picked_up(workdir: Path) -> None:
    """Verify ./.tarsift.yaml is loaded without any flag."""
    _make_tree(workdir)
    (workdir / ".tarsift.yaml").write_text("ignore_case: true\n")

    result = _run("find", "X.TXT", "a.tar")
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "a.tar:x.txt"


def test_invalid_config_is_reported(workdir: Path) -> None:
    """Verify a config that fails validation aborts with a readable message."""
    cfg = workdir / "broken.yaml"
    cfg.write_text("queue_size: 0\n")

    result = _run("--config", str(cfg), "find", "x", "a.tar")
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_save_logfile(workdir: Path) -> None:
    """Verify --save-logfile is accepted and the search still runs."""
    _make_tree(workdir)
    log_file = workdir / "logs" / "run.log"

    result = _run("--save-logfile", str(log_file), "find", r"^x", "a.tar")
    assert result.exit_code == 0, result.output
    assert log_file.exists()


def test_formats_lists_every_kind(workdir: Path) -> None:
    """Verify the formats command lists suffixes and decompressor status."""
    cfg = workdir / "custom.yaml"
    cfg.write_text('xz_command: ["tarsift-no-such-xz", "-d"]\n')

    result = _run("--config", str(cfg), "formats")
    assert result.exit_code == 0, result.output
    assert ".tar.gz" in result.stdout
    assert ".tar.bz2" in result.stdout
    assert ".tzst" in result.stdout
    assert "[tarsift-no-such-xz -d: missing]" in result.stdout


def test_help_lists_commands() -> None:
    """Verify lazily registered commands appear in --help."""
    result = _run("--help")
    assert result.exit_code == 0
    assert "find" in result.output
    assert "formats" in result.output
