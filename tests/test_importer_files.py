import os

import pytest

from credkit.errors import MalformedSourceError, ParseError
from credkit.importer import FileContents, TryFile, TryIniFile, parse_ini

KEYS = ["user", "password", "database", "host", "port"]


def test_one_candidate_per_section(tmp_path, make_input):
    path = tmp_path / "my.cnf"
    path.write_text("[client]\nuser=a\npassword=b\n\n[mysqldump]\nhost=c\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())

    assert attempt.errors == []
    assert len(attempt.candidates) == 2
    assert attempt.candidates[0].values() == {"user": "a", "password": "b"}
    assert attempt.candidates[1].values() == {"host": "c"}
    assert attempt.candidates[0].source == str(path)
    assert attempt.candidates[0].name_hint == "client"


def test_missing_file_is_not_an_error(tmp_path, make_input):
    attempt = TryIniFile(str(tmp_path / "absent.cnf"), KEYS).discover(make_input())
    assert attempt.candidates == []
    assert attempt.errors == []


def test_directory_is_not_an_error(tmp_path, make_input):
    attempt = TryIniFile(str(tmp_path), KEYS).discover(make_input())
    assert attempt.candidates == []
    assert attempt.errors == []


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0,
                    reason="requires POSIX permissions and a non-root user")
def test_unreadable_file_is_not_an_error(tmp_path, make_input):
    path = tmp_path / "locked.cnf"
    path.write_text("[client]\nuser=a\n")
    path.chmod(0)
    try:
        attempt = TryIniFile(str(path), KEYS).discover(make_input())
    finally:
        path.chmod(0o600)
    assert attempt.candidates == []
    assert attempt.errors == []


def test_malformed_file_records_error(tmp_path, make_input):
    path = tmp_path / "broken.cnf"
    path.write_text("user=a\n[client\npassword\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())

    assert attempt.candidates == []
    assert len(attempt.errors) == 1
    error = attempt.errors[0]
    assert isinstance(error, MalformedSourceError)
    assert error.source == str(path)


def test_binary_file_records_error(tmp_path, make_input):
    path = tmp_path / ".mylogin.cnf"
    path.write_bytes(b"\xff\xfe\x00\x81garbage")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())
    assert attempt.candidates == []
    assert len(attempt.errors) == 1


def test_home_directory_expansion(home_dir, make_input):
    (home_dir / ".my.cnf").write_text("[client]\npassword=secret\n")

    attempt = TryIniFile("~/.my.cnf", KEYS).discover(make_input())
    assert attempt.candidates[0].values() == {"password": "secret"}
    assert attempt.candidates[0].source == str(home_dir / ".my.cnf")


def test_sections_without_known_keys_are_skipped(tmp_path, make_input):
    path = tmp_path / "my.cnf"
    path.write_text("[mysqld]\ndatadir=/var/lib/mysql\nskip-networking\n[client]\nuser=root\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())
    assert [c.values() for c in attempt.candidates] == [{"user": "root"}]


def test_quoted_values_and_include_directives(tmp_path, make_input):
    path = tmp_path / "my.cnf"
    path.write_text("!includedir /etc/mysql/conf.d/\n[client]\npassword=\"p%ss=word\"\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())
    assert attempt.errors == []
    assert attempt.candidates[0].values() == {"password": "p%ss=word"}


def test_parse_ini_raises_parse_error():
    with pytest.raises(ParseError):
        parse_ini("no section header\n")


def test_file_contents_helpers():
    contents = FileContents(b"[a]\nk = v\n", path="x.ini")
    assert contents.to_string() == "[a]\nk = v\n"
    sections = contents.to_ini()
    assert sections[0].name == "a"
    assert sections[0].get("k") == "v"


def test_try_file_passes_contents_to_parser(tmp_path, make_input):
    path = tmp_path / "token"
    path.write_bytes(b"abc\n")
    seen = []

    def parse(contents, import_input, attempt):
        seen.append(contents.to_string())

    TryFile(str(path), parse).discover(make_input())
    assert seen == ["abc\n"]


def test_parse_error_does_not_echo_file_content(tmp_path, make_input):
    path = tmp_path / "my.cnf"
    path.write_text("password=hunter2-prod\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())

    assert len(attempt.errors) == 1
    message = str(attempt.errors[0])
    assert "hunter2-prod" not in message
    assert "line 1" in message


def test_parse_error_reports_line_numbers_only():
    with pytest.raises(ParseError) as excinfo:
        parse_ini("[client]\nuser=a\n=orphan-secret\n")
    message = str(excinfo.value)
    assert "line 3" in message
    assert "orphan-secret" not in message
    assert excinfo.value.__suppress_context__


def test_indented_option_is_not_a_continuation(tmp_path, make_input):
    path = tmp_path / "my.cnf"
    path.write_text("[client]\nuser=a\n  password=b\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())
    assert attempt.candidates[0].values() == {"user": "a", "password": "b"}


@pytest.mark.parametrize("line, expected", [
    ("password=pw # production", "pw"),
    ("password=pw\t# production", "pw"),
    ("password=\"pw # not a comment\"", "pw # not a comment"),
    ("password='pw' # quoted", "pw"),
    ("password=p#w", "p#w"),
])
def test_inline_comments(tmp_path, make_input, line, expected):
    path = tmp_path / "my.cnf"
    path.write_text(f"[client]\n{line}\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())
    assert attempt.candidates[0].values() == {"password": expected}


def test_empty_quoted_value_is_skipped(tmp_path, make_input):
    path = tmp_path / "my.cnf"
    path.write_text("[client]\nuser=a\npassword=\"\"\n")

    attempt = TryIniFile(str(path), KEYS).discover(make_input())
    assert attempt.candidates[0].values() == {"user": "a"}
