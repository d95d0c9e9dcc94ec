import pytest

from wish.exceptions import ShellSyntaxError
from wish.tokenizer import Token, TokenKind, normalize_line, tokenize

VALID_LINES = [
    "ls",
    "  ls   -l  \t /tmp \n",
    "cat a.txt | grep x > out",
    "sort < in.txt > out.txt",
    "a &  b &",
    "echo hi|tr a-z A-Z\t|wc -c",
    "& ls",
]


def test_normalize_collapses_whitespace():
    assert normalize_line("  ls   -l  \t /tmp \n") == "ls -l /tmp"


def test_normalize_drops_space_around_operators():
    assert normalize_line("cat a.txt | grep x > out") == "cat a.txt|grep x>out"
    assert normalize_line("sort  <  in.txt") == "sort<in.txt"
    assert normalize_line("a &  b &") == "a&b&"


def test_normalize_strips_crlf():
    assert normalize_line("echo hi\r\n") == "echo hi"


def test_normalize_blank_line_is_empty():
    assert normalize_line("") == ""
    assert normalize_line(" \t \n") == ""


def test_normalize_allows_leading_background():
    assert normalize_line("& ls") == "&ls"


@pytest.mark.parametrize("line", VALID_LINES)
def test_normalize_is_idempotent(line):
    once = normalize_line(line)
    assert normalize_line(once) == once


@pytest.mark.parametrize("operator", ["|", "<", ">"])
@pytest.mark.parametrize("rest", ["ls", " ls -l", "x y z"])
def test_leading_operator_is_rejected(operator, rest):
    with pytest.raises(ShellSyntaxError):
        normalize_line(operator + rest)
    with pytest.raises(ShellSyntaxError):
        normalize_line("   " + operator + rest)


@pytest.mark.parametrize("operator", ["|", "<", ">"])
def test_trailing_operator_is_rejected(operator):
    with pytest.raises(ShellSyntaxError):
        normalize_line(f"ls {operator}")
    with pytest.raises(ShellSyntaxError):
        normalize_line(f"ls -l{operator}   \t\n")


@pytest.mark.parametrize(
    "line",
    ["ls | | wc", "ls |& wc", "ls & | wc", "ls >> out", "cat <> f", "ls && pwd", "a&&"],
)
def test_adjacent_operators_are_rejected(line):
    with pytest.raises(ShellSyntaxError):
        normalize_line(line)


def test_trailing_background_is_allowed():
    assert normalize_line("sleep 1 &   ") == "sleep 1&"


def test_tokenize_kinds():
    tokens = tokenize("cat<in|wc -l>out&")
    assert [token.kind for token in tokens] == [
        TokenKind.ARGUMENT,
        TokenKind.INPUT_REDIRECT,
        TokenKind.ARGUMENT,
        TokenKind.PIPE,
        TokenKind.ARGUMENT,
        TokenKind.ARGUMENT,
        TokenKind.OUTPUT_REDIRECT,
        TokenKind.ARGUMENT,
        TokenKind.BACKGROUND,
    ]
    assert [token.text for token in tokens if not token.is_operator] == ["cat", "in", "wc", "-l", "out"]


def test_tokenize_empty_line():
    assert tokenize("") == []


def test_tokenize_keeps_arguments_verbatim():
    assert tokenize("echo a-b.c/d") == [
        Token(TokenKind.ARGUMENT, "echo"),
        Token(TokenKind.ARGUMENT, "a-b.c/d"),
    ]
