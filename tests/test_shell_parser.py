import pytest

from wish.exceptions import ShellSyntaxError
from wish.shell_parser import ParserState, ProcessParser, parse_command_line
from wish.tokenizer import Token, TokenKind, tokenize


def arg(text: str) -> Token:
    return Token(TokenKind.ARGUMENT, text)


IN = Token(TokenKind.INPUT_REDIRECT, "<")
OUT = Token(TokenKind.OUTPUT_REDIRECT, ">")


def test_parse_empty_line_returns_no_groups():
    command_line = parse_command_line("\n")
    assert command_line.is_empty
    assert command_line.groups == []


def test_parse_pipeline_of_three():
    command_line = parse_command_line("cmd1 | cmd2 | cmd3")
    assert len(command_line) == 1
    group = command_line.groups[0]
    assert [process.argv for process in group] == [["cmd1"], ["cmd2"], ["cmd3"]]
    assert [process.index for process in group] == [0, 1, 2]
    assert group.background is False


def test_parse_background_separator():
    command_line = parse_command_line("cmd1 & cmd2")
    assert [group.background for group in command_line] == [True, False]
    assert [group.index for group in command_line] == [0, 1]


def test_parse_trailing_background():
    command_line = parse_command_line("cmd1 &")
    assert len(command_line) == 1
    assert command_line.groups[0].background is True


def test_only_last_group_becomes_foreground():
    command_line = parse_command_line("a & b | c & d")
    assert [group.background for group in command_line] == [True, True, False]
    assert [p.argv for p in command_line.groups[1]] == [["b"], ["c"]]


def test_leading_background_is_ignored():
    command_line = parse_command_line("& ls -l")
    assert len(command_line) == 1
    assert command_line.groups[0].processes[0].argv == ["ls", "-l"]
    assert command_line.groups[0].background is False


def test_parse_redirections():
    process = parse_command_line("sort -r < in.txt > out.txt").groups[0].processes[0]
    assert process.argv == ["sort", "-r"]
    assert process.name == "sort"
    assert process.args == ["-r"]
    assert process.stdin == "in.txt"
    assert process.stdout == "out.txt"
    assert process.pid is None
    assert process.launched is False


def test_parse_redirections_in_either_order():
    process = parse_command_line("sort>out.txt<in.txt").groups[0].processes[0]
    assert process.stdin == "in.txt"
    assert process.stdout == "out.txt"


def test_single_process_detection():
    assert parse_command_line("ls -l > x").is_single_process
    assert not parse_command_line("ls | wc").is_single_process
    assert not parse_command_line("ls & wc").is_single_process


def test_iter_processes_in_declaration_order():
    command_line = parse_command_line("a | b & c")
    assert [p.name for p in command_line.iter_processes()] == ["a", "b", "c"]


@pytest.mark.parametrize(
    "line",
    [
        "cmd > a > b",
        "cmd < a < b",
        "< a cmd",
        "cmd < a extra",
        "cmd > out arg",
        "a | > out",
    ],
)
def test_parse_rejects_malformed_stage(line):
    with pytest.raises(ShellSyntaxError):
        parse_command_line(line)


def test_machine_collects_arguments():
    parser = ProcessParser()
    assert parser.state is ParserState.EXPECTING_ARGUMENT
    parser.feed(arg("ls"))
    assert parser.state is ParserState.ARGUMENT
    parser.feed(arg("-l"))
    process = parser.finish()
    assert process.argv == ["ls", "-l"]
    assert parser.state is ParserState.END


def test_machine_redirect_transitions():
    parser = ProcessParser(index=2)
    parser.feed(arg("wc"))
    parser.feed(IN)
    assert parser.state is ParserState.EXPECTING_INPUT_FILE
    parser.feed(arg("in.txt"))
    assert parser.state is ParserState.END
    parser.feed(OUT)
    assert parser.state is ParserState.EXPECTING_OUTPUT_FILE
    parser.feed(arg("out.txt"))
    process = parser.finish()
    assert (process.index, process.stdin, process.stdout) == (2, "in.txt", "out.txt")


def test_machine_rejects_redirect_without_command():
    parser = ProcessParser()
    with pytest.raises(ShellSyntaxError):
        parser.feed(IN)


def test_machine_rejects_missing_redirect_target():
    parser = ProcessParser()
    parser.feed(arg("cat"))
    parser.feed(OUT)
    with pytest.raises(ShellSyntaxError):
        parser.finish()


def test_machine_rejects_redirect_as_target():
    parser = ProcessParser()
    parser.feed(arg("cat"))
    parser.feed(OUT)
    with pytest.raises(ShellSyntaxError):
        parser.feed(IN)


def test_machine_rejects_empty_stage():
    with pytest.raises(ShellSyntaxError):
        ProcessParser().finish()


def test_machine_rejects_separators():
    parser = ProcessParser()
    for token in tokenize("ls"):
        parser.feed(token)
    with pytest.raises(ShellSyntaxError):
        parser.feed(Token(TokenKind.PIPE, "|"))
