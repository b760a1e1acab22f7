import pytest
from yarnspin.core.errors import ParseError
from yarnspin.script.nodes import (
    CommandLine,
    ConditionKind,
    DialogLine,
    JumpLine,
    OptionLine,
    SetLine,
    Tag,
)
from yarnspin.script.parser import DialogParser, parse


def node_script(body: str, title: str = "Start") -> str:
    return f"title: {title}\n---\n{body}\n===\n"


def test_parse_all_line_kinds(scenario_script):
    nodes = parse(scenario_script)

    assert [n.title for n in nodes] == ["Start", "Start2", "End"]

    start = nodes[0]
    assert start.lines[0] == SetLine(variable_name="met", value=True)
    assert start.lines[1] == DialogLine(speaker="Narrator", text="Hello", tags=[])
    assert start.lines[2] == JumpLine(node_title="Start2")
    assert start.lines[2].target_index is None

    options = nodes[1].lines[0]
    assert isinstance(options, OptionLine)
    assert len(nodes[1].lines) == 1
    leave, stay = options.possibilities
    assert (leave.text, leave.jump_to_node_title, leave.condition) == ("Leave", "End", None)
    assert (stay.text, stay.jump_to_node_title) == ("Stay", "Start")
    assert stay.condition.variable_name == "met"
    assert stay.condition.kind is ConditionKind.EQUAL
    assert stay.condition.value is True


def test_headers_and_line_numbers():
    script = "// intro dialog\n\ntitle: Intro\ntags: greeting town\n---\nHi.\n===\n"
    node = parse(script)[0]

    assert node.title == "Intro"
    assert node.headers == {"tags": "greeting town"}
    assert node.tags == ["greeting", "town"]
    assert node.line_number == 3


def test_dialog_tags_keep_order():
    line = parse(node_script("Guard: Halt! #mood:angry #line:g01"))[0].lines[0]

    assert line.speaker == "Guard"
    assert line.text == "Halt!"
    assert line.tags == [Tag(name="mood", value="angry"), Tag(name="line", value="g01")]


def test_dialog_without_speaker():
    line = parse(node_script("The wind howls."))[0].lines[0]
    assert line == DialogLine(speaker="", text="The wind howls.")


def test_colon_inside_text_is_not_a_speaker():
    line = parse(node_script("Visit http://example.com today"))[0].lines[0]
    assert line == DialogLine(speaker="", text="Visit http://example.com today")

    line = parse(node_script("Old Man: Meet me at 5:30"))[0].lines[0]
    assert line == DialogLine(speaker="Old Man", text="Meet me at 5:30")


def test_hash_inside_text_is_not_a_tag():
    line = parse(node_script("Room #5 is locked"))[0].lines[0]
    assert line.text == "Room #5 is locked"
    assert line.tags == []


def test_command_arguments_support_quotes():
    line = parse(node_script('<<play_sound "door creak" 2>>'))[0].lines[0]
    assert line == CommandLine(func_name="play_sound", args=["door creak", "2"])


def test_command_without_arguments():
    line = parse(node_script("<<shake>>"))[0].lines[0]
    assert line == CommandLine(func_name="shake", args=[])


@pytest.mark.parametrize("statement,expected", [
    ("<<set $door_open to false>>", SetLine(variable_name="door_open", value=False)),
    ("<<set $door_open = true>>", SetLine(variable_name="door_open", value=True)),
])
def test_set_forms(statement, expected):
    assert parse(node_script(statement))[0].lines[0] == expected


@pytest.mark.parametrize("guard,kind,value", [
    ("$met == true", ConditionKind.EQUAL, True),
    ("$met != false", ConditionKind.NOT_EQUAL, False),
    ("$met is true", ConditionKind.EQUAL, True),
    ("$met neq true", ConditionKind.NOT_EQUAL, True),
])
def test_condition_operators(guard, kind, value):
    script = node_script(f"-> Go <<if {guard}>>\n    <<jump Start>>")
    condition = parse(script)[0].lines[0].possibilities[0].condition
    assert condition.kind is kind
    assert condition.value is value


def test_option_speaker_taken_from_first_entry():
    script = node_script("-> Hero: Fight\n<<jump Start>>\n-> Run\n<<jump Start>>")
    options = parse(script)[0].lines[0]

    assert options.speaker == "Hero"
    assert [p.text for p in options.possibilities] == ["Fight", "Run"]


def test_lines_after_option_block_are_separate():
    script = node_script("-> A\n  <<jump Start>>\n<<jump Start>>\nNarrator: unreachable")
    lines = parse(script)[0].lines

    assert isinstance(lines[0], OptionLine)
    assert len(lines[0].possibilities) == 1
    assert lines[1] == JumpLine(node_title="Start")
    assert isinstance(lines[2], DialogLine)


def test_blank_lines_inside_option_block():
    script = node_script("-> A\n  <<jump Start>>\n\n// second choice\n-> B\n  <<jump Start>>")
    lines = parse(script)[0].lines
    assert len(lines) == 1
    assert len(lines[0].possibilities) == 2


@pytest.mark.parametrize("script,line,reason", [
    ("", 1, "no nodes"),
    ("// only a comment\n", 1, "no nodes"),
    ("---\nHi\n===\n", 1, "before a 'title:'"),
    ("title: A\nHello there\n", 2, "expected a 'key: value' header"),
    ("title: A\n---\nHi\n", 3, "missing its closing"),
    ("title: A\n---\nHi\ntitle: B\n---\nBye\n===\n", 5, "node 'A' is missing its closing '==='"),
    ("title: A\n", 1, "not followed by a node body"),
    ("title: A\n---\n===\n", 3, "has no lines"),
    ("title: A\ntitle: B\n---\nHi\n===\n", 2, "given twice"),
    ("title: bad title\n---\nHi\n===\n", 1, "invalid node title"),
    ("title: A\n---\n<<jump B\n===\n", 3, "unterminated"),
    ("title: A\n---\n<<set $x to maybe>>\n===\n", 3, "expected 'true' or 'false'"),
    ("title: A\n---\n<<set x to true>>\n===\n", 3, "malformed set"),
    ("title: A\n---\n<<jump>>\n===\n", 3, "malformed jump"),
    ("title: A\n---\n<<>>\n===\n", 3, "empty command"),
    ("title: A\n---\n<<if $x == true>>\n===\n", 3, "only allowed on options"),
    ("title: A\n---\nHi <<if $x == true>>\n===\n", 3, "only allowed on options"),
    ("title: A\n---\n-> Go\n===\n", 3, "not followed by a jump"),
    ("title: A\n---\n-> Go\nHello\n===\n", 4, "must be followed by"),
    ("title: A\n---\n->\n<<jump A>>\n===\n", 3, "option has no text"),
    ("title: A\n---\n-> Go <<if $x > true>>\n<<jump A>>\n===\n", 3, "malformed condition"),
    ("title: A\n---\n-> Go <<if $x lt true>>\n<<jump A>>\n===\n", 3, "Unknown condition operator"),
    ("title: A\n---\nNarrator:\n===\n", 3, "no text"),
])
def test_parse_errors(script, line, reason):
    with pytest.raises(ParseError) as excinfo:
        parse(script)

    assert excinfo.value.line == line
    assert reason in excinfo.value.reason


def test_parse_error_column_points_at_indent():
    with pytest.raises(ParseError) as excinfo:
        parse("title: A\n---\n    <<set $x to 3>>\n===\n")
    assert excinfo.value.column == 5
    assert str(excinfo.value).startswith("line 3, column 5:")


def test_parser_is_reusable():
    parser = DialogParser()
    first = parser.parse_string(node_script("One"))
    second = parser.parse_string(node_script("Two"))
    assert first[0].lines[0].text == "One"
    assert second[0].lines[0].text == "Two"
