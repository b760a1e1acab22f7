import pytest
from yarnspin.core.errors import DuplicateNodeTitleError, UnknownNodeReferenceError
from yarnspin.script.nodes import CommandLine, DialogLine, JumpLine, Node, OptionLine
from yarnspin.script.parser import parse
from yarnspin.script.resolver import resolve_nodes


def test_targets_dereference_to_named_nodes(scenario_script):
    dialog = resolve_nodes(parse(scenario_script), "scenario")

    assert len(dialog) == 3
    assert dialog.titles == ["Start", "Start2", "End"]
    assert all(title in dialog for title in dialog.titles)

    jump = dialog.get_node("Start").lines[2]
    assert dialog.target_of(jump) is dialog.get_node("Start2")

    leave, stay = dialog.get_node("Start2").lines[0].possibilities
    assert dialog.target_of(leave) is dialog.get_node("End")
    assert dialog.target_of(stay) is dialog.get_node("Start")


def test_every_reference_resolved(scenario_dialog):
    for node in scenario_dialog:
        for line in node.lines:
            if isinstance(line, JumpLine):
                assert line.is_resolved
                assert scenario_dialog.target_of(line).title == line.node_title
            elif isinstance(line, OptionLine):
                for possibility in line.possibilities:
                    assert possibility.is_resolved
                    assert scenario_dialog.target_of(possibility).title == possibility.jump_to_node_title


def test_parsed_nodes_are_left_untouched(scenario_script):
    nodes = parse(scenario_script)
    resolve_nodes(nodes)
    assert nodes[0].lines[2].target_index is None


def test_forward_and_self_references():
    nodes = parse(
        "title: A\n---\n<<jump B>>\n===\n"
        "title: B\n---\n-> Again\n<<jump B>>\n-> Back\n<<jump A>>\n==="
    )
    dialog = resolve_nodes(nodes)

    again, back = dialog.get_node("B").lines[0].possibilities
    assert dialog.target_of(again) is dialog.get_node("B")
    assert dialog.target_of(back) is dialog.get_node("A")


def test_unknown_jump_target():
    nodes = parse("title: A\n---\n<<jump Nowhere>>\n===")
    with pytest.raises(UnknownNodeReferenceError) as excinfo:
        resolve_nodes(nodes)
    assert excinfo.value.title == "Nowhere"
    assert excinfo.value.source_node == "A"


def test_unknown_option_target():
    nodes = parse("title: A\n---\n-> Go\n<<jump Missing>>\n===")
    with pytest.raises(UnknownNodeReferenceError) as excinfo:
        resolve_nodes(nodes)
    assert excinfo.value.title == "Missing"


def test_duplicate_titles_rejected_before_references():
    nodes = [
        Node(title="A", lines=[JumpLine(node_title="Missing")]),
        Node(title="A", lines=[DialogLine(text="second")]),
    ]
    with pytest.raises(DuplicateNodeTitleError) as excinfo:
        resolve_nodes(nodes)
    assert excinfo.value.title == "A"


def test_lookup_helpers(scenario_dialog):
    assert scenario_dialog.get_node("Nope") is None
    assert scenario_dialog.index_of("Start2") == 1
    assert scenario_dialog.node_at(2).title == "End"


def test_command_names():
    nodes = [
        Node(title="A", lines=[CommandLine(func_name="shake"), CommandLine(func_name="give", args=["x"])]),
        Node(title="B", lines=[CommandLine(func_name="shake")]),
    ]
    assert resolve_nodes(nodes).command_names() == {"shake", "give"}


def test_reachable_from(scenario_dialog):
    assert scenario_dialog.reachable_from("Start") == {"Start", "Start2", "End"}
    assert scenario_dialog.reachable_from("End") == {"End"}
    assert scenario_dialog.reachable_from("Unknown") == set()
