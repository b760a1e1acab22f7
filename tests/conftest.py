import os
import sys
import pytest

# Ensure the package can be imported without installing
sys.path.append(os.getcwd())


SCENARIO_SCRIPT = """\
title: Start
---
<<set $met to true>>
Narrator: Hello
<<jump Start2>>
===

title: Start2
---
-> Leave
    <<jump End>>
-> Stay <<if $met == true>>
    <<jump Start>>
===

title: End
---
Narrator: Goodbye
===
"""


@pytest.fixture
def scenario_script():
    return SCENARIO_SCRIPT


@pytest.fixture
def scenario_dialog():
    """Resolved Dialog for the Start/Start2/End scenario."""
    from yarnspin.script.loader import load
    return load(SCENARIO_SCRIPT, dialog_id="scenario")


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from yarnspin.core.events import EventBus
    return EventBus()


@pytest.fixture
def context():
    """Empty in-memory variable store."""
    from yarnspin.runtime.context import VariableContext
    return VariableContext()


@pytest.fixture
def registry():
    """Empty command registry."""
    from yarnspin.runtime.commands import CommandRegistry
    return CommandRegistry()
