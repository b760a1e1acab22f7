"""
Dialog parser - turns yarn-style script text into nodes.

```
title: Start
tags: intro
---
// comments and blank lines are ignored
<<set $met to true>>
<<play_sound "door creak" 2>>
Narrator: Hello there. #mood:happy
<<jump Crossroads>>
===

title: Crossroads
---
-> Leave
    <<jump Outside>>
-> Stay a while <<if $met == true>>
    <<jump Start>>
===
```

Jump targets are left as titles; see resolver.resolve_nodes.
"""

from __future__ import annotations

import logging
import re
import shlex
from typing import Optional

from yarnspin.core.errors import ParseError
from yarnspin.script.nodes import (
    CommandLine,
    Condition,
    ConditionKind,
    DialogLine,
    JumpLine,
    Node,
    OptionLine,
    OptionPossibility,
    SetLine,
    Tag,
)

logger = logging.getLogger(__name__)

_TITLE = r'[\w.\-]+'


class _SourceLine:
    """A significant (non-blank, non-comment) line with its position."""

    __slots__ = ("number", "indent", "text")

    def __init__(self, number: int, raw: str):
        self.number = number
        stripped = raw.lstrip()
        self.indent = len(raw) - len(stripped)
        self.text = stripped.rstrip()

    @property
    def column(self) -> int:
        return self.indent + 1


class DialogParser:
    """
    Parses dialog scripts from yarn-style text.

    Parsing is all-or-nothing: the first grammar violation raises
    ParseError with the offending line and column.
    """

    # Regex patterns
    HEADER_PATTERN = re.compile(r'^(\w+)\s*:\s*(.*)$')
    TITLE_PATTERN = re.compile(rf'^{_TITLE}$')
    BODY_START = '---'
    BODY_END = '==='

    COMMAND_PATTERN = re.compile(r'^<<(.*)>>$')
    SET_PATTERN = re.compile(r'^set\s+\$(\w+)\s*(?:to|=)\s*(\S+)$')
    JUMP_PATTERN = re.compile(rf'^jump\s+({_TITLE})$')
    FUNCTION_PATTERN = re.compile(r'^\w+$')

    OPTION_PATTERN = re.compile(r'^->\s*(.*)$')
    GUARD_PATTERN = re.compile(r'<<\s*if\b(.*?)>>\s*$')
    CONDITION_PATTERN = re.compile(r'^\s*\$(\w+)\s*(==|!=|\w+)\s*(\S+)\s*$')

    SPEAKER_PATTERN = re.compile(r'^([A-Za-z_][\w ]*?)\s*:(?=\s|$)\s*(.*)$')
    TAG_PATTERN = re.compile(r'(?:^|\s)#(\w+):(\S+)$')

    def parse_string(self, content: str) -> list[Node]:
        """
        Parse a script string.

        Returns:
            Nodes in source order, jump targets unresolved

        Raises:
            ParseError: the text is not a well-formed script
        """
        nodes: list[Node] = []
        headers: dict[str, str] = {}
        title_line: Optional[_SourceLine] = None
        body: Optional[list[_SourceLine]] = None
        last_number = 0

        for number, raw in enumerate(content.splitlines(), start=1):
            last_number = number
            line = _SourceLine(number, raw)

            # Skip empty lines and comments
            if not line.text or line.text.startswith('//'):
                continue

            if body is not None:
                if line.text == self.BODY_END:
                    nodes.append(self._build_node(headers, title_line, body, line))
                    headers, title_line, body = {}, None, None
                elif line.text == self.BODY_START:
                    raise ParseError(number, line.column, f"node '{headers['title']}' is missing its closing '==='")
                else:
                    body.append(line)
                continue

            if line.text == self.BODY_START:
                if title_line is None:
                    raise ParseError(number, line.column, "node body starts before a 'title:' header")
                body = []
                continue

            match = self.HEADER_PATTERN.match(line.text)
            if not match:
                raise ParseError(number, line.column, f"expected a 'key: value' header or '---', got {line.text!r}")

            key, value = match.group(1), match.group(2).strip()
            if key in headers:
                raise ParseError(number, line.column, f"header '{key}' given twice")
            if key == "title":
                if not self.TITLE_PATTERN.match(value):
                    raise ParseError(number, line.column, f"invalid node title {value!r}")
                title_line = line
            headers[key] = value

        if body is not None:
            raise ParseError(last_number, 1, f"node '{headers['title']}' is missing its closing '==='")
        if headers:
            raise ParseError(last_number, 1, "header block is not followed by a node body")
        if not nodes:
            raise ParseError(max(last_number, 1), 1, "script contains no nodes")

        logger.debug(f"Parsed {len(nodes)} nodes")
        return nodes

    def _build_node(
        self,
        headers: dict[str, str],
        title_line: _SourceLine,
        body: list[_SourceLine],
        end_line: _SourceLine,
    ) -> Node:
        title = headers.pop("title")
        if not body:
            raise ParseError(end_line.number, end_line.column, f"node '{title}' has no lines")

        lines = []
        i = 0
        while i < len(body):
            if self.OPTION_PATTERN.match(body[i].text):
                option, i = self._parse_option_block(body, i)
                lines.append(option)
            else:
                lines.append(self._parse_line(body[i]))
                i += 1

        return Node(title=title, lines=lines, headers=headers, line_number=title_line.number)

    def _parse_line(self, line: _SourceLine):
        text = line.text
        if text.startswith('<<'):
            return self._parse_statement(line)
        if self.GUARD_PATTERN.search(text):
            raise ParseError(line.number, line.column, "'<<if ...>>' guards are only allowed on options")
        return self._parse_dialog(line)

    def _parse_statement(self, line: _SourceLine):
        match = self.COMMAND_PATTERN.match(line.text)
        if not match:
            raise ParseError(line.number, line.column, "unterminated '<<' statement")

        inner = match.group(1).strip()
        keyword = inner.split(maxsplit=1)[0] if inner else ""

        if keyword == "set":
            match = self.SET_PATTERN.match(inner)
            if not match:
                raise ParseError(line.number, line.column, "malformed set, expected '<<set $name to true|false>>'")
            return SetLine(
                variable_name=match.group(1),
                value=self._parse_bool(match.group(2), line),
            )

        if keyword == "jump":
            match = self.JUMP_PATTERN.match(inner)
            if not match:
                raise ParseError(line.number, line.column, "malformed jump, expected '<<jump NodeTitle>>'")
            return JumpLine(node_title=match.group(1))

        if keyword == "if":
            raise ParseError(line.number, line.column, "'<<if ...>>' guards are only allowed on options")

        try:
            tokens = shlex.split(inner)
        except ValueError as e:
            raise ParseError(line.number, line.column, f"malformed command arguments: {e}") from e

        if not tokens:
            raise ParseError(line.number, line.column, "empty command")
        if not self.FUNCTION_PATTERN.match(tokens[0]):
            raise ParseError(line.number, line.column, f"invalid command name {tokens[0]!r}")

        return CommandLine(func_name=tokens[0], args=tokens[1:])

    def _parse_dialog(self, line: _SourceLine) -> DialogLine:
        text, tags = self._split_tags(line.text)

        speaker = ""
        match = self.SPEAKER_PATTERN.match(text)
        if match:
            speaker, text = match.group(1), match.group(2).strip()

        if not text:
            raise ParseError(line.number, line.column, "dialog line has no text")
        return DialogLine(speaker=speaker, text=text, tags=tags)

    def _split_tags(self, text: str) -> tuple[str, list[Tag]]:
        """Strip trailing ``#name:value`` tags, keeping their order."""
        tags: list[Tag] = []
        match = self.TAG_PATTERN.search(text)
        while match:
            tags.insert(0, Tag(name=match.group(1), value=match.group(2)))
            text = text[:match.start()].rstrip()
            match = self.TAG_PATTERN.search(text)
        return text, tags

    def _parse_option_block(self, body: list[_SourceLine], start: int) -> tuple[OptionLine, int]:
        """
        Parse consecutive ``->`` entries, each followed by its jump line.

        Returns:
            The option line and the index of the first line after the block
        """
        possibilities = []
        block_speaker = ""
        i = start

        while i < len(body):
            line = body[i]
            match = self.OPTION_PATTERN.match(line.text)
            if not match:
                break

            # Option tags are accepted but not carried into events
            text, _ = self._split_tags(match.group(1))
            condition = None
            guard = self.GUARD_PATTERN.search(text)
            if guard:
                condition = self._parse_condition(guard.group(1), line)
                text = text[:guard.start()].rstrip()

            speaker_match = self.SPEAKER_PATTERN.match(text)
            if speaker_match:
                if not block_speaker:
                    block_speaker = speaker_match.group(1)
                text = speaker_match.group(2).strip()

            if not text:
                raise ParseError(line.number, line.column, "option has no text")

            if i + 1 >= len(body):
                raise ParseError(line.number, line.column, f"option {text!r} is not followed by a jump line")
            follower = body[i + 1]
            jump = self.COMMAND_PATTERN.match(follower.text)
            jump_match = self.JUMP_PATTERN.match(jump.group(1).strip()) if jump else None
            if not jump_match:
                raise ParseError(follower.number, follower.column, f"option {text!r} must be followed by '<<jump NodeTitle>>'")

            possibilities.append(OptionPossibility(
                text=text,
                jump_to_node_title=jump_match.group(1),
                condition=condition,
            ))
            i += 2

        return OptionLine(speaker=block_speaker, possibilities=possibilities), i

    def _parse_condition(self, expression: str, line: _SourceLine) -> Condition:
        match = self.CONDITION_PATTERN.match(expression)
        if not match:
            raise ParseError(line.number, line.column, "malformed condition, expected '<<if $name == true|false>>'")
        try:
            kind = ConditionKind.parse(match.group(2))
        except ValueError as e:
            raise ParseError(line.number, line.column, str(e)) from e
        return Condition(
            variable_name=match.group(1),
            kind=kind,
            value=self._parse_bool(match.group(3), line),
        )

    @staticmethod
    def _parse_bool(token: str, line: _SourceLine) -> bool:
        if token == "true":
            return True
        if token == "false":
            return False
        raise ParseError(line.number, line.column, f"expected 'true' or 'false', got {token!r}")


def parse(content: str) -> list[Node]:
    """Parse script text with a default DialogParser."""
    return DialogParser().parse_string(content)
