"""
Lexical heuristics over a pasted solution.

This is not static analysis: each rule looks for surface cues (loop shapes,
lookup calls, hash collections, sorting, self calls) and the first matching
primary rule decides the headline complexity. Every matching rule adds its
pattern label and suggestions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

NO_SUGGESTIONS_FALLBACK = "Code looks efficient for the given approach"

_LOOP_LINE = re.compile(r"^\s*(?:for|while)\b")
_BRACE_NESTED_LOOP = re.compile(
    r"\b(?:for|while)\s*\([^)]*\)\s*\{[^{}]*?\b(?:for|while)\s*\(",
)
_HASH_CONSTRUCTION = re.compile(
    r"\bnew\s+(?:\w+)?(?:Map|Set)\b"
    r"|\b(?:HashMap|HashSet|TreeMap|TreeSet|LinkedHashMap|Dictionary|unordered_map|unordered_set)\b"
    r"|(?<![.\w])(?:dict|set|defaultdict|Counter|OrderedDict)\s*\("
    r"|=\s*\{\s*\}",
)
_LINEAR_SEARCH = re.compile(r"\.(?:includes|indexOf|contains|index)\(")
_SORTING = re.compile(r"\.sort\(|\bsorted\(|(?<![.\w])sort\(")
_ARRAY_ALLOCATION = re.compile(
    r"\bnew\s+(?:Array|\w+\[)|\bArray\.from\(|\[\s*\]|\blist\(|\bvector<|\bArrayList\b|\bList<",
)
_FUNCTION_DEFINITION = re.compile(
    r"\bdef\s+(\w+)\s*\("
    r"|\bfunction\s+(\w+)\s*\("
    r"|\b(?:const|let|var)\s+(\w+)\s*=\s*(?:function\b|\([^)]*\)\s*=>)"
    r"|^\s*(?:(?:public|private|protected|static|final)\s+)*[\w<>\[\],]+\s+(\w+)\s*\([^)]*\)\s*\{",
    re.MULTILINE,
)


def _leading_width(line: str) -> int:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip())


def has_nested_loops(code: str) -> bool:
    """
    True when one loop construct sits lexically inside another, either on one
    line (``for (...) { for (...``) or by indentation.
    """

    if _BRACE_NESTED_LOOP.search(code):
        return True

    open_loops: List[int] = []
    for line in code.splitlines():
        if not line.strip():
            continue
        width = _leading_width(line)
        while open_loops and width <= open_loops[-1]:
            open_loops.pop()
        if _LOOP_LINE.match(line):
            if open_loops:
                return True
            open_loops.append(width)
    return False


def _python_body(code: str, match: re.Match) -> str:
    line_start = code.rfind("\n", 0, match.start()) + 1
    header_end = code.find("\n", match.end())
    if header_end == -1:
        return code[match.end():]

    def_width = _leading_width(code[line_start:header_end])
    body = [code[match.end():header_end]]
    for line in code[header_end + 1:].splitlines():
        if line.strip() and _leading_width(line) <= def_width:
            break
        body.append(line)
    return "\n".join(body)


def _brace_body(code: str, start: int) -> str:
    opening = code.find("{", start)
    if opening == -1:
        return ""

    depth = 0
    for index in range(opening, len(code)):
        if code[index] == "{":
            depth += 1
        elif code[index] == "}":
            depth -= 1
            if depth == 0:
                return code[opening + 1:index]
    return code[opening + 1:]


def _function_body(code: str, match: re.Match) -> str:
    """Text of the function opened by a definition match, header excluded."""

    if match.group(1):
        return _python_body(code, match)
    arrow = match.group(3) and match.group(0).endswith("=>")
    if arrow and not code[match.end():].lstrip().startswith("{"):
        # Expression-bodied arrow function.
        line_end = code.find("\n", match.end())
        return code[match.end():] if line_end == -1 else code[match.end():line_end]
    # The C-style alternative consumes the opening brace.
    start = match.end() - 1 if match.group(4) else match.end()
    return _brace_body(code, start)


def has_recursion(code: str) -> bool:
    """True when a function defined in the text calls itself inside its own body."""

    for match in _FUNCTION_DEFINITION.finditer(code):
        name = next(group for group in match.groups() if group)
        if name in {"if", "for", "while", "switch", "return", "catch"}:
            continue
        if re.search(rf"(?<![\w]){re.escape(name)}\s*\(", _function_body(code, match)):
            return True
    return False


def has_hash_structures(code: str) -> bool:
    return bool(_HASH_CONSTRUCTION.search(code))


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[str], bool]
    pattern: str
    suggestions: tuple[str, ...]
    # Only primary rules may set the headline complexity and narrative.
    complexity: Optional[str] = None
    narrative: Optional[str] = None

    @property
    def is_primary(self) -> bool:
        return self.complexity is not None


RULES: tuple[Rule, ...] = (
    Rule(
        name="hash_structures",
        matches=has_hash_structures,
        pattern="Hash table optimization",
        complexity="O(n)",
        narrative="hash-based data structures for efficient lookups.",
        suggestions=(
            "Excellent choice for fast lookups",
            "Consider space vs time tradeoffs",
        ),
    ),
    Rule(
        name="nested_loops",
        matches=has_nested_loops,
        pattern="Nested loops",
        complexity="O(n²)",
        narrative="nested iteration which creates quadratic complexity.",
        suggestions=(
            "Reduce nested loops by using a hash map or set for O(1) lookups",
            "Look for single-pass solutions",
        ),
    ),
    Rule(
        name="sorting",
        matches=lambda code: bool(_SORTING.search(code)),
        pattern="Sorting algorithm",
        complexity="O(n log n)",
        narrative="a sorting-based approach.",
        suggestions=(
            "Check if sorting is necessary",
            "Consider if partial sorting would work",
        ),
    ),
    Rule(
        name="linear_search",
        matches=lambda code: bool(_LINEAR_SEARCH.search(code)),
        pattern="Linear search calls",
        suggestions=(
            "Use Set or Map for O(1) lookups",
            "Pre-process data into efficient structures",
        ),
    ),
    Rule(
        name="recursion",
        matches=has_recursion,
        pattern="Recursion",
        suggestions=(
            "Add memoization if repeated subproblems",
            "Consider iterative alternative",
        ),
    ),
)

FALLBACK_COMPLEXITY = "O(n)"
FALLBACK_PATTERN = "Linear search"
FALLBACK_NARRATIVE = "a linear scanning approach."


@dataclass
class Analysis:
    time_complexity: str
    space_complexity: str
    explanation: str
    space_note: str
    suggestions: List[str] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)
    matched_rules: List[str] = field(default_factory=list)

    @property
    def space_summary(self) -> str:
        return f"{self.space_complexity} - {self.space_note}"


def _append_unique(target: List[str], values) -> None:
    for value in values:
        if value not in target:
            target.append(value)


def _estimate_space(code: str, matched: List[str]) -> tuple[str, str]:
    if "hash_structures" in matched or _ARRAY_ALLOCATION.search(code):
        return "O(n)", "Additional data structures used"
    if "recursion" in matched:
        return "O(n)", "Recursive call stack"
    return "O(1)", "Constant extra space"


def analyze_solution(code: str, problem_title: str = "", problem_description: str = "") -> Analysis:
    """
    Summarise a solution's likely complexity from lexical cues alone.

    Total for any input: text that matches nothing gets the linear-scan
    narrative with ``O(n)`` time.
    """

    code = code or ""
    matched = [rule for rule in RULES if rule.matches(code)]
    primary = next((rule for rule in matched if rule.is_primary), None)

    subject = f'Your solution for "{problem_title}"' if problem_title else "Your solution"
    if primary is not None:
        time_complexity = primary.complexity
        explanation = f"{subject} uses {primary.narrative}"
        patterns = [primary.pattern]
    else:
        time_complexity = FALLBACK_COMPLEXITY
        explanation = f"{subject} uses {FALLBACK_NARRATIVE}"
        patterns = [FALLBACK_PATTERN]

    suggestions: List[str] = []
    for rule in matched:
        _append_unique(patterns, [rule.pattern])
        _append_unique(suggestions, rule.suggestions)

    if not suggestions:
        suggestions.append(NO_SUGGESTIONS_FALLBACK)

    matched_names = [rule.name for rule in matched]
    space_complexity, space_note = _estimate_space(code, matched_names)

    return Analysis(
        time_complexity=time_complexity,
        space_complexity=space_complexity,
        explanation=explanation,
        space_note=space_note,
        suggestions=suggestions,
        patterns=patterns,
        matched_rules=matched_names,
    )
