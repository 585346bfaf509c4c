from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from leettracker.services.analyzer import Analysis, analyze_solution

logger = logging.getLogger(__name__)

APOLOGY = "I'm having trouble analyzing your code right now. Please try asking your question again."

STEP_FALLBACK = "The code follows a structured approach to solve the problem step by step."

COMPLEXITY_TEMPLATE = textwrap.dedent(
    """\
    **Complexity Analysis for "{title}":**

    **Time Complexity:** {time_complexity}
    **Space Complexity:** {space_summary}

    {explanation}

    **Performance considerations:**
    {suggestions}

    **Patterns detected:**
    {patterns}"""
)

OPTIMIZE_TEMPLATE = textwrap.dedent(
    """\
    **Optimization Ideas for "{title}":**

    {explanation}

    **Current complexity:** {time_complexity}

    **Improvement suggestions:**
    {suggestions}

    **Advanced techniques to consider:**
    • Early termination when possible
    • Preprocessing data for faster queries
    • Memory vs speed tradeoffs
    • Edge case optimizations"""
)

DEBUG_TEMPLATE = textwrap.dedent(
    """\
    **Debugging Guide for "{title}":**

    **Code review checklist:**
    • Check edge cases (empty arrays, single elements)
    • Verify loop boundaries and conditions
    • Test with small examples manually
    • Validate data type assumptions

    **Common issues in this pattern:**
    {pitfalls}

    **Testing approach:**
    • Start with the provided examples
    • Add boundary cases
    • Test with larger inputs"""
)

EXPLAIN_TEMPLATE = textwrap.dedent(
    """\
    **Code Explanation for "{title}":**

    {explanation}

    **How it works:**
    {steps}

    **Key techniques used:**
    {patterns}

    This approach demonstrates {breadth}."""
)

OVERVIEW_TEMPLATE = textwrap.dedent(
    """\
    **Analysis of your "{title}" solution:**

    {explanation}

    **Approach:** {approach}
    **Complexity:** {time_complexity}

    **What you did well:**
    • Clean, readable code structure
    • Appropriate algorithm choice for the problem
    • Good variable naming

    **Ask me about:**
    • "explain the code" - Step-by-step walkthrough
    • "time complexity" - Performance analysis
    • "optimize this" - Improvement suggestions
    • "debug help" - Testing and troubleshooting"""
)

_PATTERN_PITFALLS: Mapping[str, Sequence[str]] = {
    "Nested loops": ("Off-by-one errors in nested loops", "Inefficient redundant comparisons"),
    "Hash table optimization": ("Key existence checks", "Proper initialization of data structures"),
    "Sorting algorithm": ("Stable vs unstable sorting requirements", "Comparison function correctness"),
    "Recursion": ("Missing or unreachable base case", "Stack depth on large inputs"),
}


@dataclass(frozen=True)
class ReplyContext:
    title: str
    description: str
    solution: str
    analysis: Analysis


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def describe_steps(code: str) -> str:
    """
    Numbered walkthrough of the lines that carry structure: definitions,
    loops, conditionals, hash structures and returns.
    """

    lines = [line.strip() for line in (code or "").splitlines() if line.strip()]
    steps: List[str] = []
    for number, line in enumerate(lines, start=1):
        if line.startswith(("def ", "function ", "public ", "private ", "class ")):
            steps.append(f"{number}. Defines the solution entry point")
        elif line.startswith(("for ", "for(", "while ", "while(")):
            steps.append(f"{number}. Iterates through the data structure")
        elif line.startswith(("if ", "if(", "elif ", "else if")):
            steps.append(f"{number}. Checks condition for filtering/decision making")
        elif "Map" in line or "Set" in line or "dict(" in line or "set(" in line:
            steps.append(f"{number}. Uses hash-based data structure for optimization")
        elif line.startswith("return"):
            steps.append(f"{number}. Returns the computed result")
    return "\n".join(steps) or STEP_FALLBACK


def _complexity_reply(ctx: ReplyContext) -> str:
    analysis = ctx.analysis
    return COMPLEXITY_TEMPLATE.format(
        title=ctx.title,
        time_complexity=analysis.time_complexity,
        space_summary=analysis.space_summary,
        explanation=analysis.explanation,
        suggestions=_bullets(analysis.suggestions),
        patterns=_bullets(analysis.patterns),
    )


def _optimize_reply(ctx: ReplyContext) -> str:
    analysis = ctx.analysis
    return OPTIMIZE_TEMPLATE.format(
        title=ctx.title,
        explanation=analysis.explanation,
        time_complexity=analysis.time_complexity,
        suggestions=_bullets(analysis.suggestions),
    )


def _debug_reply(ctx: ReplyContext) -> str:
    pitfalls: List[str] = []
    for pattern in ctx.analysis.patterns:
        pitfalls.extend(_PATTERN_PITFALLS.get(pattern, ()))
    if not pitfalls:
        pitfalls.append("Loop boundaries and early exits")
    return DEBUG_TEMPLATE.format(title=ctx.title, pitfalls=_bullets(pitfalls))


def _explain_reply(ctx: ReplyContext) -> str:
    analysis = ctx.analysis
    return EXPLAIN_TEMPLATE.format(
        title=ctx.title,
        explanation=analysis.explanation,
        steps=describe_steps(ctx.solution),
        patterns=_bullets(analysis.patterns),
        breadth="multiple programming concepts" if len(analysis.patterns) > 1 else "a focused algorithmic approach",
    )


def _overview_reply(ctx: ReplyContext) -> str:
    analysis = ctx.analysis
    return OVERVIEW_TEMPLATE.format(
        title=ctx.title,
        explanation=analysis.explanation,
        approach=", ".join(analysis.patterns),
        time_complexity=analysis.time_complexity,
    )


@dataclass(frozen=True)
class ReplyRule:
    name: str
    keywords: tuple[str, ...]
    render: Callable[[ReplyContext], str]

    def matches(self, lowered_message: str) -> bool:
        return any(keyword in lowered_message for keyword in self.keywords)


# Checked in order; complexity comes first so a question that mentions
# complexity always gets both complexity headers.
REPLY_RULES: tuple[ReplyRule, ...] = (
    ReplyRule("complexity", ("complexity", "time", "space", "big o"), _complexity_reply),
    ReplyRule("optimize", ("optimize", "optimise", "improve", "better", "faster"), _optimize_reply),
    ReplyRule("debug", ("bug", "error", "debug", "wrong", "fail"), _debug_reply),
    ReplyRule("explain", ("explain", "understand", "walk", "code"), _explain_reply),
)

DEFAULT_RULE = ReplyRule("overview", (), _overview_reply)


def select_rule(message: str) -> ReplyRule:
    lowered = (message or "").lower()
    return next((rule for rule in REPLY_RULES if rule.matches(lowered)), DEFAULT_RULE)


def generate_reply(
    message: str,
    problem_title: str,
    problem_description: Optional[str],
    solution: str,
    history: Optional[Sequence[Mapping[str, object]]] = None,
) -> str:
    """
    Pick a canned template by keyword and fill it from the solution analysis.

    ``history`` is accepted so callers can pass the conversation so far; the
    reply does not depend on it.
    """

    try:
        rule = select_rule(message)
        context = ReplyContext(
            title=problem_title,
            description=problem_description or "",
            solution=solution or "",
            analysis=analyze_solution(solution or "", problem_title, problem_description or ""),
        )
        return rule.render(context)
    except Exception:  # noqa: BLE001
        logger.exception("Chat reply generation failed for %r", problem_title)
        return APOLOGY
