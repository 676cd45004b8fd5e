"""
Conditional logic models.

Declarative rule trees that gate question visibility, question enablement
and step navigation. Loaded once from configuration and never mutated.

Keys are accepted in either camelCase (``questionId``, ``caseSensitive``)
or snake_case so that JSON exports of existing wizard configurations load
without translation.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel


# Closed set of answer kinds accepted by the evaluator and scoring functions.
AnswerValue = Union[str, int, float, bool, List[str], None]
AnswerSet = Dict[str, AnswerValue]


class ConfigModel(BaseModel):
    """Base for immutable configuration models."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class ComparisonOperator(str, Enum):
    """Operators available to a single comparison rule."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IN = "in"
    NOT_IN = "not_in"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"


class LogicalOperator(str, Enum):
    """Operators combining the members of a group."""
    AND = "and"
    OR = "or"


VALUELESS_OPERATORS = frozenset({
    ComparisonOperator.IS_EMPTY.value,
    ComparisonOperator.IS_NOT_EMPTY.value,
})


class ComparisonRule(ConfigModel):
    """
    Compare one answer against a configured value.

    ``operator`` is kept as a plain string so that a misconfigured rule
    still loads; the evaluator treats unknown operators as not matching.
    """
    question_id: str = Field(description="Question whose answer is compared")
    operator: str = Field(description="One of ComparisonOperator")
    value: Any = Field(default=None, description="Value to compare against")
    case_sensitive: bool = Field(default=False, description="Compare strings case-sensitively")


class ConditionalGroup(ConfigModel):
    """Boolean tree of rules and nested groups combined with AND/OR."""
    operator: str = Field(default=LogicalOperator.AND.value, description="'and' or 'or'")
    rules: List[ComparisonRule] = Field(default_factory=list)
    groups: List["ConditionalGroup"] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rules and not self.groups


ConditionalGroup.model_rebuild()


def _condition_kind(data: Any) -> str:
    if isinstance(data, dict):
        return "rule" if ("questionId" in data or "question_id" in data) else "group"
    if isinstance(data, ComparisonRule):
        return "rule"
    return "group"


# Either a single rule or a group; used where a navigation rule carries its condition.
Condition = Annotated[
    Union[
        Annotated[ComparisonRule, Tag("rule")],
        Annotated[ConditionalGroup, Tag("group")],
    ],
    Discriminator(_condition_kind),
]


class EnhancedConditionalLogic(ConfigModel):
    """Question-level show/hide and enable/disable conditions."""
    show_if: Optional[ConditionalGroup] = None
    hide_if: Optional[ConditionalGroup] = None
    enable_if: Optional[ConditionalGroup] = None
    disable_if: Optional[ConditionalGroup] = None


class StepConditionalLogic(ConfigModel):
    """Step-level skip/show conditions."""
    skip_if: Optional[ConditionalGroup] = None
    show_if: Optional[ConditionalGroup] = None
