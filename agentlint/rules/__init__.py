"""
Built-in rules.

default_registry() builds the registry the CLI uses. Rule order is the
order in which violations and edits are collected.
"""

from typing import List

from agentlint.core.rules import Rule, RuleRegistry
from agentlint.rules.golang import (
    GoErrorIgnoredRule, GoDeferInLoopRule, GoGoroutineLeakRule,
    GoInitFunctionRule, GoNilCheckMissingRule, GoBareReturnRule,
)
from agentlint.rules.quality.error_handling import UnhandledAsyncRule, EmptyCatchRule
from agentlint.rules.quality.hardcoding import HardcodedPathsRule, HardcodedUrlsRule, MagicNumbersRule
from agentlint.rules.quality.hygiene import ConsoleLogRule, TodoFixmeRule, AnyTypeRule, MissingTypesRule
from agentlint.rules.quality.reliability import (
    UnboundedQueryRule, InputValidationRule, RetryLogicRule, SyncFsRule,
    TimeoutRule, UnboundedLoopRule, ResourceLeakRule,
)
from agentlint.rules.rust import (
    RustUnwrapRule, RustPanicRule, RustTodoMacroRule, RustUnsafeBlockRule, RustCloneHeavyRule,
)
from agentlint.rules.security.injection import UnsafeEvalRule, SqlInjectionRule
from agentlint.rules.security.permissions import OverlyPermissiveRule
from agentlint.rules.security.secrets import CredentialLeakRule


ALL_RULES = [
    HardcodedPathsRule,
    HardcodedUrlsRule,
    UnhandledAsyncRule,
    CredentialLeakRule,
    ConsoleLogRule,
    UnboundedQueryRule,
    InputValidationRule,
    RetryLogicRule,
    TodoFixmeRule,
    SyncFsRule,
    MagicNumbersRule,
    EmptyCatchRule,
    AnyTypeRule,
    TimeoutRule,
    UnsafeEvalRule,
    UnboundedLoopRule,
    MissingTypesRule,
    SqlInjectionRule,
    OverlyPermissiveRule,
    ResourceLeakRule,
    GoErrorIgnoredRule,
    GoDeferInLoopRule,
    GoGoroutineLeakRule,
    GoInitFunctionRule,
    GoNilCheckMissingRule,
    GoBareReturnRule,
    RustUnwrapRule,
    RustPanicRule,
    RustTodoMacroRule,
    RustUnsafeBlockRule,
    RustCloneHeavyRule,
]


def create_rules() -> List[Rule]:
    """Instantiate every built-in rule."""
    return [rule_class() for rule_class in ALL_RULES]


def default_registry() -> RuleRegistry:
    """Build a registry holding every built-in rule."""
    return RuleRegistry(create_rules())


__all__ = ["ALL_RULES", "create_rules", "default_registry"]
