"""Environment management for fnexpr variables, constants and functions."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping

from fnexpr.fnexpr_error import ErrorMessageBuilder, FnExprNameError
from fnexpr.fnexpr_value import FnExprNumber


UnaryFunction = Callable[[FnExprNumber], FnExprNumber]
MultiArgImpl = Callable[[List[FnExprNumber]], FnExprNumber]


@dataclass(frozen=True)
class FnExprMultiArgFunction:
    """
    A built-in function taking an ordered argument list.

    `arity` is the exact argument count, or -1 for a variadic function that
    takes whatever its call site supplies, provided there are at least
    `min_args` arguments.
    """
    name: str
    impl: MultiArgImpl
    arity: int
    min_args: int = 0

    @property
    def is_variadic(self) -> bool:
        """Check if the function accepts a variable number of arguments."""
        return self.arity == -1

    def __call__(self, args: List[FnExprNumber]) -> FnExprNumber:
        return self.impl(args)


@dataclass
class FnExprEnvironment:
    """
    Variable, constant and function tables for one interpreter session.

    Constants and functions are fixed when the environment is built; only the
    variable map changes afterwards.
    """
    constants: Mapping[str, FnExprNumber] = field(default_factory=dict)
    unary_functions: Mapping[str, UnaryFunction] = field(default_factory=dict)
    multi_arg_functions: Mapping[str, FnExprMultiArgFunction] = field(default_factory=dict)
    variables: Dict[str, FnExprNumber] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.constants = MappingProxyType(dict(self.constants))
        self.unary_functions = MappingProxyType(dict(self.unary_functions))
        self.multi_arg_functions = MappingProxyType(dict(self.multi_arg_functions))

    def function_names(self) -> List[str]:
        """Return every function name, unary and multi-argument."""
        return sorted(set(self.unary_functions) | set(self.multi_arg_functions))

    def constant_names(self) -> List[str]:
        """Return every constant name."""
        return sorted(self.constants)

    def set_variable(self, name: str, value: FnExprNumber) -> None:
        """Bind a variable, replacing any previous value."""
        self.variables[name] = value

    def get_variable(self, name: str) -> FnExprNumber | None:
        """Return a variable's value, or None if it is not defined."""
        return self.variables.get(name)

    def lookup_variable(self, name: str) -> FnExprNumber:
        """
        Look up a variable.

        Args:
            name: Variable name to look up

        Returns:
            Variable value

        Raises:
            FnExprNameError: If the variable is not defined
        """
        if name in self.variables:
            return self.variables[name]

        candidates = list(self.variables) + list(self.constants)
        raise FnExprNameError(
            message=f"Undefined variable: {name}",
            received=f"Name: {name}",
            suggestion=ErrorMessageBuilder.format_suggestions(name, candidates)
                or f"Assign a value first, e.g. {name} = 1",
            context="Variables must be assigned before they are used"
        )

    def lookup_constant(self, name: str) -> FnExprNumber:
        """
        Look up a constant.

        Raises:
            FnExprNameError: If the constant is not defined
        """
        if name not in self.constants:
            raise FnExprNameError(f"Unknown constant: {name}")

        return self.constants[name]

    def read_only_variables(self) -> Mapping[str, FnExprNumber]:
        """Return a live read-only view of the variable map."""
        return MappingProxyType(self.variables)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"FnExprEnvironment(variables={sorted(self.variables)}, "
            f"constants={self.constant_names()}, functions={len(self.function_names())})"
        )
