"""Exception classes for fnexpr expressions with detailed context."""

from typing import List, Optional, Tuple
import difflib


class FnExprError(Exception):
    """
    Base class for every error raised while evaluating an expression.

    Besides the message, an error can carry optional detail fields that are
    rendered one per line beneath it. Callers that present errors themselves
    can read the fields directly or through detail_fields().
    """

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
        position: Optional[int] = None
    ):
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.position = position

        super().__init__(self._format_detailed_message())

    def detail_fields(self) -> List[Tuple[str, str]]:
        """Return the populated detail fields as (label, text) pairs, in display order."""
        fields = [
            ("Position", None if self.position is None else str(self.position)),
            ("Received", self.received),
            ("Expected", self.expected),
            ("Context", self.context),
            ("Suggestion", self.suggestion),
            ("Example", self.example),
        ]
        return [(label, text) for label, text in fields if text]

    def _format_detailed_message(self) -> str:
        lines = [f"Error: {self.message}"]
        lines.extend(f"{label}: {text}" for label, text in self.detail_fields())
        return "\n".join(lines)


class FnExprSyntaxError(FnExprError):
    """Invalid characters and mismatched parentheses or commas."""


class FnExprNameError(FnExprError):
    """Undefined variables and unknown functions."""


class FnExprDomainError(FnExprError):
    """Numeric preconditions that an operation's input does not meet."""


class FnExprStructuralError(FnExprError):
    """Malformed expressions detected while running the value stack."""


class ErrorMessageBuilder:
    """Helper class for building detailed error messages."""

    @staticmethod
    def suggest_similar_names(target: str, available_names: List[str], max_suggestions: int = 3) -> List[str]:
        """Suggest similar names using fuzzy matching."""
        if not target or not available_names:
            return []

        return difflib.get_close_matches(target, available_names, n=max_suggestions, cutoff=0.6)

    @staticmethod
    def format_suggestions(target: str, available_names: List[str]) -> Optional[str]:
        """Build a 'Did you mean' hint, or None if nothing is close."""
        matches = ErrorMessageBuilder.suggest_similar_names(target, available_names)
        if not matches:
            return None

        return "Did you mean: " + ", ".join(f"'{name}'" for name in matches) + "?"

    @staticmethod
    def create_function_example(func_name: str) -> str:
        """Create usage example for common functions."""
        examples = {
            'sqrt': "sqrt(16) → 4.0",
            'ln': "ln(e) → 1.0",
            'log': "log(100, 10) → 2.0",
            'pow': "pow(2, 10) → 1024.0",
            'complex': "complex(2, 3) → 2.0 + 3.0i",
            'fraction': "fraction(1, 4) → 0.25",
            'clamp': "clamp(15, 0, 10) → 10",
            'gcd': "gcd(12, 18) → 6",
            'lcm': "lcm(4, 6) → 12",
            'min': "min(3, 1, 2) → 1",
            'max': "max(3, 1, 2) → 3",
            'average': "average(1, 2, 3) → 2.0",
            'median': "median(3, 1, 2) → 2.0",
            'mode': "mode(1, 2, 2) → 2",
            'stdev': "stdev(2, 4, 4, 4, 5, 5, 7, 9) → 2.138...",
            'variance': "variance(1, 2, 3, 4) → 1.666...",
            'fact': "fact(5) → 120",
            'factorial2': "factorial2(7) → 105",
            'gamma': "gamma(5) → 24.0",
            'random': "random() → 0.37...",
        }

        return examples.get(func_name, f"{func_name}(...)")

    @staticmethod
    def get_expression_context(expression: str, position: int, context_size: int = 10) -> str:
        """
        Show the text around a position, with the character at that position marked.

        Args:
            expression: The full expression text
            position: Index of the character to mark
            context_size: Characters to show on each side

        Returns:
            A snippet such as "...1 + 2 →@← 3..."
        """
        start = max(0, position - context_size)
        end = min(len(expression), position + context_size + 1)
        before = expression[start:position]
        marked = expression[position] if position < len(expression) else ""
        after = expression[position + 1:end]
        return f"...{before}→{marked}←{after}..."
