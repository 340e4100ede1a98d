"""Parser for turning typed commands into poker actions."""

import re
from dataclasses import dataclass

from holdem_table.engine.actions import Action, ActionType, DecisionContext


@dataclass
class ParsedAction:
    """Result of parsing a typed command."""
    action: Action | None
    success: bool  # Whether parsing succeeded
    raw_match: str | None  # The matched text
    error: str | None = None


class ActionParser:
    """Parse free text ("bet 200", "check", "all in") into an Action."""

    # Patterns ordered by specificity (most specific first)
    PATTERNS = [
        # All-in variations
        (r"\ball[\s-]?in\b", "allin", None),
        (r"\bshove\b", "allin", None),

        # Raise to a total for the round
        (r"\braise\s+to\s+(\d[\d,]*)\b", "raise_to", 1),

        # Bet or raise by an amount
        (r"\braise\s+(?:by\s+)?(\d[\d,]*)\b", "bet", 1),
        (r"\bbet\s+(\d[\d,]*)\b", "bet", 1),

        # Simple actions
        (r"\bfold\b", "fold", None),
        (r"\bcheck\b", "check", None),
        (r"\bcall\b", "call", None),

        # Single-letter shortcuts
        (r"^\s*f\s*$", "fold", None),
        (r"^\s*c\s*$", "call", None),
        (r"^\s*x\s*$", "check", None),
    ]

    @classmethod
    def parse(cls, text: str, context: DecisionContext) -> ParsedAction:
        """
        Parse an action from typed text.

        Amounts are passed through as typed; the table rejects bets that
        are out of range instead of adjusting them.

        Args:
            text: Raw command text
            context: The decision the player is facing

        Returns:
            ParsedAction with the action or an error
        """
        if not text or not text.strip():
            return ParsedAction(action=None, success=False, raw_match=None, error="Empty input")

        for pattern, kind, amount_group in cls.PATTERNS:
            match = re.search(pattern, text, re.IGNORECASE)
            if not match:
                continue

            amount = None
            if amount_group is not None:
                try:
                    amount = int(match.group(amount_group).replace(",", ""))
                except (IndexError, ValueError):
                    continue

            if kind == "allin":
                bet = context.legal(ActionType.BET)
                if bet and bet.max_amount > context.amount_to_call:
                    action = Action.bet(bet.max_amount)
                else:
                    action = Action.call()
                return ParsedAction(action=action, success=True, raw_match=match.group(0))

            if kind == "raise_to":
                return ParsedAction(
                    action=Action.bet(amount - context.round_contribution),
                    success=True,
                    raw_match=match.group(0),
                )

            if kind == "bet":
                return ParsedAction(action=Action.bet(amount), success=True, raw_match=match.group(0))

            if kind == "check":
                if context.amount_to_call > 0:
                    return ParsedAction(
                        action=None,
                        success=False,
                        raw_match=match.group(0),
                        error=f"Cannot check: {context.amount_to_call} to call",
                    )
                return ParsedAction(action=Action.call(), success=True, raw_match=match.group(0))

            if kind == "call":
                return ParsedAction(action=Action.call(), success=True, raw_match=match.group(0))

            if kind == "fold":
                return ParsedAction(action=Action.fold(), success=True, raw_match=match.group(0))

        return ParsedAction(
            action=None,
            success=False,
            raw_match=None,
            error=f"Could not parse action from input: {text[:200]}",
        )

    @classmethod
    def get_default_action(cls, context: DecisionContext) -> ParsedAction:
        """
        Safest action when input cannot be parsed: check if free, otherwise fold.
        """
        if context.amount_to_call == 0:
            return ParsedAction(
                action=Action.call(),
                success=False,
                raw_match=None,
                error="Using default action: CHECK",
            )

        return ParsedAction(
            action=Action.fold(),
            success=False,
            raw_match=None,
            error="Using default action: FOLD",
        )
