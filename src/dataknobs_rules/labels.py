"""Field labels used to attribute validation messages."""

from __future__ import annotations

from enum import Enum


class FieldLabel(Enum):
    """Closed set of logical fields a message can be attributed to.

    The value of each member is its display string, which leaf rules use as
    the message prefix (``"EMAIL should contain @."``). ``FORM`` is the label
    for whole-record validation.

    Example:
        ```python
        from dataknobs_rules import FieldLabel, required

        required.run("", FieldLabel.FIRSTNAME).errors
        # ('FIRSTNAME can not be empty.',)
        ```
    """

    FORM = "FORM"
    FIRSTNAME = "FIRSTNAME"
    LASTNAME = "LASTNAME"
    EMAIL = "EMAIL"
    AGE = "AGE"

    @property
    def display(self) -> str:
        """Display string used in messages."""
        return self.value

    @classmethod
    def parse(cls, text: str | FieldLabel) -> FieldLabel:
        """Resolve a label from its name or display string (case-insensitive).

        Args:
            text: Label name, display string, or an existing label

        Returns:
            The matching FieldLabel

        Raises:
            ValueError: If no label matches
        """
        if isinstance(text, cls):
            return text
        wanted = str(text).strip().upper()
        for label in cls:
            if wanted in (label.name, label.display.upper()):
                return label
        raise ValueError(f"Unknown field label: {text!r}")

    def __str__(self) -> str:
        return self.display
