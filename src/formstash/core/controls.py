"""
Form Model

In-process representation of an HTML form: a Form owning FormControl
objects in document order. Host code mutates controls the way a user would
(typing, clicking, selecting) and the controls emit the matching events.
"""

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from .events import EventEmitter, FormEvent

INPUT_TAGS = {"input", "textarea", "select", "button"}

# Input types that are never persisted. Passwords are excluded for security.
UNPROTECTED_TYPES = {"submit", "reset", "button", "image", "file", "password"}

TEXT_LIKE_TYPES = {"text", "search", "email", "url", "tel"}

# A bracket in the control name marks a multi-valued field (``tags[]``)
GROUP_MARKER = "["


def is_group_name(name: Optional[str]) -> bool:
    """Check whether a field name follows the multi-value naming convention."""
    return name is not None and GROUP_MARKER in name


class FieldKind(str, Enum):
    """How a control's value is encoded in storage."""
    TEXT = "text"
    CHECKBOX_SINGLE = "checkbox-single"
    CHECKBOX_GROUP = "checkbox-group"
    RADIO = "radio"
    SELECT_MULTIPLE = "select-multiple"


class FormControl(EventEmitter):
    """
    A single form control.

    Args:
        name: Field name; controls without a name cannot be persisted
        type: Input type (``text``, ``checkbox``, ``radio``, ...). For
            ``textarea`` and ``select`` tags it is derived from the tag.
        tag: Element tag: input, textarea, select or button
        value: Current value (for checkboxes and radios, the option value)
        checked: Checked state for checkboxes and radios
        options: Option values of a select
        selected: Selected option values of a multiple select
        multiple: Whether a select accepts several values
        id: Optional element id
    """

    def __init__(
        self,
        name: Optional[str] = None,
        type: str = "text",
        tag: str = "input",
        value: str = "",
        checked: bool = False,
        options: Optional[Sequence[str]] = None,
        selected: Optional[Sequence[str]] = None,
        multiple: bool = False,
        id: Optional[str] = None,
    ):
        super().__init__()
        self.tag = tag.lower()
        if self.tag == "textarea":
            type = "textarea"
        elif self.tag == "select":
            type = "select-multiple" if multiple else "select-one"
        self.type = (type or "text").lower()
        self.name = name
        self.id = id
        self.multiple = multiple
        self.options: List[str] = list(options or [])
        self.value = value
        self.checked = checked
        self.selected: List[str] = list(selected or [])
        if self.type == "select-one" and not value and self.options:
            self.value = self.selected[0] if self.selected else self.options[0]
        self.form: Optional["Form"] = None

        self.default_value = self.value
        self.default_checked = self.checked
        self.default_selected = list(self.selected)

    def __repr__(self) -> str:
        return f"<FormControl {self.tag}[type={self.type}] name={self.name!r}>"

    @property
    def kind(self) -> FieldKind:
        if self.type == "checkbox":
            return FieldKind.CHECKBOX_GROUP if is_group_name(self.name) else FieldKind.CHECKBOX_SINGLE
        if self.type == "radio":
            return FieldKind.RADIO
        if self.type == "select-multiple":
            return FieldKind.SELECT_MULTIPLE
        return FieldKind.TEXT

    @property
    def is_protectable(self) -> bool:
        """Whether this control may ever be persisted."""
        return self.tag in INPUT_TAGS and self.tag != "button" and self.type not in UNPROTECTED_TYPES

    @property
    def is_text_like(self) -> bool:
        """Free-text controls that get per-keystroke saving."""
        return self.tag == "textarea" or (self.tag == "input" and self.type in TEXT_LIKE_TYPES)

    def get_value(self) -> Union[str, List[str]]:
        if self.type == "select-multiple":
            return list(self.selected)
        return self.value

    def set_value(self, value: Union[str, Iterable[str]]) -> None:
        if self.type == "select-multiple":
            wanted = [value] if isinstance(value, str) else list(value)
            if self.options:
                self.selected = [option for option in self.options if option in wanted]
            else:
                self.selected = wanted
        else:
            self.value = str(value)

    # User interactions

    def type_text(self, text: str) -> None:
        """Replace the value as if typed, emitting ``input``."""
        self.value = text
        self.emit(FormEvent.INPUT)

    def commit(self) -> None:
        """Emit ``change``, as a browser does when a text control loses focus."""
        self.emit(FormEvent.CHANGE)

    def click(self) -> None:
        """Toggle a checkbox or check a radio (unchecking its siblings)."""
        if self.type == "checkbox":
            self.checked = not self.checked
        elif self.type == "radio":
            if self.form is not None:
                for sibling in self.form.named(self.name):
                    if sibling.type == "radio":
                        sibling.checked = False
            self.checked = True
        else:
            return
        self.emit(FormEvent.CHANGE)

    def choose(self, *values: str) -> None:
        """Select option values of a select control, emitting ``change``."""
        self.set_value(list(values) if self.type == "select-multiple" else values[0])
        self.emit(FormEvent.CHANGE)

    def restore_defaults(self) -> None:
        self.value = self.default_value
        self.checked = self.default_checked
        self.selected = list(self.default_selected)


class Form(EventEmitter):
    """
    A form and its controls in document order.

    Args:
        controls: Initial controls
        id: Form element id
        name: Form element name
    """

    def __init__(self, controls: Optional[Iterable[FormControl]] = None,
                 id: Optional[str] = None, name: Optional[str] = None):
        super().__init__()
        self.id = id
        self.name = name
        self.controls: List[FormControl] = []
        for control in controls or []:
            self.add(control)

    def __repr__(self) -> str:
        return f"<Form id={self.id!r} name={self.name!r} controls={len(self.controls)}>"

    def add(self, control: FormControl) -> FormControl:
        """Append a control to the form."""
        control.form = self
        self.controls.append(control)
        return control

    def remove(self, control: FormControl) -> None:
        """Detach a control from the form."""
        self.controls = [c for c in self.controls if c is not control]
        control.form = None

    def elements(self) -> List[FormControl]:
        """Snapshot of the current controls in document order."""
        return list(self.controls)

    def named(self, name: Optional[str]) -> List[FormControl]:
        """All controls sharing a name, in document order."""
        return [c for c in self.controls if c.name == name]

    def __getitem__(self, name: str) -> FormControl:
        for control in self.controls:
            if control.name == name:
                return control
        raise KeyError(name)

    def submit(self) -> None:
        self.emit(FormEvent.SUBMIT)

    def reset(self) -> None:
        """Emit ``reset`` then put every control back to its initial state."""
        self.emit(FormEvent.RESET)
        for control in self.controls:
            control.restore_defaults()
