"""
Field value encoding.

Stored values are plain strings shaped by the field kind:

- text and single selects: the raw value
- single checkbox: ``"true"`` / ``"false"``
- radio: the checked option's value
- checkbox group and multiple select: checked/selected values joined by commas
"""

from typing import List, Optional

from .controls import FieldKind, FormControl

SEPARATOR = ","


def _checked_group_values(control: FormControl) -> List[str]:
    siblings = control.form.named(control.name) if control.form is not None else [control]
    return [s.value for s in siblings if s.type == "checkbox" and s.checked]


def encode_field(control: FormControl) -> Optional[str]:
    """
    Encode a control's current value.

    Returns None when the control must not be written at all: an unchecked
    radio would otherwise overwrite the value its checked sibling stored.
    """
    kind = control.kind
    if kind is FieldKind.CHECKBOX_GROUP:
        return SEPARATOR.join(_checked_group_values(control))
    if kind is FieldKind.CHECKBOX_SINGLE:
        return "true" if control.checked else "false"
    if kind is FieldKind.RADIO:
        return control.value if control.checked else None
    if kind is FieldKind.SELECT_MULTIPLE:
        return SEPARATOR.join(control.selected)
    return control.value


def decode_into(control: FormControl, stored: str) -> None:
    """Apply a stored string to a control."""
    kind = control.kind
    if kind is FieldKind.CHECKBOX_SINGLE:
        control.checked = stored != "false"
    elif kind is FieldKind.CHECKBOX_GROUP:
        control.checked = control.value in stored.split(SEPARATOR)
    elif kind is FieldKind.RADIO:
        if control.value == stored:
            control.checked = True
    elif kind is FieldKind.SELECT_MULTIPLE:
        control.set_value(stored.split(SEPARATOR))
    else:
        control.set_value(stored)
