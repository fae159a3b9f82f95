"""
FastHTML Web Adapter

Bridges FastHTML pages and the form model:

- build a Form from a FastHTML ``Form(...)`` component
- apply posted form data to it, emitting the events a browser would
- derive the page location and session storage from a Starlette request

```python
from fasthtml.common import *
from formstash import protect_form
from formstash.adapters.fasthtml import form_from_ft, apply_form_data, location_from_request, session_storage

@rt("/profile/draft")
async def post(request: Request):
    form = form_from_ft(profile_form())
    engine = protect_form(form, storage=session_storage(request), location=location_from_request(request))
    apply_form_data(form, await request.form())
```
"""

import logging
from typing import Any, Iterator, List, Mapping, Optional

from fastcore.xml import FT
from starlette.requests import Request

from ..core.controls import Form, FormControl
from ..core.events import FormEvent
from ..core.keys import page_location
from ..persistence import MappingStorage

logger = logging.getLogger(__name__)


def _truthy_attr(value: Any) -> bool:
    """HTML boolean attribute: present unless explicitly False."""
    if value is None or value is False:
        return False
    if isinstance(value, str) and value.lower() == "false":
        return False
    return True


def _text(ft: FT) -> str:
    return "".join(str(c) for c in ft.children if not isinstance(c, FT))


def _walk(node: Any) -> Iterator[FT]:
    """Depth-first walk over FT nodes, in document order."""
    if isinstance(node, FT):
        yield node
        for child in node.children:
            yield from _walk(child)
    elif isinstance(node, (list, tuple)):
        for child in node:
            yield from _walk(child)


def control_from_ft(ft: FT) -> Optional[FormControl]:
    """Convert an input/textarea/select/button component to a FormControl."""
    tag = ft.tag.lower()
    attrs = ft.attrs
    name = attrs.get("name")
    element_id = attrs.get("id")

    if tag == "input":
        value = attrs.get("value")
        return FormControl(
            name=name,
            type=str(attrs.get("type") or "text"),
            value="" if value is None else str(value),
            checked=_truthy_attr(attrs.get("checked")),
            id=element_id,
        )
    if tag == "textarea":
        return FormControl(name=name, tag="textarea", value=_text(ft), id=element_id)
    if tag == "select":
        options: List[str] = []
        selected: List[str] = []
        for option in _walk(list(ft.children)):
            if option.tag.lower() != "option":
                continue
            value = option.attrs.get("value")
            value = _text(option) if value is None else str(value)
            options.append(value)
            if _truthy_attr(option.attrs.get("selected")):
                selected.append(value)
        multiple = _truthy_attr(attrs.get("multiple"))
        return FormControl(
            name=name,
            tag="select",
            options=options,
            selected=selected,
            value="" if multiple else (selected[0] if selected else ""),
            multiple=multiple,
            id=element_id,
        )
    if tag == "button":
        return FormControl(name=name, tag="button", type=str(attrs.get("type") or "submit"), id=element_id)
    return None


def form_from_ft(ft: FT) -> Form:
    """
    Build a Form from a FastHTML form component.

    Controls are collected depth-first, so fieldsets and wrappers are
    flattened while document order is kept.
    """
    if ft.tag.lower() != "form":
        raise ValueError(f"Expected a form component, got <{ft.tag}>")

    form = Form(id=ft.attrs.get("id"), name=ft.attrs.get("name"))
    for node in _walk(list(ft.children)):
        if node.tag.lower() in ("input", "textarea", "select", "button"):
            control = control_from_ft(node)
            if control is not None:
                form.add(control)
    logger.debug(f"Built {form!r} from FT component")
    return form


def _values(data: Mapping[str, Any], name: str) -> List[str]:
    if hasattr(data, "getlist"):
        return [str(v) for v in data.getlist(name)]
    value = data.get(name)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def apply_form_data(form: Form, data: Mapping[str, Any]) -> List[FormControl]:
    """
    Apply submitted form data to the live form.

    Follows browser submission rules: an unchecked checkbox or radio is
    simply missing from the data, other controls missing from the data are
    left alone. Each control that changes emits ``input`` (text controls)
    and ``change``, so bound engines save the new values.

    Returns:
        Controls whose value changed
    """
    changed: List[FormControl] = []
    for control in form.elements():
        if not control.is_protectable or control.name is None:
            continue
        values = _values(data, control.name)

        if control.type in ("checkbox", "radio"):
            checked = (control.value or "on") in values
            if checked == control.checked:
                continue
            control.checked = checked
        elif control.name not in data:
            continue
        elif control.type == "select-multiple":
            before = list(control.selected)
            control.set_value(values)
            if control.selected == before:
                continue
        else:
            value = values[-1] if values else ""
            if value == control.value:
                continue
            control.value = value
            if control.is_text_like:
                control.emit(FormEvent.INPUT)
        changed.append(control)

    for control in changed:
        control.emit(FormEvent.CHANGE)
    return changed


def location_from_request(request: Request, use_referer: bool = True) -> str:
    """
    Page location for key scoping.

    Form data is usually posted to an endpoint other than the page showing
    the form, so the Referer header is preferred when present.
    """
    referer = request.headers.get("referer") if use_referer else None
    return page_location(referer or request.url)


def session_storage(request: Request, namespace: str = "formstash:") -> MappingStorage:
    """Storage inside the request's session (requires SessionMiddleware)."""
    return MappingStorage(request.session, namespace=namespace)
