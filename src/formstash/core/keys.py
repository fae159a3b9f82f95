"""
Storage key derivation.

A key is ``[location] + form id + form name + field name + prefix``. Keys are
rebuilt on every access since a form can be re-identified at any time.
"""

from typing import Optional, Union

from starlette.datastructures import URL

from .controls import Form, FormControl


def page_location(url: Optional[Union[str, URL]]) -> str:
    """
    Location component of a key: hostname + path + ?query + #fragment.

    Scheme, port and credentials are left out so the same page served over
    http and https shares its drafts.
    """
    if url is None:
        return ""
    if not isinstance(url, URL):
        url = URL(str(url))
    location = (url.hostname or "") + url.path
    if url.query:
        location += "?" + url.query
    if url.fragment:
        location += "#" + url.fragment
    return location


def form_identity(form: Form) -> str:
    return (form.id or "") + (form.name or "")


def storage_key(form: Form, control: FormControl, href: str = "",
                custom_key_prefix: str = "", location_based: bool = False) -> str:
    """Derive the storage key for a control of a form."""
    return (
        (href if location_based else "")
        + form_identity(form)
        + (control.name or "")
        + custom_key_prefix
    )
