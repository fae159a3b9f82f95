"""
Form Model Tests

Controls, event delivery, value encoding and key helpers without an engine.
"""

from formstash import FieldKind, Form, FormControl, FormEvent, page_location, storage_key
from formstash.core.codec import decode_into, encode_field


class TestEvents:
    """EventEmitter behaviour on controls and forms"""

    def test_subscribe_once(self):
        control = FormControl(name="q")
        seen = []
        handler = seen.append
        control.on(FormEvent.INPUT, handler)
        control.on("input", handler)
        control.type_text("x")
        assert seen == [control]
        assert control.listener_count(FormEvent.INPUT) == 1

    def test_off(self):
        form = Form()
        seen = []
        form.on(FormEvent.SUBMIT, seen.append)
        form.off(FormEvent.SUBMIT, seen.append)
        form.off(FormEvent.SUBMIT, seen.append)
        form.submit()
        assert seen == []


class TestControls:
    """User interactions"""

    def test_radio_click_unchecks_siblings(self):
        form = Form([
            FormControl(name="size", type="radio", value="s", checked=True),
            FormControl(name="size", type="radio", value="m"),
            FormControl(name="other", type="radio", value="x", checked=True),
        ])
        form.controls[1].click()
        assert [c.checked for c in form.controls] == [False, True, True]

    def test_checkbox_click_toggles_and_emits_change(self):
        box = FormControl(name="agree", type="checkbox")
        changes = []
        box.on(FormEvent.CHANGE, changes.append)
        box.click()
        box.click()
        assert box.checked is False
        assert len(changes) == 2

    def test_click_on_text_does_nothing(self):
        control = FormControl(name="q")
        changes = []
        control.on(FormEvent.CHANGE, changes.append)
        control.click()
        assert changes == []

    def test_reset_restores_defaults_after_event(self):
        form = Form([FormControl(name="title", value="Untitled")])
        seen = []
        form.on(FormEvent.RESET, lambda f: seen.append(f["title"].value))
        form["title"].type_text("Edited")
        form.reset()
        assert seen == ["Edited"]
        assert form["title"].value == "Untitled"

    def test_kinds(self):
        assert FormControl(type="checkbox", name="a").kind is FieldKind.CHECKBOX_SINGLE
        assert FormControl(type="checkbox", name="a[]").kind is FieldKind.CHECKBOX_GROUP
        assert FormControl(type="radio", name="a").kind is FieldKind.RADIO
        assert FormControl(tag="select", multiple=True, name="a").kind is FieldKind.SELECT_MULTIPLE
        assert FormControl(tag="select", name="a").kind is FieldKind.TEXT
        assert FormControl(tag="textarea", name="a").kind is FieldKind.TEXT

    def test_protectable(self):
        assert FormControl(type="hidden").is_protectable
        assert not FormControl(type="password").is_protectable
        assert not FormControl(type="file").is_protectable
        assert not FormControl(type="image").is_protectable
        assert not FormControl(tag="button", type="submit").is_protectable
        assert not FormControl(tag="button", type="button").is_protectable

    def test_select_defaults_to_first_option(self):
        assert FormControl(tag="select", options=["a", "b"]).value == "a"
        assert FormControl(tag="select", options=["a", "b"], selected=["b"]).value == "b"

    def test_remove(self):
        form = Form([FormControl(name="a"), FormControl(name="b")])
        b = form["b"]
        form.remove(b)
        assert [c.name for c in form.elements()] == ["a"]
        assert b.form is None


class TestCodec:
    """encode_field / decode_into"""

    def test_group_collects_only_same_form_siblings(self):
        form = Form([
            FormControl(name="tags[]", type="checkbox", value="x", checked=True),
            FormControl(name="tags[]", type="checkbox", value="y"),
            FormControl(name="tags[]", type="checkbox", value="z", checked=True),
        ])
        other = Form([FormControl(name="tags[]", type="checkbox", value="w", checked=True)])
        assert encode_field(form.controls[1]) == "x,z"
        assert encode_field(other.controls[0]) == "w"

    def test_unchecked_radio_is_not_encoded(self):
        assert encode_field(FormControl(name="r", type="radio", value="a")) is None
        assert encode_field(FormControl(name="r", type="radio", value="a", checked=True)) == "a"

    def test_single_checkbox_decoding(self):
        box = FormControl(name="agree", type="checkbox")
        decode_into(box, "true")
        assert box.checked
        decode_into(box, "false")
        assert not box.checked
        decode_into(box, "on")
        assert box.checked

    def test_radio_decoding_never_unchecks(self):
        radio = FormControl(name="r", type="radio", value="a", checked=True)
        decode_into(radio, "b")
        assert radio.checked


class TestKeys:
    """page_location / storage_key"""

    def test_page_location(self):
        assert page_location(None) == ""
        assert page_location("https://example.com:8443/a/b") == "example.com/a/b"
        assert page_location("http://example.com/a?x=1&y=2#frag") == "example.com/a?x=1&y=2#frag"

    def test_storage_key_parts(self):
        form = Form([FormControl(name="q")], id="search", name="main")
        control = form["q"]
        assert storage_key(form, control) == "searchmainq"
        assert storage_key(form, control, href="example.com/", location_based=True) == "example.com/searchmainq"
        assert storage_key(form, control, href="example.com/", location_based=False) == "searchmainq"
        assert storage_key(form, control, custom_key_prefix="_x") == "searchmainq_x"
