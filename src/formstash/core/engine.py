"""
Persistence Engine

Saves the fields of one form to storage while the user edits it, restores
them when the form is shown again and releases them on submit or reset.
"""

import logging
import weakref
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from starlette.datastructures import URL

from ..persistence import StorageAdapter, StorageBackend, get_memory_storage
from .codec import decode_into, encode_field
from .config import Callback, EngineConfiguration
from .controls import Form, FormControl
from .events import EventEmitter, FormEvent
from .keys import page_location, storage_key
from .timer import RepeatingTimer

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    """Lifecycle of a protected form."""
    UNINITIALIZED = "uninitialized"
    PROTECTING = "protecting"    # restore pass running
    PROTECTED = "protected"      # triggers bound
    RELEASED = "released"        # storage cleared, triggers still bound
    DISABLED = "disabled"        # storage unavailable
    TORN_DOWN = "torn_down"      # triggers unbound


class PersistenceEngine:
    """
    Field persistence for one form.

    The form is held weakly: page code owns it, and the engine tears itself
    down when the form is garbage collected.

    Args:
        form: Form to protect
        storage: Backend or adapter to store fields in (shared memory storage
            when omitted)
        location: Page URL, used for keys when ``location_based`` is set
    """

    def __init__(self, form: Form,
                 storage: Optional[Union[StorageBackend, StorageAdapter]] = None,
                 location: Optional[Union[str, URL]] = None):
        self._form_ref = weakref.ref(form)
        if isinstance(storage, StorageAdapter):
            self.storage = storage
        else:
            self.storage = StorageAdapter(storage if storage is not None else get_memory_storage())
        self.location = location
        self.options: Optional[EngineConfiguration] = None
        self.href = ""
        self.started = False
        self.instantiated = False
        self.release_bound = False
        self.state = EngineState.UNINITIALIZED
        self._timer: Optional[RepeatingTimer] = None
        self._bindings: List[Tuple[weakref.ref, FormEvent, Callable]] = []
        # Stop saving once the form is garbage collected
        weakref.finalize(form, self.unprotect)

    @property
    def form(self) -> Optional[Form]:
        """The protected form, or None once it has been garbage collected."""
        return self._form_ref()

    def __repr__(self) -> str:
        return f"<PersistenceEngine {self.form!r} state={self.state.value}>"

    # Configuration

    def set_initial_options(self, options: Optional[Mapping[str, Any]] = None) -> None:
        """Set options once; later calls keep the existing configuration."""
        if self.options is None:
            self.options = EngineConfiguration().merged(options)
            self.instantiated = True

    def set_options(self, options: Optional[Mapping[str, Any]] = None) -> None:
        """Merge options into the current configuration."""
        if self.options is None:
            self.set_initial_options(options)
        else:
            self.options = self.options.merged(options)

    def _call(self, callback: Optional[Callback]) -> Any:
        if callback is None:
            return None
        return callback(self)

    # Lifecycle

    def protect(self, options: Optional[Mapping[str, Any]] = None, **kwargs) -> bool:
        """
        Restore stored data into the form and start saving it.

        Args:
            options: Engine options to merge into the configuration
            **kwargs: Same as options, as keyword arguments

        Returns:
            False if storage is unavailable and the engine disabled itself,
            True otherwise
        """
        self.set_options({**(options or {}), **kwargs})
        self.href = page_location(self.location)

        if not self.storage.is_available():
            self.state = EngineState.DISABLED
            logger.warning(f"Storage unavailable, {self.form!r} is not protected")
            return False

        self.state = EngineState.PROTECTING
        if self._call(self.options.on_before_restore) is not False:
            self.restore_all_data()

        if self.options.auto_release:
            self.bind_release_data()

        if not self.started:
            self.bind_save_data()
            self.started = True
        elif self._timer is not None and not self._timer.running:
            self._timer.start()

        self.state = EngineState.PROTECTED
        logger.debug(f"Protecting {self.form!r}")
        return True

    def unprotect(self) -> None:
        """
        Stop saving: cancel the periodic timer and unbind every handler.

        Stored data is left in place; protect() binds everything again.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for target_ref, event, handler in self._bindings:
            target = target_ref()
            if target is not None:
                target.off(event, handler)
        self._bindings.clear()
        self.started = False
        self.release_bound = False
        self.state = EngineState.TORN_DOWN
        logger.debug(f"Stopped protecting {self.form!r}")

    def _bind(self, target: EventEmitter, event: FormEvent, handler: Callable) -> None:
        target.on(event, handler)
        self._bindings.append((weakref.ref(target), event, handler))

    # Field enumeration and keys

    def fields_to_protect(self) -> List[FormControl]:
        """Protectable, non-excluded controls, re-read from the live form."""
        form = self.form
        if form is None:
            return []
        return [
            control for control in form.elements()
            if control.is_protectable and not self.options.is_excluded(control)
        ]

    def storage_key(self, control: FormControl) -> str:
        return storage_key(
            self.form,
            control,
            href=self.href,
            custom_key_prefix=self.options.custom_key_prefix,
            location_based=self.options.location_based,
        )

    # Saving

    def bind_save_data(self) -> None:
        """Bind periodic, per-keystroke and on-change saving."""
        if self.options.timeout:
            self._timer = RepeatingTimer(self.options.timeout, self.save_all_data)
            self._timer.start()

        for control in self.fields_to_protect():
            if control.is_text_like and not self.options.timeout:
                self._bind(control, FormEvent.INPUT, self._save_field_immediately)
            self._bind(control, FormEvent.CHANGE, self._save_all_on_change)

    def _save_field_immediately(self, control: FormControl) -> None:
        if control.name is None:
            return
        self.save_to_storage(self.storage_key(control), control.value)

    def _save_all_on_change(self, control: FormControl) -> None:
        self.save_all_data()

    def save_to_storage(self, key: str, value: str, fire_callback: bool = True) -> None:
        """
        Write one value.

        ``on_save`` fires when fire_callback is set, except for an empty
        value: clearing a field is stored but not reported as a save.
        """
        self.storage.set(key, value)
        if self.state is EngineState.RELEASED:
            self.state = EngineState.PROTECTED
        if fire_callback and value != "":
            self._call(self.options.on_save)

    def save_all_data(self) -> None:
        """Encode and store every protected field, then fire ``on_save`` once."""
        for control in self.fields_to_protect():
            if control.name is None:
                continue
            value = encode_field(control)
            if value is None:
                continue
            self.save_to_storage(self.storage_key(control), value, fire_callback=False)
        self._call(self.options.on_save)

    # Restoring

    def restore_all_data(self) -> bool:
        """
        Apply stored values to the live form.

        Controls with nothing stored are left untouched. ``on_restore`` fires
        once if at least one control was restored.

        Returns:
            True if anything was restored
        """
        restored = False
        for control in self.fields_to_protect():
            if control.name is None:
                continue
            stored = self.storage.get(self.storage_key(control))
            if stored is not None:
                self.restore_field_data(control, stored)
                restored = True

        if restored:
            logger.debug(f"Restored stored data into {self.form!r}")
            self._call(self.options.on_restore)
        return restored

    def restore_field_data(self, control: FormControl, stored: str) -> None:
        if control.name is None:
            return
        decode_into(control, stored)

    # Releasing

    def bind_release_data(self) -> None:
        """Release stored data when the form is submitted or reset."""
        form = self.form
        if self.release_bound or form is None:
            return
        self._bind(form, FormEvent.SUBMIT, self._release_on_event)
        self._bind(form, FormEvent.RESET, self._release_on_event)
        self.release_bound = True

    def _release_on_event(self, form: Form) -> None:
        self.release_data()

    def manually_release_data(self) -> None:
        """Forget the form's stored data outside of submit/reset."""
        self.release_data()

    def release_data(self) -> None:
        """Remove every protected field's key, then fire ``on_release`` once."""
        released = False
        for control in self.fields_to_protect():
            if control.name is None:
                continue
            self.storage.remove(self.storage_key(control))
            released = True

        if released:
            if self.state is not EngineState.TORN_DOWN:
                self.state = EngineState.RELEASED
            logger.debug(f"Released stored data of {self.form!r}")
            self._call(self.options.on_release)
