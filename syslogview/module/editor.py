"""
Configuration Editor Module

Local, editable mirror of the forwarding module's configuration. The editor
knows nothing about the module's schema beyond the list of field names it
should show: whatever the module returns is taken as the new state, and the
whole state is sent back on save.

Classes:
    BoolValue: A configuration value edited with a checkbox
    TextValue: A configuration value edited as free text
    FieldControl: Description of one form control
    ConfigEditor: Load / save / reload-then-load against the module
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"on", "true", "1", "yes"}


@dataclass(frozen=True)
class BoolValue:
    value: bool

    kind = "checkbox"

    def to_wire(self) -> bool:
        return self.value


@dataclass(frozen=True)
class TextValue:
    # Keeps the value as received (e.g. an int port) until the user edits it
    value: Any

    kind = "text"

    @property
    def text(self) -> str:
        return "" if self.value is None else str(self.value)

    def to_wire(self) -> Any:
        return self.value


ConfigValue = Union[BoolValue, TextValue]


def config_value(raw: Any) -> ConfigValue:
    """Tag a value received from the module with the control used to edit it."""
    if isinstance(raw, bool):
        return BoolValue(raw)
    return TextValue(raw)


def _converted(current: ConfigValue, raw: Any) -> ConfigValue:
    # Edits keep the control type decided at load time
    if isinstance(current, BoolValue):
        if isinstance(raw, str):
            return BoolValue(raw.strip().lower() in _TRUE_STRINGS)
        return BoolValue(bool(raw))
    return TextValue("" if raw is None else str(raw))


@dataclass(frozen=True)
class FieldControl:
    """
    One control of the configuration form.

    Attributes:
        name (str): Field name, also used as the control label
        kind (str): ``"checkbox"`` or ``"text"``
        value (Any): ``bool`` for checkboxes, display string for text inputs
    """

    name: str
    kind: str
    value: Any


class ConfigEditor:
    """
    Editable copy of the module configuration.

    Attributes:
        client: Object exposing ``get_config``, ``save_config``,
                ``reload_config`` and ``dispatch``
        fields (Sequence[str]): Field names shown in the form, in order
        loaded (bool): Whether a load has succeeded at least once
    """

    def __init__(self, client: Any, fields: Sequence[str], initial: Optional[Mapping[str, Any]] = None):
        self.client = client
        self.fields = tuple(fields)
        self.loaded = False
        self._state: Dict[str, ConfigValue] = {}
        if initial:
            self._replace(initial)

    @property
    def state(self) -> Dict[str, Any]:
        """The current configuration, in the form the module expects."""
        return {name: value.to_wire() for name, value in self._state.items()}

    def _replace(self, data: Mapping[str, Any]) -> None:
        self._state = {name: config_value(raw) for name, raw in data.items()}

    async def load(self) -> bool:
        """
        Replace the local state with the module's configuration.

        Unsaved local edits are discarded. If the fetch fails the state is
        left as it was.

        Returns:
            bool: True if the state was replaced
        """
        data = await self.client.get_config()
        if data is None:
            logger.warning("Configuration not loaded; keeping current values")
            return False
        self._replace(data)
        self.loaded = True
        logger.debug(f"Loaded configuration with {len(self._state)} fields")
        return True

    def save(self):
        """
        Send the whole local state to the module without waiting for it.

        Returns:
            asyncio.Task: The dispatched call, for callers that want to track it
        """
        state = self.state
        logger.info(f"Saving configuration ({len(state)} fields)")
        return self.client.dispatch(self.client.save_config(state))

    async def reload_then_load(self) -> bool:
        """
        Have the module reload its configuration from its own storage, then load it.

        The load is only issued after the reload has been acknowledged.

        Returns:
            bool: True if both steps succeeded
        """
        acknowledged = await self.client.reload_config()
        if not acknowledged:
            logger.warning("Module did not acknowledge configuration reload")
            return False
        return await self.load()

    def edit(self, name: str, raw: Any) -> ConfigValue:
        """
        Change one field in the local copy.

        Raises:
            KeyError: If the module did not report the field
        """
        updated = _converted(self._state[name], raw)
        self._state[name] = updated
        return updated

    def edit_many(self, edits: Mapping[str, Any]) -> None:
        """
        Change several fields at once; nothing changes if any name is unknown.

        Raises:
            KeyError: Naming every field the module did not report
        """
        unknown = [name for name in edits if name not in self._state]
        if unknown:
            raise KeyError(", ".join(unknown))
        updated = {name: _converted(self._state[name], raw) for name, raw in edits.items()}
        self._state.update(updated)

    def apply_form(self, form: Mapping[str, Any]) -> None:
        """
        Apply a submitted form to the shown fields.

        An unchecked checkbox is absent from a form submission, so a missing
        checkbox field means False; a missing text field is left unchanged.
        """
        for control in self.controls():
            if control.kind == BoolValue.kind:
                self.edit(control.name, form.get(control.name, False))
            elif control.name in form:
                self.edit(control.name, form[control.name])

    def controls(self) -> List[FieldControl]:
        """Controls for the shown fields present in the state; others are skipped."""
        controls = []
        for name in self.fields:
            if name not in self._state:
                continue
            value = self._state[name]
            if isinstance(value, BoolValue):
                controls.append(FieldControl(name, BoolValue.kind, value.value))
            else:
                controls.append(FieldControl(name, TextValue.kind, value.text))
        return controls
