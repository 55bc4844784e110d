"""Tests for the configuration editor."""

import asyncio

import pytest

from helpers import FakeModuleClient
from syslogview.module.detector import COLLECTOR_PROFILE, DISPATCHER_PROFILE
from syslogview.module.editor import BoolValue, ConfigEditor, FieldControl, TextValue, config_value


def test_config_value_tags_booleans_and_everything_else():
    assert config_value(True) == BoolValue(True)
    assert config_value("host") == TextValue("host")
    assert config_value(514) == TextValue(514)
    assert TextValue(514).text == "514"
    assert TextValue(None).text == ""


def test_load_then_save_sends_back_what_was_received(dispatcher_config):
    client = FakeModuleClient(config=dispatcher_config)
    editor = ConfigEditor(client, DISPATCHER_PROFILE.config_fields)

    async def scenario():
        assert await editor.load()
        editor.save()
        await client.close()

    asyncio.run(scenario())
    assert client.saved == [dispatcher_config]


def test_load_discards_local_edits(dispatcher_config):
    client = FakeModuleClient(config=dispatcher_config)
    editor = ConfigEditor(client, DISPATCHER_PROFILE.config_fields)

    async def scenario():
        await editor.load()
        editor.edit("DestinationHost", "192.168.1.1")
        await editor.load()

    asyncio.run(scenario())
    assert editor.state == dispatcher_config
    assert editor.loaded


def test_failed_load_keeps_state():
    client = FakeModuleClient(config=None)
    editor = ConfigEditor(client, ["Verbose"], initial={"Verbose": True})

    assert not asyncio.run(editor.load())
    assert editor.state == {"Verbose": True}
    assert not editor.loaded


def test_save_transmits_whole_state_without_waiting(dispatcher_config):
    client = FakeModuleClient(config=dispatcher_config)
    editor = ConfigEditor(client, DISPATCHER_PROFILE.config_fields, initial=dispatcher_config)

    async def scenario():
        editor.edit("Verbose", True)
        task = editor.save()
        # Nothing has been sent until the loop gets a chance to run the call
        assert client.saved == []
        await task

    asyncio.run(scenario())
    assert client.saved == [{"DestinationHost": "10.0.0.1", "DestinationPort": 514, "Verbose": True}]


def test_reload_then_load_waits_for_acknowledgement(dispatcher_config):
    client = FakeModuleClient(config=dispatcher_config)
    editor = ConfigEditor(client, DISPATCHER_PROFILE.config_fields)

    async def scenario():
        client.reload_gate = asyncio.Event()
        pending = asyncio.ensure_future(editor.reload_then_load())
        for _ in range(5):
            await asyncio.sleep(0)
        assert client.calls == ["reloadConfig"]
        assert client.calls.count("getConfig") == 0

        client.reload_gate.set()
        assert await pending
        assert client.calls == ["reloadConfig", "getConfig"]

    asyncio.run(scenario())
    assert editor.state == dispatcher_config


def test_unacknowledged_reload_skips_load(dispatcher_config):
    client = FakeModuleClient(config=dispatcher_config)
    client.reload_ok = False
    editor = ConfigEditor(client, DISPATCHER_PROFILE.config_fields)

    assert not asyncio.run(editor.reload_then_load())
    assert client.calls == ["reloadConfig"]
    assert editor.state == {}


def test_controls_follow_field_order_and_skip_absent_fields():
    editor = ConfigEditor(
        FakeModuleClient(),
        COLLECTOR_PROFILE.config_fields,
        initial={"Verbose": False, "SyslogPort": 514, "Destination": "udp://collector", "Extra": 1},
    )

    assert editor.controls() == [
        FieldControl("Destination", "text", "udp://collector"),
        FieldControl("SyslogPort", "text", "514"),
        FieldControl("Verbose", "checkbox", False),
    ]


def test_edit_converts_form_values():
    editor = ConfigEditor(FakeModuleClient(), ["Verbose", "DestinationPort"],
                          initial={"Verbose": False, "DestinationPort": 514})

    assert editor.edit("Verbose", "on") == BoolValue(True)
    assert editor.edit("Verbose", False) == BoolValue(False)
    assert editor.edit("DestinationPort", "1514") == TextValue("1514")
    assert editor.state == {"Verbose": False, "DestinationPort": "1514"}

    with pytest.raises(KeyError):
        editor.edit("DestinationHost", "nowhere")


def test_apply_form_treats_missing_checkbox_as_unchecked():
    editor = ConfigEditor(FakeModuleClient(), ["DestinationHost", "DestinationPort", "Verbose"],
                          initial={"DestinationHost": "a", "DestinationPort": 514, "Verbose": True})

    editor.apply_form({"DestinationHost": "b"})

    assert editor.state == {"DestinationHost": "b", "DestinationPort": 514, "Verbose": False}


def test_edit_many_changes_nothing_when_a_field_is_unknown(dispatcher_config):
    editor = ConfigEditor(FakeModuleClient(), DISPATCHER_PROFILE.config_fields, initial=dispatcher_config)

    with pytest.raises(KeyError) as excinfo:
        editor.edit_many({"DestinationHost": "elsewhere", "Bogus": 1, "Other": 2})

    assert excinfo.value.args[0] == "Bogus, Other"
    assert editor.state == dispatcher_config

    editor.edit_many({"DestinationHost": "elsewhere", "Verbose": "on"})
    assert editor.state == dict(dispatcher_config, DestinationHost="elsewhere", Verbose=True)
