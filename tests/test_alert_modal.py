# tests/test_alert_modal.py

from __future__ import annotations

import asyncio

import pytest

from notesave.ui.alert import AlertButton, AlertController, AlertDescriptor, ButtonStyle
from notesave.ui.modal import ModalPhase, ModalState


def test_modal_without_animation_is_immediate() -> None:
    modal = ModalState("m")
    assert modal.phase is ModalPhase.CLOSED

    modal.open()
    assert modal.phase is ModalPhase.OPEN
    modal.close()
    assert modal.phase is ModalPhase.CLOSED
    assert not modal.is_visible


@pytest.mark.asyncio
async def test_modal_animates_through_transient_phases() -> None:
    modal = ModalState("m", animation_seconds=0.02)

    modal.open()
    assert modal.phase is ModalPhase.OPENING
    assert modal.is_open
    await asyncio.sleep(0.05)
    assert modal.phase is ModalPhase.OPEN

    modal.close()
    assert modal.phase is ModalPhase.CLOSING
    assert modal.is_visible and not modal.is_open
    await asyncio.sleep(0.05)
    assert modal.phase is ModalPhase.CLOSED


@pytest.mark.asyncio
async def test_reopen_during_closing_cancels_the_close() -> None:
    modal = ModalState("m", animation_seconds=0.02)
    modal.open()
    await asyncio.sleep(0.05)

    modal.close()
    modal.open()
    await asyncio.sleep(0.05)
    assert modal.phase is ModalPhase.OPEN


def _descriptor(log: list[str], title: str = "Delete task?") -> AlertDescriptor:
    return AlertDescriptor(
        title=title,
        buttons=(
            AlertButton("Cancel", lambda: log.append("cancel"), ButtonStyle.CANCEL),
            AlertButton("Delete", lambda: log.append("delete"), ButtonStyle.DESTRUCTIVE),
        ),
    )


def test_alert_request_press_and_dismiss() -> None:
    log: list[str] = []
    alert = AlertController()
    assert alert.descriptor is None

    alert.request(_descriptor(log))
    assert alert.is_open
    assert alert.press(1)
    assert log == ["delete"]
    # Buttons close the alert themselves.
    assert alert.is_open

    alert.dismiss()
    assert not alert.is_open
    assert alert.descriptor is None
    assert alert.press(0) is False
    assert log == ["delete"]


def test_alert_out_of_range_press_does_nothing() -> None:
    log: list[str] = []
    alert = AlertController()
    alert.request(_descriptor(log))

    assert alert.press(5) is False
    assert alert.press(-1) is False
    assert log == []


def test_new_request_replaces_open_alert() -> None:
    log: list[str] = []
    alert = AlertController()
    alert.request(_descriptor(log, "first"))
    alert.request(_descriptor(log, "second"))

    assert alert.descriptor is not None
    assert alert.descriptor.title == "second"
