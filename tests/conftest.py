"""Shared fixtures: a small fleet on disk."""

import logging

import pytest

from fleet import FileRegistry, FleetService, FleetStore, Reminder, Vehicle


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def store(data_dir):
    store = FleetStore(data_dir)
    store.save_vehicle(
        Vehicle(
            "ABC-123",
            make="Volvo",
            model="V70",
            year=2012,
            mileage=180000,
            reminders=[
                Reminder("Insurance Renewal", "2025-05-20", notes="Policy 42"),
                Reminder("Tyre change", "2025-06-20"),
                Reminder("Service Due", "2025-09-01"),
            ],
        )
    )
    store.save_vehicle(
        Vehicle("XYZ-9", reminders=[Reminder("Road Worthiness Certificate", "2025-06-05")])
    )
    return store


@pytest.fixture
def registry_dir(data_dir):
    path = data_dir / "registry"
    path.mkdir(parents=True)
    (path / "ABC-123.yaml").write_text(
        "roadWorthinessDate: 15.06.2025\n"
        "insurancePolicyDate: '2026-05-20'\n"
        "mileage: 185000\n"
    )
    return path


@pytest.fixture
def service(store, registry_dir):
    return FleetService(store, FileRegistry(registry_dir))


@pytest.fixture(autouse=True)
def reset_fleet_logging():
    """Drop handlers added by configure_logging so they don't outlive a captured stream."""
    yield
    logger = logging.getLogger("fleet")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
