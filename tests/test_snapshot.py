import pytest
from core.entities import (
    Administration,
    Gender,
    MedicationDose,
    Prescription,
    Resident,
    Role,
    Shift,
    Staff,
)
from datetime import datetime, timedelta
from facility.carehome import CareHome
from exceptions.custom_errors import PersistenceError
from persistence.snapshot import TABLES, load_frames, read_snapshot, save_frames, write_snapshot
from conftest import DAY, FakeClock, at


@pytest.fixture
def populated(rostered_home):
    home = rostered_home
    home.admit("M1", "W1-R2-B1", Resident("R1", "Ann", Gender.FEMALE, 80))
    home.admit("M1", "W1-R4-B1", Resident("R2", "Bob", Gender.MALE, 71))
    dose = MedicationDose("Metformin", "500mg", "BID")
    p1 = home.add_prescription("D1", "W1-R2-B1", Prescription(None, None, None, None, (dose,)), at(11, 10))
    home.add_dose("D1", p1.id, MedicationDose("Vitamin D", "1000IU", "OD"), at(11, 15))
    p2 = home.add_prescription("D1", "W1-R4-B1", Prescription(None, None, None, None, (dose,)), at(11, 20))
    home.administer_medication("N1", "W1-R2-B1", Administration(None, p1.id, "Metformin", None, "after lunch"), at(13))
    home.administer_medication("N1", "W1-R4-B1", Administration(None, p2.id, "Metformin", None), at(13, 5))
    home.discharge_resident("N2", "W1-R4-B1", at(15))
    return home


def assert_same_home(a, b):
    assert b.get_staff() == a.get_staff()
    assert b.get_manager_id() == a.get_manager_id()
    assert set(b.get_doctor_ids()) == set(a.get_doctor_ids())
    assert set(b.get_nurse_ids()) == set(a.get_nurse_ids())
    assert b.get_shifts() == a.get_shifts()
    assert b.get_beds() == a.get_beds()
    assert b.get_prescriptions_for_resident("R1") == a.get_prescriptions_for_resident("R1")
    assert b.get_administrations_for_resident("R1") == a.get_administrations_for_resident("R1")
    assert b.get_archives() == a.get_archives()
    assert b.get_logs() == a.get_logs()


def test_frames_have_every_table(populated):
    frames = save_frames(populated)
    assert set(frames) == set(TABLES)
    for name, df in frames.items():
        assert list(df.columns) == TABLES[name]
    assert frames["staff"]["id"].iloc[-1] == "M1"


def test_frames_round_trip(populated):
    restored = load_frames(save_frames(populated))
    assert_same_home(populated, restored)


def test_excel_round_trip(populated, tmp_path):
    path = tmp_path / "carehome.xlsx"
    write_snapshot(populated, path)

    restored = read_snapshot(path)

    assert_same_home(populated, restored)
    assert restored.get_archives()[0].administrations[0].notes == ""
    assert restored.get_administrations_for_resident("R1")[0].notes == "after lunch"


def test_restored_home_keeps_working(populated, clock):
    restored = load_frames(save_frames(populated), clock=clock)

    assert restored.authenticate("M1", "secret").id == "M1"
    next_day = DAY + timedelta(days=1)
    restored.allocate_shift("M1", Shift("D1", at(11, day=next_day), at(12, day=next_day)))
    admitted = restored.admit("M1", "W1-R5-B1", Resident(None, "Cy", Gender.MALE, 66))
    assert admitted.id == "R3"


def test_missing_column(populated):
    frames = save_frames(populated)
    frames["staff"] = frames["staff"].drop(columns=["role"])
    with pytest.raises(PersistenceError, match="missing columns"):
        load_frames(frames)


def test_bad_value(populated):
    frames = save_frames(populated)
    frames["staff"].loc[0, "role"] = "JANITOR"
    with pytest.raises(PersistenceError, match="Load failed"):
        load_frames(frames)


def test_missing_file(tmp_path):
    with pytest.raises(PersistenceError):
        read_snapshot(tmp_path / "nope.xlsx")


def test_excel_keeps_text_that_looks_like_missing_values(home, tmp_path):
    home.upsert_staff("M1", Staff("N3", "None", Role.NURSE), "null", "NA")
    home.allocate_shift("M1", Shift("D1", at(11), at(12)))
    home.allocate_shift("M1", Shift("N3", at(8), at(16)))
    home.admit("M1", "W1-R2-B1", Resident("R1", "nan", Gender.FEMALE, 80))
    p = home.add_prescription(
        "D1", "W1-R2-B1", Prescription(None, None, None, None, (MedicationDose("Saline", "N/A", "n/a"),)), at(11, 30)
    )
    home.administer_medication("N3", "W1-R2-B1", Administration(None, p.id, "Saline", None, "N/A"), at(12))

    path = tmp_path / "carehome.xlsx"
    write_snapshot(home, path)
    restored = read_snapshot(path)

    assert_same_home(home, restored)
    assert restored.get_staff_by_id("N3").name == "None"
    assert restored.authenticate_username("null", "NA").id == "N3"
    assert restored.get_administrations_for_resident("R1")[0].notes == "N/A"


def test_excel_keeps_sub_second_times(tmp_path):
    clock = FakeClock(datetime(2025, 3, 3, 7, 0, 0, 123456))
    home = CareHome(clock=clock)
    home.upsert_staff(None, Staff("M1", "Mary", Role.MANAGER), "mary", "secret")
    home.upsert_staff("M1", Staff("M2", "Max", Role.MANAGER))
    home.raw_add_shift(Shift("M2", datetime(2025, 3, 3, 8, 0, 0, 500001), datetime(2025, 3, 3, 9, 15, 0, 999999)))
    clock.advance(microseconds=7)
    home.seed_default_layout()

    path = tmp_path / "carehome.xlsx"
    write_snapshot(home, path)
    restored = read_snapshot(path)

    assert restored.get_logs() == home.get_logs()
    assert restored.get_logs()[-1].time == datetime(2025, 3, 3, 7, 0, 0, 123463)
    assert restored.get_shifts() == home.get_shifts()
