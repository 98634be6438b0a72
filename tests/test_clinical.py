import pytest
from datetime import timezone
from core.entities import Administration, Gender, MedicationDose, Prescription, Resident, Shift
from exceptions.custom_errors import (
    NotFoundError,
    NotRosteredError,
    UnauthorizedError,
    ValidationError,
)
from conftest import at

PARACETAMOL = MedicationDose("Paracetamol", "500mg", "BID")


def prescription(pid=None, *doses):
    return Prescription(pid, None, None, None, doses or (PARACETAMOL,))


def give(pid, medicine="Paracetamol", notes=""):
    return Administration(None, pid, medicine, None, notes)


@pytest.fixture
def occupied(rostered_home):
    rostered_home.admit("M1", "W1-R2-B1", Resident("R1", "Ann", Gender.FEMALE, 80))
    return rostered_home


def test_doctor_prescribes_then_unrostered_nurse_is_refused(home):
    home.allocate_shift("M1", Shift("D1", at(11), at(12)))
    home.allocate_shift("M1", Shift("N1", at(14), at(22)))
    home.admit("M1", "W1-R2-B1", Resident("R1", "Ann", Gender.FEMALE, 80))

    p = home.add_prescription("D1", "W1-R2-B1", prescription(), at(11, 30))
    assert (p.id, p.doctor_id, p.resident_id, p.created_at) == ("P1", "D1", "R1", at(11, 30))

    with pytest.raises(NotRosteredError):
        home.administer_medication("N1", "W1-R2-B1", give("P1"), at(13))
    assert home.get_administrations_for_resident("R1") == ()


def test_administration_recorded(occupied):
    occupied.add_prescription("D1", "W1-R2-B1", prescription("P1"), at(11, 30))
    a = occupied.administer_medication("N1", "W1-R2-B1", give("P1", notes="with food"), at(15))

    assert a.nurse_id == "N1"
    assert a.administered_at == at(15)
    assert occupied.get_administrations_for_resident("R1") == (a,)
    assert occupied.get_logs()[-1].action == "ADMINISTER Paracetamol to Ann (W1-R2-B1)"


def test_prescription_needs_a_dose(occupied):
    empty = Prescription(None, None, None, None, ())
    with pytest.raises(ValidationError):
        occupied.add_prescription("D1", "W1-R2-B1", empty, at(11, 30))


def test_duplicate_prescription_id(occupied):
    occupied.add_prescription("D1", "W1-R2-B1", prescription("P9"), at(11, 30))
    with pytest.raises(ValidationError, match="already in use"):
        occupied.add_prescription("D1", "W1-R2-B1", prescription("P9"), at(11, 40))


def test_prescribing_checks_role_before_roster(occupied):
    with pytest.raises(UnauthorizedError):
        occupied.add_prescription("N1", "W1-R2-B1", prescription(), at(9))
    with pytest.raises(NotRosteredError):
        occupied.add_prescription("D1", "W1-R2-B1", prescription(), at(13))


def test_prescribing_for_vacant_bed(occupied):
    with pytest.raises(NotFoundError):
        occupied.add_prescription("D1", "W1-R2-B2", prescription(), at(11, 30))


def test_administering_unknown_prescription(occupied):
    with pytest.raises(NotFoundError):
        occupied.administer_medication("N1", "W1-R2-B1", give("P404"), at(9))


def test_administering_another_residents_prescription(occupied):
    occupied.admit("M1", "W1-R3-B1", Resident("R2", "Bea", Gender.FEMALE, 75))
    occupied.add_prescription("D1", "W1-R3-B1", prescription("P1"), at(11, 30))

    with pytest.raises(NotFoundError):
        occupied.administer_medication("N1", "W1-R2-B1", give("P1"), at(15))
    occupied.administer_medication("N1", "W1-R3-B1", give("P1"), at(15))


def test_only_nurses_administer(occupied):
    occupied.add_prescription("D1", "W1-R2-B1", prescription("P1"), at(11, 30))
    with pytest.raises(UnauthorizedError):
        occupied.administer_medication("D1", "W1-R2-B1", give("P1"), at(11, 45))


def test_add_dose(occupied):
    occupied.add_prescription("D1", "W1-R2-B1", prescription("P1"), at(11, 15))
    extra = MedicationDose("Ibuprofen", "200mg", "PRN")

    updated = occupied.add_dose("D1", "P1", extra, at(11, 45))

    assert updated.doses == (PARACETAMOL, extra)
    assert occupied.get_prescriptions_for_resident("R1") == (updated,)
    with pytest.raises(NotFoundError):
        occupied.add_dose("D1", "P2", extra, at(11, 45))


def test_prescription_ids_continue_after_discharge(occupied):
    occupied.add_prescription("D1", "W1-R2-B1", prescription(), at(11, 15))
    occupied.discharge_resident("D1", "W1-R2-B1", at(11, 30))
    occupied.admit("M1", "W1-R2-B1", Resident("R2", "Bea", Gender.FEMALE, 75))

    assert occupied.add_prescription("D1", "W1-R2-B1", prescription(), at(11, 45)).id == "P2"


def test_timezone_aware_clinical_times_rejected(occupied):
    aware = at(11, 30).replace(tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        occupied.add_prescription("D1", "W1-R2-B1", prescription(), aware)

    stamped = Prescription(None, None, None, aware, (PARACETAMOL,))
    with pytest.raises(ValidationError, match="created_at"):
        occupied.add_prescription("D1", "W1-R2-B1", stamped, at(11, 30))
    assert occupied.get_prescriptions_for_resident("R1") == ()
