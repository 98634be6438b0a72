import threading
from core.entities import Gender, Resident, Shift
from exceptions.custom_errors import BedOccupiedError, ShiftRuleError
from conftest import at

WORKERS = 16


def race(target):
    """Start WORKERS threads at the same moment and collect (ok, error) outcomes."""
    barrier = threading.Barrier(WORKERS)
    outcomes = []
    lock = threading.Lock()

    def run(n):
        barrier.wait()
        try:
            target(n)
            result = (True, None)
        except Exception as e:
            result = (False, e)
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=run, args=(n,)) for n in range(WORKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


def test_only_one_overlapping_shift_wins(home):
    outcomes = race(lambda n: home.allocate_shift("M1", Shift("D1", at(11), at(12))))

    assert sum(ok for ok, _ in outcomes) == 1
    assert all(isinstance(e, ShiftRuleError) for ok, e in outcomes if not ok)
    assert home.get_shifts_for("D1") == (Shift("D1", at(11), at(12)),)


def test_only_one_admission_per_bed(home):
    outcomes = race(
        lambda n: home.admit("M1", "W1-R3-B1", Resident(f"R{n + 1}", "Ann", Gender.FEMALE, 80))
    )

    assert sum(ok for ok, _ in outcomes) == 1
    assert all(isinstance(e, BedOccupiedError) for ok, e in outcomes if not ok)
    assert sum(1 for e in home.get_logs() if e.action.startswith("ADD RESIDENT")) == 1


def test_readers_see_consistent_state_while_writing(rostered_home):
    home = rostered_home
    errors = []

    def reader(n):
        for _ in range(50):
            beds = home.get_beds()
            ids = [b.occupant.id for b in beds.values() if not b.is_vacant]
            if len(ids) != len(set(ids)):
                errors.append(ids)

    def writer(n):
        home.admit("M1", f"W2-R5-B{n // 2 % 4 + 1}", Resident(None, "Ann", Gender.FEMALE, 80))

    def mixed(n):
        return reader(n) if n % 2 else writer(n)

    race(mixed)
    assert errors == []
    assert sum(not b.is_vacant for b in home.get_beds().values()) == 4
