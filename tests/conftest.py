import pytest
from datetime import date, datetime, time, timedelta
from core.entities import Role, Shift, Staff
from facility.carehome import CareHome

DAY = date(2025, 3, 3)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


class FakeClock:
    """Settable clock so audit timestamps and "now" defaults are deterministic."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(at(7))


@pytest.fixture
def home(clock):
    """A home with the default layout, one manager, one doctor and two nurses, no shifts."""
    h = CareHome(clock=clock)
    h.seed_default_layout()
    h.upsert_staff(None, Staff("M1", "Mary", Role.MANAGER), "mary", "secret")
    h.upsert_staff("M1", Staff("D1", "Dan", Role.DOCTOR), "dan", "pw-d1")
    h.upsert_staff("M1", Staff("N1", "Nina", Role.NURSE), "nina", "pw-n1")
    h.upsert_staff("M1", Staff("N2", "Noah", Role.NURSE), "noah", "pw-n2")
    return h


@pytest.fixture
def rostered_home(home):
    """Fully covered day: D1 11-12, N1 08-16, N2 14-22."""
    home.allocate_shift("M1", Shift("D1", at(11), at(12)))
    home.allocate_shift("M1", Shift("N1", at(8), at(16)))
    home.allocate_shift("M1", Shift("N2", at(14), at(22)))
    return home
