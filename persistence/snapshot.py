import pandas as pd
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, IO, List, Optional, Union
from core.entities import (
    ActionLog,
    Administration,
    ArchivedStay,
    Gender,
    MedicationDose,
    Prescription,
    Resident,
    Role,
    Shift,
    Staff,
)
from exceptions.custom_errors import CareHomeError, PersistenceError
from facility.carehome import CareHome
from utils.logger import logger
from utils.shift_utils import normalise_datetime

"""
Tabular snapshot of a care home: one DataFrame per table, optionally written
to an Excel workbook with one sheet per table. Restores go through the raw_*
primitives of the facade and never re-run business validation.
"""

TABLES = {
    "staff": ["id", "name", "role", "username", "password"],
    "shifts": ["staff_id", "start", "end"],
    "beds": ["bed_id", "resident_id", "resident_name", "gender", "age"],
    "prescriptions": ["stay", "id", "doctor_id", "resident_id", "created_at"],
    "doses": ["stay", "prescription_id", "seq", "medicine", "dosage", "frequency"],
    "administrations": [
        "stay", "nurse_id", "prescription_id", "medicine", "administered_at", "notes",
    ],
    "archives": [
        "stay", "resident_id", "resident_name", "gender", "age", "last_bed_id", "discharged_at",
    ],
    "logs": ["time", "staff_id", "action"],
}

# "stay" column: -1 marks live records, n >= 0 the index of the archived stay
LIVE = -1

# Written to Excel as ISO strings; native Excel dates keep only milliseconds
DATETIME_COLUMNS = {
    "shifts": ["start", "end"],
    "prescriptions": ["created_at"],
    "administrations": ["administered_at"],
    "archives": ["discharged_at"],
    "logs": ["time"],
}


def _frame(name: str, rows: List[dict]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=TABLES[name])


def _prescription_rows(stay: int, prescriptions, pres_rows: List[dict], dose_rows: List[dict]):
    for p in prescriptions:
        pres_rows.append(
            {
                "stay": stay,
                "id": p.id,
                "doctor_id": p.doctor_id,
                "resident_id": p.resident_id,
                "created_at": p.created_at,
            }
        )
        for seq, d in enumerate(p.doses):
            dose_rows.append(
                {
                    "stay": stay,
                    "prescription_id": p.id,
                    "seq": seq,
                    "medicine": d.medicine,
                    "dosage": d.dosage,
                    "frequency": d.frequency,
                }
            )


def _administration_rows(stay: int, administrations, rows: List[dict]):
    for a in administrations:
        rows.append(
            {
                "stay": stay,
                "nurse_id": a.nurse_id,
                "prescription_id": a.prescription_id,
                "medicine": a.medicine,
                "administered_at": a.administered_at,
                "notes": a.notes,
            }
        )


def save_frames(home: CareHome) -> Dict[str, pd.DataFrame]:
    """Capture every registry of `home` as a dict of DataFrames keyed by table name."""
    with home.exclusive():
        state = home.snapshot()

    staff = [
        {"id": s.id, "name": s.name, "role": s.role.value, "username": s.username, "password": s.password}
        for s in state.staff_by_id.values()
    ]
    # Put the designated manager last so a replay through put_staff re-designates it
    staff.sort(key=lambda row: row["id"] == state.manager_id)

    shifts = [{"staff_id": s.staff_id, "start": s.start, "end": s.end} for s in state.shifts]

    beds = []
    for bed in state.beds.values():
        r = bed.occupant
        beds.append(
            {
                "bed_id": bed.id,
                "resident_id": r.id if r else None,
                "resident_name": r.name if r else None,
                "gender": r.gender.value if r else None,
                "age": r.age if r else None,
            }
        )

    pres_rows, dose_rows, admin_rows, archive_rows = [], [], [], []
    for plist in state.prescriptions_by_resident.values():
        _prescription_rows(LIVE, plist, pres_rows, dose_rows)
    _administration_rows(LIVE, state.administrations, admin_rows)

    for idx, stay in enumerate(state.archives):
        archive_rows.append(
            {
                "stay": idx,
                "resident_id": stay.resident_id,
                "resident_name": stay.resident_name,
                "gender": stay.gender.value,
                "age": stay.age,
                "last_bed_id": stay.last_bed_id,
                "discharged_at": stay.discharged_at,
            }
        )
        _prescription_rows(idx, stay.prescriptions, pres_rows, dose_rows)
        _administration_rows(idx, stay.administrations, admin_rows)

    logs = [{"time": l.time, "staff_id": l.staff_id, "action": l.action} for l in state.logs]

    return {
        "staff": _frame("staff", staff),
        "shifts": _frame("shifts", shifts),
        "beds": _frame("beds", beds),
        "prescriptions": _frame("prescriptions", pres_rows),
        "doses": _frame("doses", dose_rows),
        "administrations": _frame("administrations", admin_rows),
        "archives": _frame("archives", archive_rows),
        "logs": _frame("logs", logs),
    }


def _text(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


def _iso(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).isoformat()


def _when(value) -> Optional[datetime]:
    if value is None or pd.isna(value):
        return None
    return normalise_datetime(value)


def _rows(frames: Dict[str, pd.DataFrame], name: str) -> List[dict]:
    df = frames.get(name)
    if df is None:
        return []
    missing = set(TABLES[name]) - set(df.columns)
    if missing:
        raise PersistenceError(f"Table {name!r} is missing columns: {sorted(missing)}")
    return df.to_dict(orient="records")


def _group_prescriptions(frames) -> Dict[int, List[Prescription]]:
    doses: Dict[tuple, List[tuple]] = {}
    for row in _rows(frames, "doses"):
        key = (int(row["stay"]), _text(row["prescription_id"]))
        doses.setdefault(key, []).append(
            (
                int(row["seq"]),
                MedicationDose(_text(row["medicine"]), _text(row["dosage"]), _text(row["frequency"])),
            )
        )

    grouped: Dict[int, List[Prescription]] = {}
    for row in _rows(frames, "prescriptions"):
        stay, pid = int(row["stay"]), _text(row["id"])
        ordered = tuple(d for _, d in sorted(doses.get((stay, pid), []), key=lambda t: t[0]))
        grouped.setdefault(stay, []).append(
            Prescription(
                id=pid,
                doctor_id=_text(row["doctor_id"]),
                resident_id=_text(row["resident_id"]),
                created_at=_when(row["created_at"]),
                doses=ordered,
            )
        )
    return grouped


def _group_administrations(frames) -> Dict[int, List[Administration]]:
    grouped: Dict[int, List[Administration]] = {}
    for row in _rows(frames, "administrations"):
        grouped.setdefault(int(row["stay"]), []).append(
            Administration(
                nurse_id=_text(row["nurse_id"]),
                prescription_id=_text(row["prescription_id"]),
                medicine=_text(row["medicine"]),
                administered_at=_when(row["administered_at"]),
                notes=_text(row["notes"]) or "",
            )
        )
    return grouped


def load_frames(
    frames: Dict[str, pd.DataFrame], clock: Optional[Callable[[], datetime]] = None
) -> CareHome:
    """Rebuild a CareHome from the tables produced by `save_frames`."""
    home = CareHome(clock=clock)
    try:
        with home.exclusive():
            for row in _rows(frames, "staff"):
                home.raw_put_staff(
                    Staff(
                        id=_text(row["id"]),
                        name=_text(row["name"]),
                        role=Role(row["role"]),
                        username=_text(row["username"]),
                        password=_text(row["password"]),
                    )
                )

            for row in _rows(frames, "shifts"):
                home.raw_add_shift(
                    Shift(_text(row["staff_id"]), _when(row["start"]), _when(row["end"]))
                )

            for row in _rows(frames, "beds"):
                bed_id = _text(row["bed_id"])
                home.raw_add_bed(bed_id)
                if _text(row["resident_id"]) is not None:
                    home.raw_set_resident_in_bed(
                        bed_id,
                        Resident(
                            id=_text(row["resident_id"]),
                            name=_text(row["resident_name"]),
                            gender=Gender(row["gender"]),
                            age=int(row["age"]),
                        ),
                    )

            prescriptions = _group_prescriptions(frames)
            administrations = _group_administrations(frames)

            for p in prescriptions.get(LIVE, []):
                home.raw_add_prescription(p.resident_id, p)
            for a in administrations.get(LIVE, []):
                home.raw_add_administration(a)

            for row in sorted(_rows(frames, "archives"), key=lambda r: int(r["stay"])):
                idx = int(row["stay"])
                home.raw_add_archive(
                    ArchivedStay(
                        resident_id=_text(row["resident_id"]),
                        resident_name=_text(row["resident_name"]),
                        gender=Gender(row["gender"]),
                        age=int(row["age"]),
                        last_bed_id=_text(row["last_bed_id"]),
                        discharged_at=_when(row["discharged_at"]),
                        prescriptions=tuple(prescriptions.get(idx, [])),
                        administrations=tuple(administrations.get(idx, [])),
                    )
                )

            for row in _rows(frames, "logs"):
                home.raw_add_log(
                    ActionLog(_when(row["time"]), _text(row["staff_id"]), _text(row["action"]))
                )
    except PersistenceError:
        raise
    except (CareHomeError, KeyError, TypeError, ValueError) as e:
        raise PersistenceError(f"Load failed: {e}") from e

    logger.info("Restored snapshot with %d staff, %d beds", len(home.get_staff()), len(home.get_beds()))
    return home


def write_snapshot(home: CareHome, path_or_buffer: Union[str, Path, IO]):
    """Write `home` to an Excel workbook, one sheet per table."""
    frames = save_frames(home)
    for name, columns in DATETIME_COLUMNS.items():
        for col in columns:
            frames[name][col] = frames[name][col].map(_iso)
    try:
        with pd.ExcelWriter(path_or_buffer, engine="xlsxwriter") as writer:
            for name, df in frames.items():
                df.to_excel(writer, sheet_name=name, index=False)
    except Exception as e:
        raise PersistenceError(f"Save failed: {e}") from e
    logger.info("Snapshot written (%s)", path_or_buffer)


def read_snapshot(
    path_or_buffer: Union[str, Path, IO], clock: Optional[Callable[[], datetime]] = None
) -> CareHome:
    try:
        # Only blank cells are missing; text such as "NA" or "None" is data
        frames = pd.read_excel(
            path_or_buffer,
            sheet_name=None,
            engine="openpyxl",
            keep_default_na=False,
            na_values=[""],
        )
    except Exception as e:
        raise PersistenceError(f"Error loading snapshot: {e}") from e
    return load_frames(frames, clock=clock)
